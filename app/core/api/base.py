"""Request plumbing shared by the backend clients"""
import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import urljoin

import requests
from config import settings
from core.error.exceptions import (NotAuthenticatedException, RemoteRejection,
                                   TransportFailure)
from core.error.handler import ErrorHandler
from core.state.credential_store import CredentialStore
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

BASE_URL = settings.API_BASE_URL
TIMEOUT = settings.REQUEST_TIMEOUT  # seconds


def build_url(url: str) -> str:
    """Resolve an endpoint path against the API base URL"""
    if url.startswith(('http://', 'https://')):
        return url
    return urljoin(BASE_URL, url.lstrip('/'))


def get_headers(store: Optional[CredentialStore], action: str, authenticated: bool = True) -> Dict[str, str]:
    """Get request headers with the bearer credential

    The credential is read from the store at call time, so a credential
    replaced by a previous response is the one presented here.

    Args:
        store: Credential store to read the session credential from
        action: Action name for error context
        authenticated: Whether the endpoint needs the credential

    Returns:
        Dict[str, str]: Request headers

    Raises:
        NotAuthenticatedException: If the endpoint needs a credential and none is stored
    """
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    if not authenticated:
        return headers

    token = store.current_credential() if store else None
    if not token:
        logger.warning(f"No session credential for {action}, request not sent")
        raise NotAuthenticatedException(action=action)

    headers["Authorization"] = f"Bearer {token}"
    return headers


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy of headers safe to log"""
    redacted = dict(headers)
    if "Authorization" in redacted:
        redacted["Authorization"] = "Bearer ***"
    return redacted


def make_api_request(
    url: str,
    action: str,
    payload: Optional[Dict[str, Any]] = None,
    method: str = "POST",
    store: Optional[CredentialStore] = None,
    authenticated: bool = True
) -> requests.Response:
    """Make API request with logging and error translation

    Transport errors are translated into TransportFailure here so callers
    never see requests exceptions.

    Raises:
        NotAuthenticatedException: If no credential is stored for an authenticated endpoint
        TransportFailure: If no response was received
    """
    url = build_url(url)
    headers = get_headers(store, action, authenticated)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Making API request: {method} {url}")
        logger.debug(f"Headers: {redact_headers(headers)}")

    try:
        response = requests.request(
            method,
            url,
            headers=headers,
            json=payload,
            timeout=TIMEOUT
        )
    except RequestException as e:
        ErrorHandler.handle_system_error(
            code="REQUEST_FAILED",
            service="api_client",
            action=action,
            message=f"Request failed: {method} {url}",
            error=e
        )
        raise TransportFailure(message=f"Request failed: {str(e)}", action=action) from e

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"API Response Status: {response.status_code}")

    return response


def is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def process_api_response(response: requests.Response, action: str) -> Union[Dict[str, Any], list, None]:
    """Parse a JSON response body

    Returns None for an empty body.

    Raises:
        TransportFailure: If the body is not valid JSON
    """
    if not response.content:
        return None

    content_type = response.headers.get("Content-Type", "")
    if "application/json" not in content_type:
        logger.warning(f"Unexpected Content-Type: {content_type}")

    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Failed to parse response JSON: {e}")
        raise TransportFailure(message="Invalid JSON response", action=action) from e


def extract_error_message(response: requests.Response) -> Optional[str]:
    """Get a human-readable reason from an error response

    Looks at ``message`` first, then ``error``.
    """
    try:
        data = response.json()
    except ValueError:
        return None

    if not isinstance(data, dict):
        return None

    for key in ("message", "error"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def raise_for_rejection(response: requests.Response, action: str) -> None:
    """Raise RemoteRejection for non-2xx responses"""
    if is_success(response):
        return

    message = extract_error_message(response)
    ErrorHandler.handle_remote_error(
        action=action,
        status_code=response.status_code,
        message=message
    )
    raise RemoteRejection(message=message, status_code=response.status_code, action=action)
