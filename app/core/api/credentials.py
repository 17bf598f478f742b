"""Credential and profile operations against the backend

Each method sends one authenticated request. Non-2xx answers raise
RemoteRejection, missing answers raise TransportFailure.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.state.credential_store import CredentialStore

from .base import make_api_request, process_api_response, raise_for_rejection

logger = logging.getLogger(__name__)

UPDATE_PASSWORD_URL = "auth/update-password"
UPDATE_EMAIL_URL = "auth/update-email"
PROFILE_URL = "auth/me"


@dataclass(frozen=True)
class EmailChangeResult:
    """Server-confirmed outcome of an email change

    ``email`` is None when the backend answered 2xx without confirming an
    address. ``token`` is set when the backend reissued the credential.
    """
    email: Optional[str]
    token: Optional[str] = None


class RemoteCredentialService:
    """Client for the backend credential endpoints"""

    def __init__(self, store: CredentialStore):
        self.store = store

    def update_password(self, current_password: str, new_password: str) -> None:
        """Change the password; the response body is ignored"""
        action = "update_password"
        response = make_api_request(
            url=UPDATE_PASSWORD_URL,
            action=action,
            payload={
                "currentPassword": current_password,
                "newPassword": new_password
            },
            method="PUT",
            store=self.store
        )
        raise_for_rejection(response, action)
        logger.info("Password updated")

    def update_email(self, new_email: str, current_password: str) -> EmailChangeResult:
        """Change the email and return the confirmed address"""
        action = "update_email"
        response = make_api_request(
            url=UPDATE_EMAIL_URL,
            action=action,
            payload={
                "newEmail": new_email,
                "currentPassword": current_password
            },
            method="PUT",
            store=self.store
        )
        raise_for_rejection(response, action)

        data = process_api_response(response, action)
        if not isinstance(data, dict):
            logger.error("Email change response is not an object")
            return EmailChangeResult(email=None)

        email = data.get("email")
        token = data.get("token")
        return EmailChangeResult(
            email=email if isinstance(email, str) and email else None,
            token=token if isinstance(token, str) and token else None
        )

    def fetch_profile(self) -> Dict[str, Any]:
        """Get the authenticated user's profile as sent by the backend"""
        action = "fetch_profile"
        response = make_api_request(
            url=PROFILE_URL,
            action=action,
            method="GET",
            store=self.store
        )
        raise_for_rejection(response, action)

        data = process_api_response(response, action)
        if not isinstance(data, dict):
            logger.warning("Profile response is not an object")
            return {}
        return data
