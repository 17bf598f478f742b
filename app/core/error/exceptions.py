"""Core exceptions with clear error boundaries

This module defines the exceptions used throughout the account client.
Each exception maps to one error kind the form controllers reason about:

- LocalValidationError: input rejected before any network call
- RemoteRejection: the backend answered and declined the mutation
- TransportFailure: no usable response was received
- NotAuthenticatedException: no stored credential, request never issued
"""

from typing import Dict, Optional


class AccountException(Exception):
    """Base exception with error details"""
    def __init__(self, message: str, details: Optional[Dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ComponentException(AccountException):
    """Component usage errors"""
    def __init__(
        self,
        message: str,
        component: str,
        field: str,
        value: str = "",
        validation: Optional[Dict] = None
    ):
        details = {
            "component": component,
            "field": field,
            "value": value,
            "validation": validation
        }
        super().__init__(message, details)


class SystemException(AccountException):
    """System technical errors"""
    def __init__(
        self,
        message: str,
        code: str,
        service: str,
        action: str
    ):
        details = {
            "code": code,
            "service": service,
            "action": action
        }
        super().__init__(message, details)


class LocalValidationError(ComponentException):
    """Credential-change input rejected locally"""
    def __init__(self, message: str, code: str, field: str):
        self.code = code
        super().__init__(
            message=message,
            component="validation",
            field=field,
            validation={"code": code}
        )


class RemoteRejection(AccountException):
    """Backend declined the request

    ``message`` is the server-supplied reason, or None when the response
    carried no readable one.
    """
    def __init__(self, message: Optional[str], status_code: int, action: str):
        self.status_code = status_code
        self.action = action
        super().__init__(
            message or "",
            {"status_code": status_code, "action": action}
        )
        self.message = message


class TransportFailure(SystemException):
    """No usable response from the backend"""
    def __init__(self, message: str, action: str):
        super().__init__(
            message=message,
            code="TRANSPORT_FAILURE",
            service="api_client",
            action=action
        )


class NotAuthenticatedException(SystemException):
    """Authenticated request attempted without a stored credential"""
    def __init__(self, action: str):
        super().__init__(
            message="No session credential available",
            code="NOT_AUTHENTICATED",
            service="api_client",
            action=action
        )
