"""Validation results and form error values

ValidationResult carries the outcome of a local check. FormError is the value
held in a form's error slot, whatever produced it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .exceptions import LocalValidationError


class ValidationCode(str, Enum):
    """Local validation failures"""
    TOO_SHORT = "too_short"
    MISMATCH = "mismatch"
    INVALID_FORMAT = "invalid_format"


class ErrorKind(str, Enum):
    """Error kinds a form can end up with"""
    LOCAL_VALIDATION = "local_validation"
    REMOTE_REJECTION = "remote_rejection"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass
class ValidationResult:
    """Result of credential-change input validation

    Attributes:
        valid: Whether validation passed
        error: Optional error details if validation failed
        value: Optional validated value if validation passed
    """
    valid: bool
    error: Optional[Dict] = None
    value: Optional[Any] = None

    @classmethod
    def success(cls, value: Any = None) -> 'ValidationResult':
        """Passing result"""
        return cls(valid=True, value=value)

    @classmethod
    def failure(
        cls,
        message: str,
        code: ValidationCode,
        field: str = "value",
        details: Optional[Dict] = None
    ) -> 'ValidationResult':
        """Failing result with a code and the offending field name"""
        return cls(
            valid=False,
            error={
                "type": "validation",
                "code": code,
                "field": field,
                "message": message,
                **({"details": details} if details else {})
            }
        )

    @property
    def code(self) -> Optional[ValidationCode]:
        """Failure code, None when valid"""
        return self.error.get("code") if self.error else None

    @property
    def message(self) -> Optional[str]:
        """Failure message, None when valid"""
        return self.error.get("message") if self.error else None

    def raise_if_invalid(self) -> None:
        """Raise LocalValidationError for a failed result"""
        if not self.valid:
            raise LocalValidationError(
                message=self.message,
                code=self.code,
                field=self.error.get("field", "value")
            )


@dataclass(frozen=True)
class FormError:
    """Error attached to a form's error slot"""
    kind: ErrorKind
    message: str
    code: Optional[ValidationCode] = None
    status_code: Optional[int] = None

    @classmethod
    def from_local(cls, error: LocalValidationError) -> 'FormError':
        return cls(
            kind=ErrorKind.LOCAL_VALIDATION,
            message=error.message,
            code=error.code
        )


# Fallback messages per workflow when the server gives no reason
FALLBACK_MESSAGES = {
    "password": "Error changing password",
    "email": "Error changing email",
}

SUCCESS_MESSAGES = {
    "password": "Password successfully updated!",
    "email": "Email successfully updated!",
}
