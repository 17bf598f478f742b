"""Credential-change input validation using pure functions

Both validators run before any network call. They never see the current
password; only the backend can prove it.
"""
import re

from core.error.types import ValidationCode, ValidationResult

MIN_PASSWORD_LENGTH = 6

# local@domain.tld where local and domain are alphanumeric runs joined by
# single "." or "-", and the final segment is 2-3 letters.
EMAIL_PATTERN = re.compile(
    r"[A-Za-z0-9]+(?:[.-][A-Za-z0-9]+)*"
    r"@[A-Za-z0-9]+(?:[.-][A-Za-z0-9]+)*"
    r"(?:\.[A-Za-z]{2,3})+"
)

PASSWORD_TOO_SHORT = (
    f"The password must be at least {MIN_PASSWORD_LENGTH} characters long"
)
PASSWORD_MISMATCH = "Passwords do not match"
EMAIL_INVALID = "Invalid email!"


def validate_password_change(new_password: str, confirm_password: str) -> ValidationResult:
    """Validate a new password and its confirmation

    Length is checked before the match and only the first failure is
    reported.
    """
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return ValidationResult.failure(
            message=PASSWORD_TOO_SHORT,
            code=ValidationCode.TOO_SHORT,
            field="newPassword",
            details={
                "min_length": MIN_PASSWORD_LENGTH,
                "actual_length": len(new_password)
            }
        )

    if new_password != confirm_password:
        return ValidationResult.failure(
            message=PASSWORD_MISMATCH,
            code=ValidationCode.MISMATCH,
            field="confirmPassword"
        )

    return ValidationResult.success(new_password)


def validate_email_change(new_email: str) -> ValidationResult:
    """Validate a new email against the narrow address grammar"""
    if not isinstance(new_email, str) or not EMAIL_PATTERN.fullmatch(new_email):
        return ValidationResult.failure(
            message=EMAIL_INVALID,
            code=ValidationCode.INVALID_FORMAT,
            field="newEmail"
        )

    return ValidationResult.success(new_email)
