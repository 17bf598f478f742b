"""Local validation for credential-change input"""
from .credentials import (
    EMAIL_PATTERN,
    MIN_PASSWORD_LENGTH,
    validate_email_change,
    validate_password_change,
)

__all__ = [
    'EMAIL_PATTERN',
    'MIN_PASSWORD_LENGTH',
    'validate_email_change',
    'validate_password_change',
]
