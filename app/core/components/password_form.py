"""Password change form

Fields: currentPassword, newPassword, confirmPassword. All three are
cleared on success and kept on failure.
"""

from typing import Dict

from core.api.credentials import RemoteCredentialService
from core.error.types import ValidationResult
from core.validation.credentials import validate_password_change

from .base import FormController


class PasswordChangeForm(FormController):
    """Changes the account password after proving the current one"""

    form_type = "password"
    field_names = ("currentPassword", "newPassword", "confirmPassword")

    service: RemoteCredentialService

    def validate(self, fields: Dict[str, str]) -> ValidationResult:
        return validate_password_change(fields["newPassword"], fields["confirmPassword"])

    def dispatch(self, fields: Dict[str, str]) -> None:
        self.service.update_password(
            current_password=fields["currentPassword"],
            new_password=fields["newPassword"]
        )
