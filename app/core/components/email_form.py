"""Email change form

Fields: newEmail, currentPassword. The editor opens with the current
email filled in and returns to the server-confirmed email on success.
"""

import logging
from typing import Dict, Optional

from core.api.credentials import EmailChangeResult, RemoteCredentialService
from core.error.types import ErrorKind, FormError, ValidationResult
from core.validation.credentials import validate_email_change

from .base import FormController

logger = logging.getLogger(__name__)


class EmailChangeForm(FormController):
    """Changes the account email after proving the current password"""

    form_type = "email"
    field_names = ("newEmail", "currentPassword")

    service: RemoteCredentialService

    def initial_fields(self) -> Dict[str, str]:
        return {
            "newEmail": self.store.current_profile().email,
            "currentPassword": ""
        }

    def validate(self, fields: Dict[str, str]) -> ValidationResult:
        return validate_email_change(fields["newEmail"])

    def dispatch(self, fields: Dict[str, str]) -> EmailChangeResult:
        return self.service.update_email(
            new_email=fields["newEmail"],
            current_password=fields["currentPassword"]
        )

    def apply_success(self, outcome: EmailChangeResult) -> Optional[FormError]:
        """Replace the credential, then record the confirmed email

        The credential goes first: any request built after this point must
        carry the reissued token.
        """
        if outcome.token:
            self.store.replace_credential(outcome.token)

        if outcome.email is None:
            logger.error("Email change succeeded without a confirmed email")
            return FormError(
                kind=ErrorKind.TRANSPORT_FAILURE,
                message=self.fallback_message
            )

        self.store.update_profile({"email": outcome.email})
        return None
