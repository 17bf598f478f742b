"""Security page

Composes the email form, the password form and the two-factor status over
one credential store. The two forms are independent and may be submitting
at the same time.
"""

from typing import Any, Dict, Optional

from core.api.credentials import RemoteCredentialService
from core.messaging.interface import NotificationSink
from core.messaging.service import LoggingNotificationSink
from core.state.credential_store import CredentialStore

from .email_form import EmailChangeForm
from .password_form import PasswordChangeForm
from .two_factor import TwoFactorProjection


class SecurityPage:
    """Account security section of the user page"""

    def __init__(
        self,
        store: CredentialStore,
        service: Optional[RemoteCredentialService] = None,
        notifications: Optional[NotificationSink] = None
    ):
        self.store = store
        self.service = service or RemoteCredentialService(store)
        self.notifications = notifications or LoggingNotificationSink()

        self.email_form = EmailChangeForm(store, self.service, self.notifications)
        self.password_form = PasswordChangeForm(store, self.service, self.notifications)
        self.two_factor = TwoFactorProjection(store)

    def teardown(self) -> None:
        """Unmount both forms"""
        self.email_form.teardown()
        self.password_form.teardown()

    def snapshot(self) -> Dict[str, Any]:
        """Display data for the page"""
        two_factor = self.two_factor.status
        return {
            "email": self.store.current_profile().email,
            "email_form": {
                "phase": self.email_form.phase.name,
                "error": self.email_form.state.error_message,
            },
            "password_form": {
                "phase": self.password_form.phase.name,
                "error": self.password_form.state.error_message,
            },
            "two_factor": {
                "channel": two_factor.channel.value,
                "email_verification": two_factor.email_verification_active,
                "sms_verification": two_factor.sms_verification_active,
                "caption": two_factor.caption,
            },
        }
