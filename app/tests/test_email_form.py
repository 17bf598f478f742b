import asyncio
import threading
import unittest
from unittest.mock import MagicMock, patch

from core.api.credentials import EmailChangeResult, RemoteCredentialService
from core.components import EmailChangeForm
from core.error.exceptions import RemoteRejection
from core.error.types import ErrorKind, ValidationCode
from core.messaging.interface import Severity
from core.messaging.service import CollectingNotificationSink
from core.state.credential_store import AccountProfile, CredentialStore
from core.state.form_state import Editing, Idle, Submitting

from tests.support import make_response, sent_headers


class TestEmailChangeForm(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.profile = AccountProfile(email="bob@example.com", phone_number="5551234567", two_factor_enabled=True)
        self.store = CredentialStore(credential="tok1", profile=self.profile)
        self.service = MagicMock()
        self.sink = CollectingNotificationSink()
        self.form = EmailChangeForm(self.store, self.service, self.sink)

    def fill(self, new_email="new@x.com", password="secret1"):
        self.form.open()
        self.form.set_field("newEmail", new_email)
        self.form.set_field("currentPassword", password)

    def test_editor_opens_with_current_email(self):
        state = self.form.open()
        self.assertEqual(dict(state.fields), {"newEmail": "bob@example.com", "currentPassword": ""})

    async def test_invalid_email_stays_local(self):
        self.fill(new_email="not-an-email")

        state = await self.form.submit()

        self.service.update_email.assert_not_called()
        self.assertIsInstance(state.phase, Editing)
        self.assertEqual(state.error.kind, ErrorKind.LOCAL_VALIDATION)
        self.assertEqual(state.error.code, ValidationCode.INVALID_FORMAT)
        self.assertEqual(state.error_message, "Invalid email!")
        self.assertEqual(self.store.current_profile(), self.profile)

    async def test_success_replaces_credential_and_email(self):
        self.service.update_email.return_value = EmailChangeResult(email="new@x.com", token="tok2")
        self.fill()

        state = await self.form.submit()

        self.service.update_email.assert_called_once_with(new_email="new@x.com", current_password="secret1")
        self.assertEqual(self.store.current_credential(), "tok2")
        self.assertEqual(self.store.current_profile().email, "new@x.com")
        self.assertEqual(self.store.current_profile().phone_number, "5551234567")
        self.assertIsInstance(state.phase, Idle)
        self.assertEqual(self.sink.latest.severity, Severity.SUCCESS)
        self.assertEqual(self.sink.latest.message, "Email successfully updated!")

    async def test_success_resets_fields_to_confirmed_email(self):
        self.service.update_email.return_value = EmailChangeResult(email="confirmed@x.com")
        self.fill(new_email="new@x.com")

        state = await self.form.submit()

        self.assertEqual(self.store.current_profile().email, "confirmed@x.com")
        self.assertEqual(dict(state.fields), {"newEmail": "confirmed@x.com", "currentPassword": ""})
        self.assertEqual(self.store.current_credential(), "tok1")

    async def test_same_email_is_idempotent(self):
        self.service.update_email.return_value = EmailChangeResult(email="bob@example.com")
        self.fill(new_email="bob@example.com")

        state = await self.form.submit()

        self.assertIsInstance(state.phase, Idle)
        self.assertEqual(self.store.current_profile(), self.profile)

    async def test_rejection_keeps_profile_and_input(self):
        self.service.update_email.side_effect = RemoteRejection(
            message="Incorrect password", status_code=401, action="update_email"
        )
        self.fill(password="wrong")

        state = await self.form.submit()

        self.assertIsInstance(state.phase, Editing)
        self.assertEqual(state.error_message, "Incorrect password")
        self.assertEqual(dict(state.fields), {"newEmail": "new@x.com", "currentPassword": "wrong"})
        self.assertEqual(self.store.current_profile(), self.profile)
        self.assertEqual(self.store.current_credential(), "tok1")

    async def test_response_without_email_fails(self):
        self.service.update_email.return_value = EmailChangeResult(email=None, token="tok2")
        self.fill()

        state = await self.form.submit()

        self.assertIsInstance(state.phase, Editing)
        self.assertEqual(state.error_message, "Error changing email")
        self.assertEqual(self.store.current_profile().email, "bob@example.com")
        self.assertEqual(self.store.current_credential(), "tok2")

    async def test_teardown_still_applies_credential(self):
        gate = threading.Event()

        def update_email(**kwargs):
            gate.wait(5)
            return EmailChangeResult(email="new@x.com", token="tok2")

        self.service.update_email.side_effect = update_email
        self.fill()

        task = asyncio.create_task(self.form.submit())
        await asyncio.sleep(0)
        self.form.teardown()
        gate.set()
        await task

        self.assertEqual(self.store.current_credential(), "tok2")
        self.assertEqual(self.store.current_profile().email, "new@x.com")
        self.assertIsInstance(self.form.phase, Submitting)
        self.assertIsNone(self.sink.latest)


    async def test_cancelled_submit_still_applies_credential(self):
        gate = threading.Event()
        self.addCleanup(gate.set)

        def update_email(**kwargs):
            gate.wait(5)
            return EmailChangeResult(email="new@x.com", token="tok2")

        self.service.update_email.side_effect = update_email
        self.fill()

        task = asyncio.create_task(self.form.submit())
        await asyncio.sleep(0)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertIsInstance(self.form.phase, Editing)
        self.assertEqual(self.form.state.fields["newEmail"], "new@x.com")

        gate.set()
        for _ in range(200):
            if self.store.current_credential() == "tok2":
                break
            await asyncio.sleep(0.01)

        self.assertEqual(self.store.current_credential(), "tok2")
        self.assertEqual(self.store.current_profile().email, "new@x.com")
        self.assertIsInstance(self.form.phase, Editing)
        self.assertIsNone(self.sink.latest)



class TestEmailChangeOrdering(unittest.IsolatedAsyncioTestCase):
    """The call after an email change carries the reissued credential"""

    @patch("core.api.base.requests.request")
    async def test_next_call_uses_reissued_credential(self, mock_request):
        mock_request.side_effect = [
            make_response(200, {"success": True, "email": "new@x.com", "token": "tok2"}),
            make_response(200, {"email": "new@x.com", "phoneNumber": None, "twoFactorEnabled": False}),
        ]
        store = CredentialStore(credential="tok1", profile=AccountProfile(email="bob@example.com"))
        service = RemoteCredentialService(store)
        form = EmailChangeForm(store, service, CollectingNotificationSink())

        form.open()
        form.set_field("newEmail", "new@x.com")
        form.set_field("currentPassword", "secret1")
        await form.submit()
        service.fetch_profile()

        first, second = mock_request.call_args_list
        self.assertEqual(sent_headers(first)["Authorization"], "Bearer tok1")
        self.assertEqual(sent_headers(second)["Authorization"], "Bearer tok2")


if __name__ == '__main__':
    unittest.main()
