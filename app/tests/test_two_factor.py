import unittest

from core.components.two_factor import (TwoFactorChannel, TwoFactorProjection,
                                        TwoFactorStatus, effective_channel,
                                        format_phone_number)
from core.state.credential_store import AccountProfile, CredentialStore


class TestPhoneFormatting(unittest.TestCase):
    def test_ten_digits_formatted(self):
        self.assertEqual(format_phone_number("5551234567"), "+1 555-123-4567")

    def test_other_formats_pass_through(self):
        for number in ("555123456", "55512345678", "555-123-4567", "+15551234567", "55512E4567"):
            with self.subTest(number=number):
                self.assertEqual(format_phone_number(number), number)

    def test_absent_number(self):
        self.assertEqual(format_phone_number(None), "Unspecified")
        self.assertEqual(format_phone_number(""), "Unspecified")


class TestEffectiveChannel(unittest.TestCase):
    def test_channel_mapping(self):
        for enabled, phone, expected in (
            (True, "5551234567", TwoFactorChannel.SMS),
            (True, None, TwoFactorChannel.EMAIL),
            (True, "", TwoFactorChannel.EMAIL),
            (False, "5551234567", TwoFactorChannel.DISABLED),
            (False, None, TwoFactorChannel.DISABLED),
        ):
            with self.subTest(enabled=enabled, phone=phone):
                profile = AccountProfile(email="bob@example.com", phone_number=phone, two_factor_enabled=enabled)
                self.assertEqual(effective_channel(profile), expected)

    def test_sms_status(self):
        status = TwoFactorStatus.from_profile(
            AccountProfile(email="bob@example.com", phone_number="5551234567", two_factor_enabled=True)
        )
        self.assertTrue(status.email_verification_active)
        self.assertTrue(status.sms_verification_active)
        self.assertEqual(status.caption, "Active verification via: +1 555-123-4567")

    def test_email_status(self):
        status = TwoFactorStatus.from_profile(AccountProfile(email="bob@example.com", two_factor_enabled=True))
        self.assertTrue(status.email_verification_active)
        self.assertFalse(status.sms_verification_active)
        self.assertEqual(status.caption, "Active verification via email")

    def test_disabled_status(self):
        status = TwoFactorStatus.from_profile(AccountProfile(email="bob@example.com", phone_number="5551234567"))
        self.assertFalse(status.email_verification_active)
        self.assertFalse(status.sms_verification_active)


class TestTwoFactorProjection(unittest.TestCase):
    def test_recomputes_on_profile_change(self):
        store = CredentialStore(credential="tok1", profile=AccountProfile(email="bob@example.com"))
        projection = TwoFactorProjection(store)
        self.assertEqual(projection.channel, TwoFactorChannel.DISABLED)

        store.update_profile({"two_factor_enabled": True})
        self.assertEqual(projection.channel, TwoFactorChannel.EMAIL)

        store.update_profile({"phone_number": "5551234567"})
        self.assertEqual(projection.channel, TwoFactorChannel.SMS)


if __name__ == '__main__':
    unittest.main()
