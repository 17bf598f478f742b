"""Two-factor authentication status

Read-only projection of the account profile. Nothing is stored here; every
read recomputes from the credential store's current profile.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.state.credential_store import AccountProfile, CredentialStore

_TEN_DIGITS = re.compile(r"[0-9]{10}")

UNSPECIFIED_PHONE = "Unspecified"


class TwoFactorChannel(str, Enum):
    SMS = "sms"
    EMAIL = "email"
    DISABLED = "disabled"


def format_phone_number(number: Optional[str]) -> str:
    """Format a phone number for display

    A 10-digit string becomes ``+1 XXX-XXX-XXXX``; anything else is shown
    as given.
    """
    if not number:
        return UNSPECIFIED_PHONE
    if _TEN_DIGITS.fullmatch(number):
        return f"+1 {number[:3]}-{number[3:6]}-{number[6:]}"
    return number


def effective_channel(profile: AccountProfile) -> TwoFactorChannel:
    if not profile.two_factor_enabled:
        return TwoFactorChannel.DISABLED
    if profile.phone_number:
        return TwoFactorChannel.SMS
    return TwoFactorChannel.EMAIL


@dataclass(frozen=True)
class TwoFactorStatus:
    """Display data for the 2FA section"""
    channel: TwoFactorChannel
    email_verification_active: bool
    sms_verification_active: bool
    caption: str

    @classmethod
    def from_profile(cls, profile: AccountProfile) -> 'TwoFactorStatus':
        channel = effective_channel(profile)
        if channel is TwoFactorChannel.SMS:
            caption = f"Active verification via: {format_phone_number(profile.phone_number)}"
        elif channel is TwoFactorChannel.EMAIL:
            caption = "Active verification via email"
        else:
            caption = "Two-factor authentication is disabled"

        return cls(
            channel=channel,
            email_verification_active=profile.two_factor_enabled,
            sms_verification_active=channel is TwoFactorChannel.SMS,
            caption=caption
        )


class TwoFactorProjection:
    """Current 2FA status of the signed-in account"""

    def __init__(self, store: CredentialStore):
        self.store = store

    @property
    def status(self) -> TwoFactorStatus:
        return TwoFactorStatus.from_profile(self.store.current_profile())

    @property
    def channel(self) -> TwoFactorChannel:
        return self.status.channel
