"""Component system

This package provides the account security components:
- Form controller base
- Password and email change forms
- Two-factor status projection
- Favorite toggle
- Session bootstrap and security page
"""

# Base interfaces
from .base import FormController

# Credential-change forms
from .email_form import EmailChangeForm
from .password_form import PasswordChangeForm

# Display projections
from .two_factor import (TwoFactorChannel, TwoFactorProjection,
                         TwoFactorStatus, format_phone_number)

# Thin collaborators
from .favorite_toggle import FavoriteToggle
from .security_page import SecurityPage
from .session import AccountSession

__all__ = [
    'AccountSession',
    'EmailChangeForm',
    'FavoriteToggle',
    'FormController',
    'PasswordChangeForm',
    'SecurityPage',
    'TwoFactorChannel',
    'TwoFactorProjection',
    'TwoFactorStatus',
    'format_phone_number',
]
