"""Session and form state"""
from .credential_store import AccountProfile, CredentialStore
from .form_state import (Editing, Failed, FormState, Idle, Phase, Submitting,
                         Succeeded)

__all__ = [
    'AccountProfile',
    'CredentialStore',
    'Editing',
    'Failed',
    'FormState',
    'Idle',
    'Phase',
    'Submitting',
    'Succeeded',
]
