"""Session credential and account profile store

This module holds the point-in-time mirror of server-confirmed session data:
- Single current credential (bearer token)
- Single current profile snapshot
- Atomic replacement under a lock

It is not a cache. Nothing here expires, retries or refreshes.
"""

import logging
import threading
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from core.error.exceptions import ComponentException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountProfile:
    """Authenticated user's profile fields"""
    email: str = ""
    phone_number: Optional[str] = None
    two_factor_enabled: bool = False

    # Wire names used by the backend
    WIRE_FIELDS = {
        "email": "email",
        "phoneNumber": "phone_number",
        "twoFactorEnabled": "two_factor_enabled",
    }

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}

    @classmethod
    def partial_from_wire(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Map backend profile fields to a profile partial

        Fields absent from ``data`` are left out of the partial.
        """
        partial = {}
        for wire_name, name in cls.WIRE_FIELDS.items():
            if wire_name in data:
                partial[name] = data[wire_name]
        if "two_factor_enabled" in partial:
            partial["two_factor_enabled"] = bool(partial["two_factor_enabled"])
        return partial


class CredentialStore:
    """Holds the current session credential and account profile"""

    def __init__(
        self,
        credential: Optional[str] = None,
        profile: Optional[AccountProfile] = None
    ):
        self._lock = threading.RLock()
        self._credential = credential or None
        self._profile = profile or AccountProfile()

    def current_credential(self) -> Optional[str]:
        """Get the active credential, None when signed out"""
        with self._lock:
            return self._credential

    def is_authenticated(self) -> bool:
        return self.current_credential() is not None

    def replace_credential(self, new_credential: str) -> None:
        """Swap the active credential

        The swap is visible to the next request built from this store.

        Raises:
            ComponentException: If the credential is empty
        """
        if not new_credential or not isinstance(new_credential, str):
            raise ComponentException(
                message="Credential must be a non-empty string",
                component="credential_store",
                field="credential",
                value=str(type(new_credential))
            )

        with self._lock:
            self._credential = new_credential
        logger.info("Session credential replaced")

    def clear_credential(self) -> None:
        """Drop the credential and profile (sign-out path)"""
        with self._lock:
            self._credential = None
            self._profile = AccountProfile()
        logger.info("Session credential cleared")

    def current_profile(self) -> AccountProfile:
        """Get the current profile snapshot"""
        with self._lock:
            return self._profile

    def update_profile(self, partial: Dict[str, Any]) -> AccountProfile:
        """Merge fields into the profile

        Fields not present in ``partial`` keep their value.

        Args:
            partial: Profile fields to update

        Returns:
            AccountProfile: The merged snapshot

        Raises:
            ComponentException: If ``partial`` names unknown fields
        """
        if not isinstance(partial, dict):
            raise ComponentException(
                message="Profile updates must be a dictionary",
                component="credential_store",
                field="partial",
                value=str(type(partial))
            )

        unknown = set(partial) - AccountProfile.field_names()
        if unknown:
            raise ComponentException(
                message=f"Unknown profile fields: {', '.join(sorted(unknown))}",
                component="credential_store",
                field="partial",
                value=", ".join(sorted(unknown))
            )

        with self._lock:
            self._profile = replace(self._profile, **partial)
            profile = self._profile

        logger.debug(f"Profile updated: {sorted(partial)}")
        return profile
