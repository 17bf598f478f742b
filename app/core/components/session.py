"""Session bootstrap

Sign-in stores the credential and loads the profile the security page
displays. Verification drops the credential when the backend no longer
accepts it.
"""

import asyncio
import logging
from typing import Iterable, Optional

from core.api.credentials import RemoteCredentialService
from core.api.favorites import FavoritesApi
from core.error.exceptions import (NotAuthenticatedException, RemoteRejection,
                                   TransportFailure)
from core.state.credential_store import (AccountProfile, CredentialStore)

logger = logging.getLogger(__name__)

# Status codes meaning the credential itself was refused
AUTH_FAILURE_CODES = (401, 403)


class AccountSession:
    """Sign-in, verification and sign-out over one credential store"""

    def __init__(
        self,
        store: CredentialStore,
        credentials: Optional[RemoteCredentialService] = None,
        favorites: Optional[FavoritesApi] = None
    ):
        self.store = store
        self.credentials = credentials or RemoteCredentialService(store)
        self.favorites = favorites or FavoritesApi(store)

    async def sign_in(self, token: str, local_favorites: Optional[Iterable[int]] = None) -> bool:
        """Store a credential issued at login and load the profile

        Args:
            token: Credential issued by the login endpoint
            local_favorites: Favorites collected while signed out

        Returns:
            bool: Whether the backend accepted the credential
        """
        self.store.replace_credential(token)
        if not await self.verify():
            return False

        ids = list(local_favorites or [])
        if ids:
            try:
                merged = await asyncio.to_thread(self.favorites.merge_favorites, ids)
                logger.info(f"Merged {len(ids)} local favorites, {len(merged)} total")
            except (NotAuthenticatedException, RemoteRejection, TransportFailure) as e:
                logger.error(f"Error merging favorites: {e.message}")

        return True

    async def verify(self) -> bool:
        """Reload the profile for the stored credential

        Returns:
            bool: False when signed out or the credential was refused
        """
        if not self.store.is_authenticated():
            return False

        try:
            data = await asyncio.to_thread(self.credentials.fetch_profile)
        except RemoteRejection as e:
            if e.status_code in AUTH_FAILURE_CODES:
                logger.warning(f"Credential refused ({e.status_code}), signing out")
                self.store.clear_credential()
            else:
                logger.error(f"Authentication verification error: {e.message}")
            return False
        except NotAuthenticatedException:
            logger.warning("Signed out while the profile was loading")
            return False
        except TransportFailure as e:
            logger.error(f"Authentication verification error: {e.message}")
            return False

        self.store.update_profile(AccountProfile.partial_from_wire(data))
        return True

    def sign_out(self) -> None:
        self.store.clear_credential()
