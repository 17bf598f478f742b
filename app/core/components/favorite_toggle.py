"""Favorite toggle for one character

Signed-out viewers always see the default, not-favorited control and no
request is made for them. Errors leave the control as it was, except a
failed initial fetch which shows "not favorited".
"""

import asyncio
import logging

from core.api.favorites import FavoritesApi
from core.error.exceptions import (NotAuthenticatedException, RemoteRejection,
                                   TransportFailure)
from core.state.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class FavoriteToggle:
    """Favorite state of one character for the current viewer"""

    def __init__(self, character_id: int, store: CredentialStore, api: FavoritesApi):
        self.character_id = int(character_id)
        self.store = store
        self.api = api
        self.is_favorite = False
        self.loading = False

    @property
    def label(self) -> str:
        return "Remove from favorites" if self.is_favorite else "Add to favorites"

    async def refresh(self) -> bool:
        """Load whether the character is a favorite"""
        if not self.store.is_authenticated():
            self.is_favorite = False
            return self.is_favorite

        try:
            favorites = await asyncio.to_thread(self.api.fetch_favorites)
        except (NotAuthenticatedException, RemoteRejection, TransportFailure) as e:
            logger.error(f"Error fetching favorites: {e.message}")
            self.is_favorite = False
            return self.is_favorite

        self.is_favorite = self.character_id in favorites
        return self.is_favorite

    async def toggle(self) -> bool:
        """Flip the favorite state on the backend"""
        if self.loading:
            return self.is_favorite

        if not self.store.is_authenticated():
            logger.warning("No session credential, sign in to toggle favorites")
            return self.is_favorite

        self.loading = True
        try:
            favorites = await asyncio.to_thread(self.api.toggle_favorite, self.character_id)
        except (NotAuthenticatedException, RemoteRejection, TransportFailure) as e:
            logger.error(f"Error updating favorite: {e.message}")
        else:
            self.is_favorite = self.character_id in favorites
        finally:
            self.loading = False

        return self.is_favorite
