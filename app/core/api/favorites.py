"""Favorites operations against the backend"""
import logging
from typing import Iterable, List

from core.error.exceptions import TransportFailure
from core.state.credential_store import CredentialStore

from .base import make_api_request, process_api_response, raise_for_rejection

logger = logging.getLogger(__name__)

FAVORITES_URL = "favorites"


def _as_ids(value, action: str) -> List[int]:
    """Favorite ids from a response body

    Raises:
        TransportFailure: If the body holds no list of ids
    """
    if isinstance(value, dict):
        value = value.get("favorites")

    if not isinstance(value, list):
        logger.error(f"Malformed favorites response for {action}: {type(value).__name__}")
        raise TransportFailure(message="Malformed favorites response", action=action)

    return [item for item in value if isinstance(item, int) and not isinstance(item, bool)]


class FavoritesApi:
    """Client for the favorites endpoints"""

    def __init__(self, store: CredentialStore):
        self.store = store

    def fetch_favorites(self) -> List[int]:
        """Get the viewer's favorite character ids"""
        action = "fetch_favorites"
        response = make_api_request(
            url=FAVORITES_URL,
            action=action,
            method="GET",
            store=self.store
        )
        raise_for_rejection(response, action)
        return _as_ids(process_api_response(response, action), action)

    def toggle_favorite(self, character_id: int) -> List[int]:
        """Toggle one id and return the updated favorite set"""
        action = "toggle_favorite"
        response = make_api_request(
            url=f"{FAVORITES_URL}/{int(character_id)}",
            action=action,
            method="POST",
            store=self.store
        )
        raise_for_rejection(response, action)

        return _as_ids(process_api_response(response, action), action)

    def merge_favorites(self, character_ids: Iterable[int]) -> List[int]:
        """Merge favorites collected while signed out"""
        action = "merge_favorites"
        response = make_api_request(
            url=f"{FAVORITES_URL}/merge",
            action=action,
            payload={"favorites": [int(i) for i in character_ids]},
            method="POST",
            store=self.store
        )
        raise_for_rejection(response, action)

        return _as_ids(process_api_response(response, action), action)
