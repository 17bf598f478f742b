"""API package for backend interactions"""
from .credentials import EmailChangeResult, RemoteCredentialService
from .favorites import FavoritesApi

__all__ = [
    'EmailChangeResult',
    'FavoritesApi',
    'RemoteCredentialService',
]
