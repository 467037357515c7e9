"""OAuth 2.0 authorization server storage adapter."""

from oauth_storage.exceptions import (
    InvalidClientError,
    OAuthStorageError,
    UnsupportedGrantExtensionError,
    UserNotFoundError,
)
from oauth_storage.models import AccessToken, AuthCode, Client, RefreshToken, Token, User
from oauth_storage.storage import OAuthStorage

__all__ = [
    'AccessToken',
    'AuthCode',
    'Client',
    'InvalidClientError',
    'OAuthStorage',
    'OAuthStorageError',
    'RefreshToken',
    'Token',
    'UnsupportedGrantExtensionError',
    'User',
    'UserNotFoundError',
]
