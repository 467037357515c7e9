"""OAuth storage backends."""

from oauth_storage.managers.base import AuthCodeManager, ClientManager, TokenManager, UserProvider
from oauth_storage.managers.memory import (
    MemoryAuthCodeManager,
    MemoryClientManager,
    MemoryTokenManager,
    MemoryUserProvider,
)

__all__ = [
    'AuthCodeManager',
    'ClientManager',
    'MemoryAuthCodeManager',
    'MemoryClientManager',
    'MemoryTokenManager',
    'MemoryUserProvider',
    'TokenManager',
    'UserProvider',
]
