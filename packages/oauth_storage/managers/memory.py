"""In-memory OAuth storage backends for development and tests."""

import logging
import typing as t

from oauth_storage.exceptions import UserNotFoundError
from oauth_storage.managers.base import AuthCodeManager, ClientManager, TokenManager, UserProvider
from oauth_storage.models import AccessToken, AuthCode, Client, Token, User

logger = logging.getLogger(__name__)

_T = t.TypeVar('_T', bound=Token)


class MemoryClientManager(ClientManager):
    """In-memory client store.

    Warning:
        This store is not suitable for production use in multi-process
        or distributed environments. Use a persistent store instead.
    """

    def __init__(self) -> None:
        self._clients: t.Dict[str, Client] = {}
        self._next_id = 1

    async def create_client(self) -> Client:
        return Client()

    async def update_client(self, client: Client) -> None:
        if client.id is None:
            client.id = self._next_id
            self._next_id += 1
        self._clients[client.public_id] = client

    async def delete_client(self, client: Client) -> None:
        self._clients.pop(client.public_id, None)

    async def find_client_by_public_id(self, public_id: str) -> t.Optional[Client]:
        return self._clients.get(public_id)


class MemoryTokenManager(TokenManager, t.Generic[_T]):
    """In-memory token store for one token kind.

    Warning:
        This store is not suitable for production use in multi-process
        or distributed environments. Use a persistent store instead.
    """

    def __init__(self, token_class: t.Type[_T] = AccessToken) -> None:  # type: ignore[assignment]
        """Initialize memory token store.

        Args:
            token_class: Token model created by create_token().
        """
        self._token_class = token_class
        self._tokens: t.Dict[str, _T] = {}

    async def create_token(self) -> _T:
        return self._token_class()

    async def update_token(self, token: _T) -> None:
        if not token.token:
            raise ValueError('Cannot save a token without a token string')
        self._tokens[token.token] = token

    async def delete_token(self, token: _T) -> None:
        if token.token:
            self._tokens.pop(token.token, None)

    async def find_token_by_token(self, token: str) -> t.Optional[_T]:
        return self._tokens.get(token)

    async def delete_expired(self) -> int:
        expired = [key for key, token in self._tokens.items() if token.has_expired()]
        for key in expired:
            del self._tokens[key]

        if expired:
            logger.debug('Deleted %d expired %s entries', len(expired), self._token_class.__name__)
        return len(expired)


class MemoryAuthCodeManager(AuthCodeManager):
    """In-memory authorization code store."""

    def __init__(self) -> None:
        self._codes: t.Dict[str, AuthCode] = {}

    async def create_auth_code(self) -> AuthCode:
        return AuthCode()

    async def update_auth_code(self, auth_code: AuthCode) -> None:
        if not auth_code.token:
            raise ValueError('Cannot save an authorization code without a code string')
        self._codes[auth_code.token] = auth_code

    async def delete_auth_code(self, auth_code: AuthCode) -> None:
        if auth_code.token:
            self._codes.pop(auth_code.token, None)

    async def find_auth_code_by_token(self, token: str) -> t.Optional[AuthCode]:
        return self._codes.get(token)

    async def delete_expired(self) -> int:
        expired = [key for key, code in self._codes.items() if code.has_expired()]
        for key in expired:
            del self._codes[key]

        if expired:
            logger.debug('Deleted %d expired authorization codes', len(expired))
        return len(expired)


class MemoryUserProvider(UserProvider):
    """In-memory user provider."""

    def __init__(self, users: t.Optional[t.Iterable[User]] = None) -> None:
        self._users: t.Dict[str, User] = {}
        for user in users or ():
            self.add_user(user)

    def add_user(self, user: User) -> None:
        self._users[user.username] = user

    async def load_user_by_username(self, username: str) -> User:
        user = self._users.get(username)
        if user is None:
            raise UserNotFoundError(username)
        return user
