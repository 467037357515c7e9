"""Abstract base classes for OAuth storage backends."""

import typing as t
from abc import ABC, abstractmethod

if t.TYPE_CHECKING:
    from oauth_storage.models import AuthCode, Client, Token, User


class ClientManager(ABC):
    """Abstract store for registered OAuth clients."""

    @abstractmethod
    async def create_client(self) -> 'Client':
        """Create a new, unsaved client.

        Returns:
            Client object with generated random ID and secret.
        """

    @abstractmethod
    async def update_client(self, client: 'Client') -> None:
        """Save a client.

        Args:
            client: Client object to save.
        """

    @abstractmethod
    async def delete_client(self, client: 'Client') -> None:
        """Delete a client.

        Args:
            client: Client object to delete.
        """

    @abstractmethod
    async def find_client_by_public_id(self, public_id: str) -> t.Optional['Client']:
        """Retrieve a client by its public ID.

        Args:
            public_id: Client ID as sent in OAuth requests.

        Returns:
            Client object if found, None otherwise.
        """


class TokenManager(ABC):
    """Abstract store for access or refresh tokens.

    One instance is used per token kind.
    """

    @abstractmethod
    async def create_token(self) -> 'Token':
        """Create a new, empty token.

        Returns:
            Unsaved token object of the kind this manager stores.
        """

    @abstractmethod
    async def update_token(self, token: 'Token') -> None:
        """Save a token.

        Args:
            token: Token object to save.
        """

    @abstractmethod
    async def delete_token(self, token: 'Token') -> None:
        """Delete a token.

        Args:
            token: Token object to delete.
        """

    @abstractmethod
    async def find_token_by_token(self, token: str) -> t.Optional['Token']:
        """Retrieve a token by its token string.

        Args:
            token: Token string.

        Returns:
            Token object if found, None otherwise.
        """

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete expired tokens.

        Returns:
            Number of deleted tokens.
        """


class AuthCodeManager(ABC):
    """Abstract store for authorization codes."""

    @abstractmethod
    async def create_auth_code(self) -> 'AuthCode':
        """Create a new, empty authorization code."""

    @abstractmethod
    async def update_auth_code(self, auth_code: 'AuthCode') -> None:
        """Save an authorization code."""

    @abstractmethod
    async def delete_auth_code(self, auth_code: 'AuthCode') -> None:
        """Delete an authorization code."""

    @abstractmethod
    async def find_auth_code_by_token(self, token: str) -> t.Optional['AuthCode']:
        """Retrieve an authorization code by its code string.

        Returns:
            Authorization code if found, None otherwise.
        """

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete expired authorization codes.

        Returns:
            Number of deleted codes.
        """


class UserProvider(ABC):
    """Abstract source of resource owners."""

    @abstractmethod
    async def load_user_by_username(self, username: str) -> 'User':
        """Load a user by username.

        Args:
            username: Username to look up.

        Returns:
            User object.

        Raises:
            UserNotFoundError: If no such user exists.
        """
