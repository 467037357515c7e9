"""OAuth server storage adapter.

Bridges the storage calls an OAuth2 protocol engine makes during grant flows
to the client, token, authorization code and user backends.
"""

import logging
import typing as t

from oauth_storage.exceptions import (
    InvalidClientError,
    OAuthStorageError,
    UnsupportedGrantExtensionError,
    UserNotFoundError,
)
from oauth_storage.models import AccessToken, AuthCode, Client, RefreshToken, User

if t.TYPE_CHECKING:
    from oauth_storage.encoders import PasswordEncoderFactory
    from oauth_storage.extensions import GrantExtension
    from oauth_storage.managers.base import AuthCodeManager, ClientManager, TokenManager, UserProvider

logger = logging.getLogger(__name__)

# Either False or {'data': ...}; the protocol engine attaches 'data' to issued tokens.
CredentialsResult = t.Union[bool, t.Dict[str, t.Any]]


def _ensure_client(client: t.Any) -> Client:
    if not isinstance(client, Client):
        raise InvalidClientError(f'Client has to implement {Client.__module__}.{Client.__qualname__}')
    return client


class OAuthStorage:
    """Storage adapter used by the OAuth2 protocol engine.

    Holds no state besides its collaborators, so one instance may serve
    concurrent requests if the backends allow it.

    Every method taking a client raises InvalidClientError before touching any
    backend if the client is not a Client instance.
    """

    def __init__(
        self,
        client_manager: 'ClientManager',
        access_token_manager: 'TokenManager',
        refresh_token_manager: 'TokenManager',
        auth_code_manager: 'AuthCodeManager',
        user_provider: t.Optional['UserProvider'] = None,
        encoder_factory: t.Optional['PasswordEncoderFactory'] = None,
        grant_extensions: t.Optional[t.Mapping[str, 'GrantExtension']] = None,
    ) -> None:
        """Initialize storage adapter.

        Args:
            client_manager: Client backend.
            access_token_manager: Access token backend.
            refresh_token_manager: Refresh token backend.
            auth_code_manager: Authorization code backend.
            user_provider: Resource owner backend, needed for the password grant.
            encoder_factory: Password encoders, needed for the password grant.
            grant_extensions: Custom grant type handlers keyed by grant URI.
        """
        self._client_manager = client_manager
        self._access_token_manager = access_token_manager
        self._refresh_token_manager = refresh_token_manager
        self._auth_code_manager = auth_code_manager
        self._user_provider = user_provider
        self._encoder_factory = encoder_factory
        self._grant_extensions: t.Dict[str, 'GrantExtension'] = dict(grant_extensions or {})

    def set_grant_extension(self, uri: str, extension: 'GrantExtension') -> None:
        """Register a handler for a custom grant type URI."""
        self._grant_extensions[uri] = extension

    async def get_client(self, public_id: str) -> t.Optional[Client]:
        """Retrieve a client by public ID.

        Returns:
            Client if found, None otherwise.
        """
        return await self._client_manager.find_client_by_public_id(public_id)

    def check_client_credentials(self, client: Client, secret: t.Optional[str] = None) -> bool:
        """Check the client secret with exact, case-sensitive matching."""
        return _ensure_client(client).check_secret(secret)

    async def get_access_token(self, token: str) -> t.Optional[AccessToken]:
        return await self._access_token_manager.find_token_by_token(token)

    async def create_access_token(
        self,
        token: str,
        client: Client,
        data: t.Any,
        expires_at: t.Optional[int],
        scope: t.Optional[str] = None,
    ) -> AccessToken:
        """Create and save an access token.

        Args:
            token: Token string.
            client: Client the token is issued to.
            data: Opaque payload, typically the authenticated user.
            expires_at: Expiration as a Unix timestamp.
            scope: Space-separated scopes.

        Returns:
            The saved token instance.
        """
        _ensure_client(client)

        access_token = await self._access_token_manager.create_token()
        access_token.token = token
        access_token.client = client
        access_token.data = data
        access_token.expires_at = expires_at
        access_token.scope = scope
        await self._access_token_manager.update_token(access_token)

        return access_token

    async def get_refresh_token(self, token: str) -> t.Optional[RefreshToken]:
        return await self._refresh_token_manager.find_token_by_token(token)

    async def create_refresh_token(
        self,
        token: str,
        client: Client,
        data: t.Any,
        expires_at: t.Optional[int],
        scope: t.Optional[str] = None,
    ) -> RefreshToken:
        """Create and save a refresh token.

        Same arguments as create_access_token().
        """
        _ensure_client(client)

        refresh_token = await self._refresh_token_manager.create_token()
        refresh_token.token = token
        refresh_token.client = client
        refresh_token.data = data
        refresh_token.expires_at = expires_at
        refresh_token.scope = scope
        await self._refresh_token_manager.update_token(refresh_token)

        return refresh_token

    async def unset_refresh_token(self, token: str) -> None:
        """Delete a refresh token once it has been exchanged."""
        refresh_token = await self._refresh_token_manager.find_token_by_token(token)
        if refresh_token is None:
            return

        await self._refresh_token_manager.delete_token(refresh_token)
        logger.debug('Refresh token revoked')

    def check_restricted_grant_type(self, client: Client, grant_type: str) -> bool:
        """Check whether the client may use the given grant type."""
        return grant_type in _ensure_client(client).allowed_grant_types

    async def check_user_credentials(self, client: Client, username: str, password: str) -> CredentialsResult:
        """Check resource owner credentials for the password grant.

        Only UserNotFoundError from the user provider is turned into a failed
        check. Any other backend error propagates.

        Args:
            client: Client making the request.
            username: Resource owner username.
            password: Resource owner password.

        Returns:
            {'data': user} on success, False otherwise.

        Raises:
            InvalidClientError: If client is not a Client.
            OAuthStorageError: If no user provider or encoder factory is configured.
        """
        _ensure_client(client)

        if self._user_provider is None or self._encoder_factory is None:
            raise OAuthStorageError('User credentials check requires a user provider and an encoder factory')

        try:
            user = await self._user_provider.load_user_by_username(username)
        except UserNotFoundError:
            logger.debug('Unknown user in password grant')
            return False

        if user is None:
            return False

        if not self._is_password_valid(user, password):
            logger.debug('Invalid password in password grant')
            return False

        return {'data': user}

    def _is_password_valid(self, user: User, password: str) -> bool:
        encoder = self._encoder_factory.get_encoder(user)
        return bool(encoder.is_password_valid(user.password, password, user.salt))

    async def create_auth_code(
        self,
        code: str,
        client: Client,
        data: t.Any,
        redirect_uri: t.Optional[str],
        expires_at: t.Optional[int],
        scope: t.Optional[str] = None,
    ) -> AuthCode:
        """Create and save an authorization code.

        Args:
            code: Authorization code string.
            client: Client the code is issued to.
            data: Opaque payload, typically the authenticated user.
            redirect_uri: Redirect URI the code is bound to.
            expires_at: Expiration as a Unix timestamp.
            scope: Space-separated scopes.

        Returns:
            The saved authorization code instance.
        """
        _ensure_client(client)

        auth_code = await self._auth_code_manager.create_auth_code()
        auth_code.token = code
        auth_code.client = client
        auth_code.data = data
        auth_code.redirect_uri = redirect_uri
        auth_code.expires_at = expires_at
        auth_code.scope = scope
        await self._auth_code_manager.update_auth_code(auth_code)

        return auth_code

    async def get_auth_code(self, code: str) -> t.Optional[AuthCode]:
        return await self._auth_code_manager.find_auth_code_by_token(code)

    async def mark_auth_code_as_used(self, code: str) -> None:
        """Delete an authorization code so it cannot be exchanged twice."""
        auth_code = await self._auth_code_manager.find_auth_code_by_token(code)
        if auth_code is None:
            return

        await self._auth_code_manager.delete_auth_code(auth_code)
        logger.debug('Authorization code marked as used')

    async def check_grant_extension(
        self,
        client: Client,
        uri: str,
        input_data: t.Mapping[str, t.Any],
        auth_headers: t.Mapping[str, t.Any],
    ) -> CredentialsResult:
        """Delegate a custom grant type to its registered extension.

        Raises:
            InvalidClientError: If client is not a Client.
            UnsupportedGrantExtensionError: If no extension handles the URI.
        """
        _ensure_client(client)

        extension = self._grant_extensions.get(uri)
        if extension is None:
            raise UnsupportedGrantExtensionError(uri)

        return await extension.check_grant_extension(client, input_data, auth_headers)
