"""Tests for in-memory OAuth storage backends."""

import time

import pytest
from oauth_storage import AccessToken, AuthCode, Client, OAuthStorage, RefreshToken, User, UserNotFoundError
from oauth_storage.encoders import EncoderFactory, PlaintextPasswordEncoder
from oauth_storage.managers import (
    MemoryAuthCodeManager,
    MemoryClientManager,
    MemoryTokenManager,
    MemoryUserProvider,
)


@pytest.fixture
def storage() -> OAuthStorage:
    """Create a storage adapter wired to in-memory backends."""
    return OAuthStorage(
        client_manager=MemoryClientManager(),
        access_token_manager=MemoryTokenManager(AccessToken),
        refresh_token_manager=MemoryTokenManager(RefreshToken),
        auth_code_manager=MemoryAuthCodeManager(),
        user_provider=MemoryUserProvider([User(username='Joe', password='foo{bar}', salt='bar')]),
        encoder_factory=EncoderFactory({User: PlaintextPasswordEncoder()}),
    )


@pytest.mark.asyncio
async def test_client_manager_assigns_public_id() -> None:
    """Test that saving a client assigns an ID and indexes it by public ID."""
    manager = MemoryClientManager()
    client = await manager.create_client()
    await manager.update_client(client)

    assert client.id == 1
    assert client.public_id == f'1_{client.random_id}'
    assert await manager.find_client_by_public_id(client.public_id) is client
    assert await manager.find_client_by_public_id('1_unknown') is None

    await manager.delete_client(client)
    assert await manager.find_client_by_public_id(client.public_id) is None


@pytest.mark.asyncio
async def test_token_manager_creates_configured_kind() -> None:
    """Test that create_token returns the configured token class."""
    assert isinstance(await MemoryTokenManager(RefreshToken).create_token(), RefreshToken)
    assert isinstance(await MemoryTokenManager().create_token(), AccessToken)


@pytest.mark.asyncio
async def test_token_manager_rejects_token_without_string() -> None:
    """Test that a token without a token string cannot be saved."""
    manager = MemoryTokenManager(AccessToken)

    with pytest.raises(ValueError, match='token string'):
        await manager.update_token(AccessToken())


@pytest.mark.asyncio
async def test_token_manager_delete_expired() -> None:
    """Test that delete_expired removes only expired tokens."""
    manager = MemoryTokenManager(AccessToken)
    now = int(time.time())
    await manager.update_token(AccessToken(token='old', expires_at=now - 10))
    await manager.update_token(AccessToken(token='new', expires_at=now + 3600))
    await manager.update_token(AccessToken(token='forever'))

    assert await manager.delete_expired() == 1
    assert await manager.find_token_by_token('old') is None
    assert await manager.find_token_by_token('new') is not None
    assert await manager.find_token_by_token('forever') is not None


@pytest.mark.asyncio
async def test_auth_code_manager_delete_expired() -> None:
    """Test that delete_expired removes only expired authorization codes."""
    manager = MemoryAuthCodeManager()
    now = int(time.time())
    await manager.update_auth_code(AuthCode(token='old', expires_at=now - 10))
    await manager.update_auth_code(AuthCode(token='new', expires_at=now + 30))

    assert await manager.delete_expired() == 1
    assert await manager.find_auth_code_by_token('old') is None
    assert await manager.find_auth_code_by_token('new') is not None


@pytest.mark.asyncio
async def test_user_provider_raises_on_unknown_user() -> None:
    """Test that an unknown username raises UserNotFoundError."""
    provider = MemoryUserProvider()

    with pytest.raises(UserNotFoundError) as exc_info:
        await provider.load_user_by_username('Joe')

    assert exc_info.value.username == 'Joe'


@pytest.mark.asyncio
async def test_password_grant_with_memory_backends(storage: OAuthStorage) -> None:
    """Test the password grant storage calls against in-memory backends."""
    client = Client(allowed_grant_types=['password'])

    assert storage.check_restricted_grant_type(client, 'password')
    assert await storage.check_user_credentials(client, 'Joe', 'nope') is False
    assert await storage.check_user_credentials(client, 'Jane', 'foo') is False

    result = await storage.check_user_credentials(client, 'Joe', 'foo')
    assert isinstance(result, dict)
    assert result['data'].username == 'Joe'

    token = await storage.create_access_token('abc', client, result['data'], int(time.time()) + 3600, 'read')
    assert await storage.get_access_token('abc') is token
    assert await storage.get_refresh_token('abc') is None


@pytest.mark.asyncio
async def test_authorization_code_lifecycle_with_memory_backends(storage: OAuthStorage) -> None:
    """Test creating, fetching and consuming an authorization code."""
    client = Client(redirect_uris=['https://example.com/callback'])

    code = await storage.create_auth_code(
        'code123', client, {'user': 'Joe'}, 'https://example.com/callback', int(time.time()) + 30, 'read write'
    )

    fetched = await storage.get_auth_code('code123')
    assert fetched is code
    assert fetched.redirect_uri == 'https://example.com/callback'
    assert fetched.scopes == ['read', 'write']

    await storage.mark_auth_code_as_used('code123')
    assert await storage.get_auth_code('code123') is None


@pytest.mark.asyncio
async def test_refresh_token_rotation_with_memory_backends(storage: OAuthStorage) -> None:
    """Test that an exchanged refresh token can no longer be found."""
    client = Client()
    await storage.create_refresh_token('refresh1', client, None, None)

    await storage.unset_refresh_token('refresh1')
    assert await storage.get_refresh_token('refresh1') is None
