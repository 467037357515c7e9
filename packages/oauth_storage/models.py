"""OAuth server data models."""

import secrets
import sys
import time
import typing as t
from dataclasses import dataclass, field


def _generate_random() -> str:
    return secrets.token_urlsafe(32)


@dataclass
class Client:
    """Registered OAuth client.

    Attributes:
        id: Backend identifier, if the client has been persisted.
        random_id: Random part of the public ID.
        secret: Client secret. Compared as-is, without normalization.
        redirect_uris: Allowed redirect URIs.
        allowed_grant_types: Grant types this client may use.
    """

    id: t.Optional[t.Union[int, str]] = None
    random_id: str = field(default_factory=_generate_random)
    secret: t.Optional[str] = field(default_factory=_generate_random)
    redirect_uris: t.List[str] = field(default_factory=list)
    allowed_grant_types: t.List[str] = field(default_factory=list)

    @property
    def public_id(self) -> str:
        """Client ID as exposed to OAuth requests."""
        if self.id is None:
            return self.random_id
        return f'{self.id}_{self.random_id}'

    def check_secret(self, secret: t.Optional[str]) -> bool:
        """Check a client secret with exact, case-sensitive matching."""
        if self.secret is None or secret is None:
            return self.secret == secret
        return secrets.compare_digest(self.secret.encode('utf-8'), secret.encode('utf-8'))


@dataclass
class Token:
    """Token bound to a client.

    Created empty by its manager, then filled in by the storage adapter.
    """

    token: t.Optional[str] = None
    client: t.Optional[Client] = None
    data: t.Any = None
    expires_at: t.Optional[int] = None
    scope: t.Optional[str] = None

    def expires_in(self) -> int:
        """Seconds until expiration, negative once expired."""
        if self.expires_at is None:
            return sys.maxsize
        return self.expires_at - int(time.time())

    def has_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < int(time.time())

    @property
    def scopes(self) -> t.List[str]:
        if not self.scope:
            return []
        return self.scope.split()


@dataclass
class AccessToken(Token):
    """OAuth access token."""


@dataclass
class RefreshToken(Token):
    """OAuth refresh token."""


@dataclass
class AuthCode(Token):
    """Authorization code, additionally bound to a redirect URI."""

    redirect_uri: t.Optional[str] = None


@dataclass
class User:
    """Resource owner as loaded by a user provider."""

    username: str
    password: str
    salt: t.Optional[str] = None
