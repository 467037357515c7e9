"""OAuth storage exceptions."""


class OAuthStorageError(Exception):
    """Base exception for OAuth storage errors."""


class InvalidClientError(OAuthStorageError, TypeError):
    """Client object is not an instance of the expected Client model.

    Raised before any backend is touched. It signals a bug in the calling code,
    not a failed authentication.
    """


class UserNotFoundError(OAuthStorageError):
    """User provider has no user with the given username."""

    def __init__(self, username: str) -> None:
        super().__init__(f'User "{username}" not found')
        self.username = username


class UnsupportedGrantExtensionError(OAuthStorageError):
    """No grant extension is registered for the given URI."""

    def __init__(self, uri: str) -> None:
        super().__init__(f'Unsupported grant type extension: {uri}')
        self.uri = uri
