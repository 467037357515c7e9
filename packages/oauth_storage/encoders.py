"""Password encoders used to verify resource owner credentials."""

import base64
import binascii
import secrets
import typing as t
from abc import ABC, abstractmethod

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from oauth_storage.exceptions import OAuthStorageError

if t.TYPE_CHECKING:
    from oauth_storage.models import User

_PBKDF2_ALGORITHMS: t.Dict[str, t.Type[hashes.HashAlgorithm]] = {
    'sha1': hashes.SHA1,
    'sha256': hashes.SHA256,
    'sha384': hashes.SHA384,
    'sha512': hashes.SHA512,
}


class PasswordEncoder(ABC):
    """Encodes and verifies passwords."""

    @abstractmethod
    def encode_password(self, raw: str, salt: t.Optional[str]) -> str:
        """Encode a raw password.

        Args:
            raw: Plain password.
            salt: Salt, if the user has one.

        Returns:
            Encoded password.
        """

    @abstractmethod
    def is_password_valid(self, encoded: str, raw: str, salt: t.Optional[str]) -> bool:
        """Check a raw password against an encoded one.

        Args:
            encoded: Stored, encoded password.
            raw: Password supplied by the user.
            salt: Salt, if the user has one.

        Returns:
            True if the password matches.
        """


class PasswordEncoderFactory(ABC):
    """Picks the password encoder for a user."""

    @abstractmethod
    def get_encoder(self, user: 'User') -> PasswordEncoder:
        """Return the encoder for the given user."""


class PlaintextPasswordEncoder(PasswordEncoder):
    """Stores passwords as plain text, merged with the salt.

    Only meant for development and tests.
    """

    def __init__(self, ignore_password_case: bool = False) -> None:
        self._ignore_password_case = ignore_password_case

    def encode_password(self, raw: str, salt: t.Optional[str]) -> str:
        if not salt:
            return raw
        if '{' in salt or '}' in salt:
            raise ValueError('Cannot use { or } in salt')
        return f'{raw}{{{salt}}}'

    def is_password_valid(self, encoded: str, raw: str, salt: t.Optional[str]) -> bool:
        candidate = self.encode_password(raw, salt)
        if self._ignore_password_case:
            return encoded.lower() == candidate.lower()
        return secrets.compare_digest(encoded.encode('utf-8'), candidate.encode('utf-8'))


class Pbkdf2PasswordEncoder(PasswordEncoder):
    """PBKDF2-HMAC password encoder backed by the cryptography library.

    Encoded passwords are base64 strings of the derived key.
    """

    def __init__(self, algorithm: str = 'sha512', iterations: int = 1000, length: int = 40) -> None:
        """Initialize PBKDF2 encoder.

        Args:
            algorithm: Hash algorithm name (sha1, sha256, sha384 or sha512).
            iterations: Number of PBKDF2 iterations.
            length: Length of the derived key in bytes.

        Raises:
            ValueError: If the algorithm is not supported.
        """
        if algorithm not in _PBKDF2_ALGORITHMS:
            raise ValueError(f'Unsupported PBKDF2 algorithm: {algorithm}')

        self._algorithm = _PBKDF2_ALGORITHMS[algorithm]
        self._iterations = iterations
        self._length = length

    def _kdf(self, salt: t.Optional[str]) -> PBKDF2HMAC:
        return PBKDF2HMAC(
            algorithm=self._algorithm(),
            length=self._length,
            salt=(salt or '').encode('utf-8'),
            iterations=self._iterations,
        )

    def encode_password(self, raw: str, salt: t.Optional[str]) -> str:
        derived = self._kdf(salt).derive(raw.encode('utf-8'))
        return base64.b64encode(derived).decode('ascii')

    def is_password_valid(self, encoded: str, raw: str, salt: t.Optional[str]) -> bool:
        try:
            expected = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            return False

        try:
            self._kdf(salt).verify(raw.encode('utf-8'), expected)
        except InvalidKey:
            return False

        return True


class EncoderFactory(PasswordEncoderFactory):
    """Maps user classes to password encoders.

    The most specific class in the user's MRO wins.
    """

    def __init__(self, encoders: t.Optional[t.Mapping[type, PasswordEncoder]] = None) -> None:
        self._encoders: t.Dict[type, PasswordEncoder] = dict(encoders or {})

    def set_encoder(self, user_class: type, encoder: PasswordEncoder) -> None:
        self._encoders[user_class] = encoder

    def get_encoder(self, user: 'User') -> PasswordEncoder:
        for klass in type(user).__mro__:
            encoder = self._encoders.get(klass)
            if encoder is not None:
                return encoder

        raise OAuthStorageError(f'No password encoder configured for {type(user).__name__}')
