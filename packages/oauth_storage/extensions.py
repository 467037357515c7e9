"""Custom grant type extensions."""

import typing as t
from abc import ABC, abstractmethod

if t.TYPE_CHECKING:
    from oauth_storage.models import Client


class GrantExtension(ABC):
    """Handles a grant type identified by an absolute URI."""

    @abstractmethod
    async def check_grant_extension(
        self,
        client: 'Client',
        input_data: t.Mapping[str, t.Any],
        auth_headers: t.Mapping[str, t.Any],
    ) -> t.Union[bool, t.Dict[str, t.Any]]:
        """Validate a token request using this grant type.

        Args:
            client: Authenticated client.
            input_data: Token request parameters.
            auth_headers: Authentication headers of the request.

        Returns:
            False if the grant is rejected, otherwise True or a dict whose
            'data' entry is attached to the issued token.
        """
