"""Client for the external identity provider that validates bearer tokens."""
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from app.config.settings import Settings, get_settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.logging import get_logger

logger = get_logger(__name__)


class AuthenticatedUser(BaseModel):
    """User profile returned by the identity provider's "me" endpoint.

    Fields beyond ``id``, ``username`` and ``email`` are kept as extra
    attributes so callers can read any claim the gateway returns.
    """
    model_config = ConfigDict(extra="allow")

    id: str | int | None = None
    username: str | None = None
    email: str | None = None


class IdentityProviderClient:
    """
    Validates bearer tokens by calling the identity provider's "me" endpoint.

    The token is forwarded unchanged; a 2xx answer with a non-empty JSON body
    means the token is valid and the body describes the caller.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.identity_provider_timeout),
                follow_redirects=True,
                max_redirects=self.settings.identity_provider_max_redirects,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_user(self, token: str) -> AuthenticatedUser:
        """Resolve ``token`` to the user it was issued for.

        Raises:
            AuthenticationError: configuration missing, token rejected or the
                provider could not be reached
            AuthorizationError: the provider accepted the call but returned no
                user information
        """
        url = self.settings.identity_provider_me_url
        if not url:
            raise AuthenticationError(
                "Identity provider configuration not found",
                code="AUTH_CONFIG_MISSING",
            )

        try:
            response = await self._get_client().get(
                url,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "token_validation_failed",
                status_code=e.response.status_code,
                error=str(e),
            )
            raise AuthenticationError(
                "Invalid token or authentication failed",
                code="AUTH_TOKEN_INVALID",
            ) from e
        except httpx.HTTPError as e:
            logger.warning("token_validation_failed", error=str(e))
            raise AuthenticationError(
                "Invalid token or authentication failed",
                code="AUTH_PROVIDER_UNAVAILABLE",
            ) from e

        payload = self._parse_payload(response)
        if not payload:
            raise AuthorizationError("Identity provider returned no user information")

        try:
            return AuthenticatedUser.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning("token_validation_unexpected_profile", error=str(e))
            raise AuthorizationError("Identity provider returned an unexpected user profile") from e

    @staticmethod
    def _parse_payload(response: httpx.Response) -> dict[str, Any] | None:
        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError:
            logger.warning("token_validation_unreadable_body", status_code=response.status_code)
            return None
        return payload if isinstance(payload, dict) else None
