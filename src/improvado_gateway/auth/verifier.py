"""Improvado API key verification and downstream token exchange.

Both operations talk to the Improvado verification endpoint with the user's
key as a bearer credential. Nothing is cached: every call goes to the network,
so callers must treat these as slow and fallible.
"""

from enum import StrEnum
from typing import Any

import httpx
from structlog import get_logger

from improvado_gateway.config.downstream import HTTPSettings, ImprovadoSettings
from improvado_gateway.core.logging import mask_secret
from improvado_gateway.exceptions import VerificationError


# Statuses that say the service is busy, not that the key is wrong
RETRYABLE_STATUSES = frozenset({408, 429})


logger = get_logger(__name__)


class KeyCheck(StrEnum):
    """Result of checking an API key against the verification service."""

    VALID = "valid"
    INVALID = "invalid"
    UNAVAILABLE = "unavailable"


def _truncate_error_text(response_text: str) -> str:
    """Truncate response text for compact error logging."""
    if len(response_text) > 200:
        return f"{response_text[:100]}...{response_text[-50:]}"
    return response_text


class CredentialVerifier:
    """Checks Improvado API keys and trades them for provider tokens.

    Supports connection pooling by reusing an injected httpx.AsyncClient.
    """

    def __init__(
        self,
        config: ImprovadoSettings | None = None,
        http_config: HTTPSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or ImprovadoSettings()
        self.http_config = http_config or HTTPSettings()
        self._shared_client = http_client

    def _build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.http_config.user_agent,
        }

    async def _post(self, api_key: str, payload: dict[str, Any]) -> httpx.Response:
        headers = self._build_headers(api_key)
        if self._shared_client is not None:
            return await self._shared_client.post(
                self.config.verify_url,
                headers=headers,
                json=payload,
                timeout=self.http_config.timeout,
            )
        async with httpx.AsyncClient(timeout=self.http_config.timeout) as client:
            return await client.post(
                self.config.verify_url, headers=headers, json=payload
            )

    async def check(self, api_key: str) -> KeyCheck:
        """Classify ``api_key`` as valid, rejected, or not checkable right now.

        A 4xx answer means the service looked at the key and refused it, except
        408 and 429, which like a 5xx answer or a transport failure say nothing
        about the key.
        """
        try:
            response = await self._post(api_key, {})
        except httpx.HTTPError as e:
            logger.warning(
                "api_key_check_unavailable",
                error_type=type(e).__name__,
                error=str(e),
            )
            return KeyCheck.UNAVAILABLE

        if response.is_success:
            logger.debug("api_key_check_valid", api_key=mask_secret(api_key))
            return KeyCheck.VALID

        if response.status_code >= 500 or response.status_code in RETRYABLE_STATUSES:
            logger.warning(
                "api_key_check_unavailable",
                status_code=response.status_code,
                response_preview=_truncate_error_text(response.text),
            )
            return KeyCheck.UNAVAILABLE

        logger.info(
            "api_key_check_rejected",
            status_code=response.status_code,
            api_key=mask_secret(api_key),
        )
        return KeyCheck.INVALID

    async def validate(self, api_key: str) -> bool:
        """Return True only when the verification service accepts ``api_key``.

        Never raises; outages and rejections both yield False.
        """
        return await self.check(api_key) is KeyCheck.VALID

    async def exchange(self, api_key: str, provider: str) -> str:
        """Exchange ``api_key`` for the token of ``provider``.

        Raises:
            VerificationError: On a missing key, a transport failure, a
                non-success status, or a body without ``apiKey``.
        """
        if not api_key:
            raise VerificationError("Improvado API key is required")

        try:
            response = await self._post(api_key, {"provider": provider})
        except httpx.HTTPError as e:
            logger.error(
                "token_exchange_transport_failed",
                provider=provider,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise VerificationError(
                f"Failed to verify {provider} API key: {e}"
            ) from e

        if not response.is_success:
            logger.error(
                "token_exchange_failed",
                provider=provider,
                status_code=response.status_code,
                response_preview=_truncate_error_text(response.text),
            )
            raise VerificationError(
                f"Failed to verify {provider} API key: "
                f"verification failed with status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise VerificationError(
                f"Failed to verify {provider} API key: invalid JSON response",
                status_code=response.status_code,
            ) from e

        token = result.get("apiKey") if isinstance(result, dict) else None
        if not token:
            logger.error("token_exchange_missing_key", provider=provider)
            raise VerificationError(
                f"Failed to verify {provider} API key: "
                f"{provider} API key not returned from verification endpoint",
                status_code=response.status_code,
            )

        logger.debug("token_exchange_successful", provider=provider)
        return str(token)
