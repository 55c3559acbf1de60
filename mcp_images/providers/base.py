"""Image provider interface and provider names."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import httpx

from mcp_images.errors import ConfigurationError, ProviderError, ProviderTimeoutError, ValidationError


class ProviderName(str, Enum):
    DALLE3 = "dalle3"
    STABILITY = "stability"

    @classmethod
    def parse(cls, value: str) -> "ProviderName":
        """Resolve a user-supplied provider name, accepting known aliases."""
        key = (value or "").strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(
                f"Unsupported provider: {value}. Valid: {[p.value for p in cls]}"
            )


_ALIASES = {
    "dall-e-3": "dalle3",
    "dalle": "dalle3",
    "openai": "dalle3",
    "stability-ai": "stability",
    "stabilityai": "stability",
}


class ImageProvider(ABC):
    """Synthesizes one image per call and returns its encoded bytes.

    Implementations raise ConfigurationError when their credential is missing and
    ProviderError for transport failures, non-2xx responses or unusable payloads.
    The caller enforces the hard time budget; `timeout` is also handed to the
    HTTP client so sockets do not outlive it.
    """

    label: str = "provider"
    # Environment variable holding the key; its lowercase form is the Settings field
    credential_env: str = ""
    # Settings fields read as <prefix>_endpoint and <prefix>_timeout_seconds
    settings_prefix: str = ""

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str],
        timeout: float,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._api_key = api_key
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @abstractmethod
    async def synthesize(
        self,
        prompt: str,
        width: int,
        height: int,
        quality: str,
        timeout: Optional[float] = None,
    ) -> bytes:
        """Generate one image for `prompt` and return the raw image bytes."""
        ...

    def _require_key(self) -> str:
        if not self._api_key:
            raise ConfigurationError(f"Missing {self.credential_env}")
        return self._api_key

    async def _request(self, method: str, url: str, timeout: Optional[float] = None, **kwargs) -> httpx.Response:
        """Send one request, mapping transport failures onto provider errors."""
        budget = timeout or self.timeout
        try:
            if self._client is not None:
                return await self._client.request(method, url, timeout=budget, **kwargs)
            async with httpx.AsyncClient(timeout=budget) as client:
                return await client.request(method, url, **kwargs)
        except httpx.TimeoutException:
            raise ProviderTimeoutError(
                f"{self.label} request timed out after {budget:g} seconds"
            )
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.label} request failed: {exc}")
