"""OpenAI DALL-E 3 provider: JSON request, image returned by URL or inline base64."""

import base64
import binascii
import logging
from typing import Optional

from mcp_images.errors import ProviderError
from mcp_images.providers.base import ImageProvider

logger = logging.getLogger(__name__)


class DalleProvider(ImageProvider):
    label = "DALL-E"
    settings_prefix = "dalle"
    credential_env = "OPENAI_API_KEY"
    model = "dall-e-3"

    async def synthesize(self, prompt, width, height, quality, timeout=None) -> bytes:
        api_key = self._require_key()

        response = await self._request(
            "POST",
            self.endpoint,
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            json={
                "model": self.model,
                "prompt": prompt,
                "size": f"{width}x{height}",
                "quality": quality,
                "n": 1,
            },
        )

        if not response.is_success:
            raise ProviderError(_error_message(response))

        try:
            image = response.json()["data"][0]
        except (ValueError, KeyError, IndexError, TypeError):
            raise ProviderError("No image data returned from DALL-E")

        if image.get("b64_json"):
            try:
                return base64.b64decode(image["b64_json"])
            except (binascii.Error, ValueError):
                raise ProviderError("DALL-E returned malformed base64 image data")

        image_url = image.get("url")
        if not image_url:
            raise ProviderError("No image URL returned from DALL-E")

        logger.debug("Downloading DALL-E image from %s", image_url)
        download = await self._request("GET", image_url, timeout=timeout)
        if not download.is_success:
            raise ProviderError("Download failed")
        return download.content


def _error_message(response) -> str:
    """Prefer the API's error.message; fall back to the HTTP status."""
    try:
        message = response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return message or f"HTTP {response.status_code}"
