"""Stability AI provider: multipart form request, image returned inline."""

import base64
import binascii
from typing import Optional

from mcp_images.errors import ProviderError
from mcp_images.providers.base import ImageProvider


class StabilityProvider(ImageProvider):
    label = "Stability API"
    settings_prefix = "stability"
    credential_env = "STABILITY_API_KEY"
    output_format = "png"

    async def synthesize(self, prompt, width, height, quality, timeout=None) -> bytes:
        api_key = self._require_key()

        fields = {
            "prompt": prompt,
            "output_format": self.output_format,
            "width": str(width),
            "height": str(height),
        }
        # (None, value) parts force multipart/form-data without filenames
        response = await self._request(
            "POST",
            self.endpoint,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": "image/*",
            },
            files={key: (None, value) for key, value in fields.items()},
        )

        if response.status_code != 200:
            raise ProviderError(f"Stability API error {response.status_code}: {response.text}")

        content_type = response.headers.get("content-type", "")
        if content_type.startswith("image/"):
            return response.content
        if "json" in content_type:
            return _decode_json_image(response)
        if response.content:
            return response.content
        raise ProviderError("No image data returned from Stability API")


def _decode_json_image(response) -> bytes:
    try:
        data = response.json()
    except ValueError:
        raise ProviderError("Stability API returned malformed JSON")

    encoded: Optional[str] = None
    if isinstance(data, dict):
        artifacts = data.get("artifacts") or []
        content = data.get("content") or []
        if data.get("image"):
            encoded = data["image"]
        elif artifacts and artifacts[0].get("base64"):
            encoded = artifacts[0]["base64"]
        elif content:
            encoded = content[0]

    if not encoded:
        raise ProviderError("No image data returned from Stability API")
    try:
        return base64.b64decode(encoded)
    except (binascii.Error, ValueError, TypeError):
        raise ProviderError("Stability API returned malformed base64 image data")
