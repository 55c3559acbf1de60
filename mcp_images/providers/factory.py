"""Provider construction from settings."""

import logging
from typing import Dict, List, Optional, Type

import httpx

from mcp_images.config import Settings
from mcp_images.providers.base import ImageProvider, ProviderName
from mcp_images.providers.dalle import DalleProvider
from mcp_images.providers.stability import StabilityProvider

logger = logging.getLogger(__name__)

# One implementation per ProviderName
PROVIDERS: Dict[ProviderName, Type[ImageProvider]] = {
    ProviderName.DALLE3: DalleProvider,
    ProviderName.STABILITY: StabilityProvider,
}


def create_provider(
    name: ProviderName,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> ImageProvider:
    """Build the provider for `name` with its endpoint, credential and budget."""
    try:
        provider_cls = PROVIDERS[name]
    except KeyError:
        raise ValueError(f"No provider implementation for {name!r}")
    prefix = provider_cls.settings_prefix
    return provider_cls(
        endpoint=getattr(settings, f"{prefix}_endpoint"),
        api_key=getattr(settings, provider_cls.credential_env.lower()),
        timeout=getattr(settings, f"{prefix}_timeout_seconds"),
        client=client,
    )


def configured_providers(settings: Settings) -> List[str]:
    """Names of providers whose credential is present."""
    return [
        name.value for name in PROVIDERS
        if create_provider(name, settings).configured
    ]


def warn_missing_credentials(settings: Settings) -> None:
    for name, provider_cls in PROVIDERS.items():
        if not create_provider(name, settings).configured:
            logger.warning("%s is not set; %s requests will fail", provider_cls.credential_env, name.value)
