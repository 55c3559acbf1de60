"""Shared pytest fixtures."""

import pytest

from mcp_images.config import Settings
from mcp_images.jobs.models import GenerationOptions
from mcp_images.providers.base import ProviderName
from mcp_images.service import ImageGenerationService
from mcp_images.storage.images import ImageStore

from tests.fakes import FakeProvider


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key=None,
        stability_api_key=None,
        image_dir=str(tmp_path / "generated-images"),
    )


@pytest.fixture()
def store(settings) -> ImageStore:
    image_store = ImageStore(settings.image_dir)
    image_store.ensure_directory()
    return image_store


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def options() -> GenerationOptions:
    return GenerationOptions(
        provider=ProviderName.DALLE3.value,
        style="cartoon",
        background="white",
        width=512,
        height=768,
        quality="standard",
    )


@pytest.fixture()
async def service(settings, fake_provider):
    svc = ImageGenerationService(settings, provider_factory=lambda name: fake_provider)
    await svc.start()
    yield svc
    await svc.stop()
