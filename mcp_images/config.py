"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Provider credentials (either may be missing; items for that provider fail)
    openai_api_key: Optional[str] = None
    stability_api_key: Optional[str] = None

    # Provider endpoints
    dalle_endpoint: str = "https://api.openai.com/v1/images/generations"
    stability_endpoint: str = "https://api.stability.ai/v2beta/stable-image/generate/ultra"

    # Per-provider hard budget for one image, in seconds
    dalle_timeout_seconds: float = 60.0
    stability_timeout_seconds: float = 90.0

    # Image storage
    image_dir: str = "generated-images"

    # Prompting
    default_style: str = "realistic"

    # Job retention
    max_retained_jobs: int = 100
    job_result_ttl_hours: int = 2

    # Runtime
    log_level: str = "INFO"
    http_port: int = 8001

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
