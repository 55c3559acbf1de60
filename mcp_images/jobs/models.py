"""Job record data model for async image generation."""

import os
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStatus(str, Enum):
    STARTED = "started"
    GENERATING = "generating"
    COMPLETED = "completed"


class WireModel(BaseModel):
    """Base for models serialized to tool/HTTP responses with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GenerationOptions(WireModel):
    """Immutable parameters shared by every item of one job."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    provider: str
    style: str
    background: str
    width: int
    height: int
    quality: str


class ItemResult(WireModel):
    """Outcome for one word. Failures have no location and carry a reason."""
    source_word: str
    location: Optional[str] = None
    filename: str = ""
    description: str = ""
    width: int = 0
    height: int = 0
    reason_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return bool(self.location)

    @classmethod
    def success(cls, word: str, path: str, options: GenerationOptions) -> "ItemResult":
        return cls(
            source_word=word,
            location=f"file://{path}",
            filename=os.path.basename(path),
            description=f"{options.style} image of {word}",
            width=options.width,
            height=options.height,
        )

    @classmethod
    def failure(cls, word: str, reason: str) -> "ItemResult":
        return cls(
            source_word=word,
            description=f"Failed to generate image for {word}: {reason}",
            reason_message=reason,
        )


class JobRecord(BaseModel):
    """Tracks the lifecycle of one batch generation job."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    status: JobStatus = JobStatus.STARTED
    total_items: int
    completed_items: int = 0
    current_item: Optional[str] = None
    results: List[ItemResult] = Field(default_factory=list)
    options: GenerationOptions
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == JobStatus.COMPLETED
