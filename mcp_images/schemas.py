"""Tool argument schemas, shared by the MCP server and the HTTP API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ToolArgs(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateImagesArgs(ToolArgs):
    words: str = Field(description="Comma-separated list of words, one image per word")
    provider: str = Field("dalle3", description="dalle3 or stability")
    style: str = Field("realistic", description="realistic, cartoon, abstract or minimal")
    background: str = "white"
    size: str = Field("1024x1024", description="WIDTHxHEIGHT")
    quality: str = Field("standard", description="standard or hd")
    run_async: bool = Field(
        True,
        alias="async",
        description="Return a jobId immediately instead of waiting for the whole batch",
    )


class CheckStatusArgs(ToolArgs):
    job_id: str = Field(description="Job ID from generateImages")


class ListImagesArgs(ToolArgs):
    pattern: Optional[str] = Field(None, description="regex pattern to filter filenames")


class DeleteImageArgs(ToolArgs):
    filename: str = Field(description="name of the image file to delete")
