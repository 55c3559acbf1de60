"""MCP server exposing the image tools over stdio."""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import BaseModel
from pydantic import ValidationError as ArgumentsError

from mcp_images.config import Settings, settings as default_settings
from mcp_images.errors import ImageServiceError, ValidationError
from mcp_images.providers.factory import warn_missing_credentials
from mcp_images.schemas import CheckStatusArgs, DeleteImageArgs, GenerateImagesArgs, ListImagesArgs
from mcp_images.service import ImageGenerationService

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-images"
SERVER_VERSION = "1.0.0"

TOOLS = {
    "generateImages": (
        GenerateImagesArgs,
        "Generates images for a list of words using DALL-E 3 or Stability AI. "
        "By default runs asynchronously to avoid timeouts.",
    ),
    "checkStatus": (
        CheckStatusArgs,
        "Check the status of an async image generation job using the jobId.",
    ),
    "listImages": (
        ListImagesArgs,
        "Lists all generated images, optionally filtered by pattern.",
    ),
    "deleteImage": (
        DeleteImageArgs,
        "Deletes a specific image file by filename.",
    ),
}


def tool_definitions() -> List[types.Tool]:
    return [
        types.Tool(
            name=name,
            description=description,
            inputSchema=args_model.model_json_schema(by_alias=True),
        )
        for name, (args_model, description) in TOOLS.items()
    ]


def parse_arguments(name: str, arguments: Optional[Dict[str, Any]]) -> BaseModel:
    if name not in TOOLS:
        raise ValidationError(f"Unknown tool: {name}")
    args_model, _ = TOOLS[name]
    try:
        return args_model.model_validate(arguments or {})
    except ArgumentsError as exc:
        raise ValidationError(f"Invalid arguments for {name}: {exc}")


async def handle_tool(service: ImageGenerationService, name: str, arguments: Optional[Dict[str, Any]]) -> Any:
    """Run one tool call and return its JSON-serializable result."""
    args = parse_arguments(name, arguments)

    if name == "generateImages":
        return await service.generate_images(
            words=args.words,
            provider=args.provider,
            style=args.style,
            background=args.background,
            size=args.size,
            quality=args.quality,
            run_async=args.run_async,
        )
    if name == "checkStatus":
        view = await service.check_status(args.job_id)
        return view.to_wire()
    if name == "listImages":
        return [info.model_dump(mode="json") for info in service.list_images(args.pattern)]
    if name == "deleteImage":
        return service.delete_image(args.filename)
    raise ValidationError(f"Unknown tool: {name}")


def build_server(service: ImageGenerationService) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        try:
            result = await handle_tool(service, name, arguments)
        except ImageServiceError as exc:
            # Reported to the client as an isError tool result
            logger.warning("Tool %s failed: %s: %s", name, type(exc).__name__, exc.message)
            raise
        return [types.TextContent(type="text", text=json.dumps(result, indent=2))]

    return server


async def serve(settings: Settings) -> None:
    service = ImageGenerationService(settings)
    server = build_server(service)
    await service.start()
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("MCP Image Generation Server is running")
            logger.info("Tools: %s", ", ".join(TOOLS))
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await service.stop()


def configure_logging(level: str) -> None:
    # stdout carries the protocol; logs go to stderr
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(settings: Optional[Settings] = None) -> None:
    settings = settings or default_settings
    configure_logging(settings.log_level)
    warn_missing_credentials(settings)
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Shutting down MCP Image Generation Server")


if __name__ == "__main__":
    run()
