from mcp_images.server import run

run()
