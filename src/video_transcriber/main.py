"""
Video Transcriber Service.

Entry point for the MCP stdio server.
"""

import asyncio

from video_transcriber.dependencies import get_server


def main():
    """Starts the MCP server on stdio."""
    server = get_server()
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
