"""MCP server exposing the transcription pipeline as tools and resources."""

from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from video_transcriber import __version__
from video_transcriber.domain import TranscriptionRequest, TranscriptionResult
from video_transcriber.domain.formatting import format_short_duration
from video_transcriber.domain.models import PREVIEW_LENGTH
from video_transcriber.exceptions import TranscriptNotFoundError
from video_transcriber.handlers import TranscriptionHandler
from video_transcriber.infrastructure import DependencyChecker
from video_transcriber.infrastructure.interfaces import MediaDownloader
from video_transcriber.logging import setup_logging
from video_transcriber.repositories import TranscriptGroup, TranscriptRepository
from video_transcriber.repositories.transcript_repository import MIME_TYPES

logger = setup_logging()

SERVER_NAME = "video-transcriber"
SITES_PREVIEW_COUNT = 50


def format_transcription_summary(result: TranscriptionResult) -> str:
    """Renders the reply for a successful transcribe_video call."""
    source = result.source
    artifacts = result.artifacts
    ellipsis = "..." if len(result.transcript) > PREVIEW_LENGTH else ""
    word_count = len(result.transcript.split())
    return (
        "✅ Video transcribed successfully!\n"
        "\n"
        "**Video Details:**\n"
        f"- Title: {source.title}\n"
        f"- Platform: {source.platform}\n"
        f"- Channel: {source.channel}\n"
        f"- Video ID: {source.video_id}\n"
        f"- Duration: {format_short_duration(source.duration)}\n"
        "\n"
        "**Transcription Settings:**\n"
        f"- Model: {result.model}\n"
        f"- Language: {result.language}\n"
        "\n"
        "**Output Files:**\n"
        f"- Text: {artifacts.txt_path}\n"
        f"- JSON: {artifacts.json_path}\n"
        f"- Markdown: {artifacts.md_path}\n"
        "\n"
        "**Transcript Preview:**\n"
        f"{result.transcript_preview}{ellipsis}\n"
        "\n"
        f"**Full transcript has {word_count} words.**\n"
        "\n"
        "You can now read the full transcript using the file paths above."
    )


def format_transcript_listing(groups: list[TranscriptGroup], directory: Path) -> str:
    """Renders the reply for list_transcripts."""
    if not directory.is_dir():
        return (
            f"📂 No transcripts directory found at: {directory}\n\n"
            "Transcribe your first video to create it!"
        )
    if not groups:
        return f"📂 No transcripts found in {directory}\n\nTranscribe a video to get started!"

    entries = []
    for index, group in enumerate(groups, start=1):
        main_file = next((f for f in group.files if f.name.endswith(".txt")), group.files[0])
        extensions = ", ".join(f.path.suffix.lstrip(".") for f in group.files)
        entries.append(
            f"{index}. **{group.title}**\n"
            f"   Video ID: {group.video_id}\n"
            f"   Files: {len(group.files)} ({extensions})\n"
            f"   Size: {main_file.size_bytes / 1024:.2f} KB\n"
            f"   Modified: {main_file.modified:%Y-%m-%d}\n"
            f"   Path: {main_file.path}"
        )
    return (
        f"📚 Available transcripts ({len(groups)} videos):\n\n"
        + "\n\n".join(entries)
        + "\n\n💡 Tip: You can read any transcript by asking me to read the file path shown above."
    )


def format_supported_sites(sites: list[str]) -> str:
    """Renders the reply for list_supported_sites."""
    preview = ", ".join(sites[:SITES_PREVIEW_COUNT])
    more = "..." if len(sites) > SITES_PREVIEW_COUNT else ""
    return (
        f"📺 Supported Video Platforms ({len(sites)} total)\n"
        "\n"
        "**Popular platforms include:**\n"
        "- YouTube\n- Vimeo\n- TikTok\n- Twitter/X\n- Facebook\n- Instagram\n"
        "- Twitch\n- Dailymotion\n- Reddit\n- LinkedIn\n"
        "- Many educational and conference platforms\n"
        "\n"
        f"**First {SITES_PREVIEW_COUNT} extractors:**\n"
        f"{preview}{more}\n"
        "\n"
        f"**Total: {len(sites)} supported extractors**\n"
        "\n"
        "You can transcribe videos from any of these platforms by providing the video URL!"
    )


def _tool_definitions(default_output_dir: Path) -> list[types.Tool]:
    return [
        types.Tool(
            name="transcribe_video",
            description=(
                "Transcribe videos from 1000+ platforms (YouTube, Vimeo, TikTok, Twitter, etc.) "
                "or local video files using OpenAI Whisper. Downloads/extracts audio and "
                "generates transcript in TXT, JSON, and Markdown formats. Requires yt-dlp, "
                "whisper, and ffmpeg to be installed."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": (
                            "Video URL from any supported platform OR absolute/relative path "
                            "to a local video file (mp4, avi, mov, mkv, etc.)"
                        ),
                    },
                    "output_dir": {
                        "type": "string",
                        "description": f"Optional output directory path. Defaults to {default_output_dir}",
                    },
                    "model": {
                        "type": "string",
                        "enum": ["tiny", "base", "small", "medium", "large"],
                        "description": (
                            "Whisper model to use. Larger models are more accurate but slower. "
                            "Default: 'base'"
                        ),
                    },
                    "language": {
                        "type": "string",
                        "description": (
                            "Language code (ISO 639-1: en, es, fr, de, etc.) or 'auto' for "
                            "automatic detection. Default: 'auto'"
                        ),
                    },
                },
                "required": ["url"],
            },
        ),
        types.Tool(
            name="list_transcripts",
            description="List all available transcripts in the output directory",
            inputSchema={
                "type": "object",
                "properties": {
                    "output_dir": {
                        "type": "string",
                        "description": f"Optional directory path to list. Defaults to {default_output_dir}",
                    },
                },
            },
        ),
        types.Tool(
            name="check_dependencies",
            description="Check if all required dependencies (yt-dlp, whisper, ffmpeg) are installed",
            inputSchema={"type": "object", "properties": {}},
        ),
        types.Tool(
            name="list_supported_sites",
            description=(
                "List all video platforms supported by yt-dlp (1000+ sites including YouTube, "
                "Vimeo, TikTok, Twitter, Facebook, Instagram, educational platforms, and more)"
            ),
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


def _text(text: str) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=text)]


class VideoTranscriberServer:
    """Dispatches MCP tool calls and resource reads to the service layer."""

    def __init__(
        self,
        handler: TranscriptionHandler,
        repository: TranscriptRepository,
        downloader: MediaDownloader,
        dependency_checker: DependencyChecker,
    ):
        self._handler = handler
        self._repository = repository
        self._downloader = downloader
        self._dependency_checker = dependency_checker
        self._server = Server(SERVER_NAME)
        self._register_handlers()

    async def list_tools(self) -> list[types.Tool]:
        return _tool_definitions(self._repository.output_dir)

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        """
        Runs a tool by name.

        Errors propagate to the MCP layer, which reports them to the client
        as an error result carrying the exception message.
        """
        arguments = arguments or {}
        logger.info("Tool called", extra={"tool": name})

        if name == "transcribe_video":
            return await self._transcribe_video(arguments)
        if name == "list_transcripts":
            return self._list_transcripts(arguments.get("output_dir"))
        if name == "check_dependencies":
            return await self._check_dependencies()
        if name == "list_supported_sites":
            return _text(format_supported_sites(await self._downloader.list_extractors()))
        raise ValueError(f"Unknown tool: {name}")

    async def list_resources(self) -> list[types.Resource]:
        return [
            types.Resource(
                uri=transcript.uri,
                name=transcript.name,
                description=(
                    f"Transcript file ({transcript.size_bytes / 1024:.2f} KB, "
                    f"modified {transcript.modified:%Y-%m-%d})"
                ),
                mimeType=transcript.mime_type,
            )
            for transcript in self._repository.list_files()
        ]

    async def read_resource(self, uri: Any) -> list[ReadResourceContents]:
        parsed = urlparse(str(uri))
        if parsed.scheme != "file":
            raise TranscriptNotFoundError(str(uri))
        path = Path(unquote(parsed.path))
        content = self._repository.read(path)
        return [ReadResourceContents(content=content, mime_type=MIME_TYPES[path.suffix])]

    async def run(self) -> None:
        """Serves MCP requests on stdin/stdout until the client disconnects."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info(
                f"Video Transcriber MCP Server v{__version__} running on stdio",
                extra={"output_dir": str(self._repository.output_dir)},
            )
            await self._server.run(
                read_stream,
                write_stream,
                self._server.create_initialization_options(),
            )

    async def _transcribe_video(self, arguments: dict[str, Any]) -> list[types.TextContent]:
        output_dir = arguments.get("output_dir")
        request = TranscriptionRequest(
            reference=arguments.get("url", ""),
            output_dir=Path(output_dir) if output_dir else None,
            model=arguments.get("model") or None,
            language=arguments.get("language") or None,
        )
        result = await self._handler.transcribe(request)
        logger.info("Transcription complete", extra={"video_id": result.source.video_id})
        return _text(format_transcription_summary(result))

    def _list_transcripts(self, output_dir: str | None) -> list[types.TextContent]:
        directory = Path(output_dir).expanduser() if output_dir else self._repository.output_dir
        groups = self._repository.list_groups(directory)
        return _text(format_transcript_listing(groups, directory))

    async def _check_dependencies(self) -> list[types.TextContent]:
        await self._dependency_checker.ensure_available()
        return _text(
            "✅ All dependencies are installed:\n  - yt-dlp\n  - whisper\n  - ffmpeg"
        )

    def _register_handlers(self) -> None:
        self._server.list_tools()(self.list_tools)
        self._server.call_tool()(self.call_tool)
        self._server.list_resources()(self.list_resources)
        self._server.read_resource()(self.read_resource)
