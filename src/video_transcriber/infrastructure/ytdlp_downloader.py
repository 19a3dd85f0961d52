"""yt-dlp implementation of the MediaDownloader interface."""

from pathlib import Path

from pydantic import ValidationError

from video_transcriber.config import ToolsConfig
from video_transcriber.domain.models import DownloaderMetadata, RetryNotifier
from video_transcriber.exceptions import (
    AudioAcquisitionError,
    CommandExecutionError,
    MetadataFetchError,
)
from video_transcriber.infrastructure.command_executor import CommandExecutor
from video_transcriber.logging import setup_logging

from .interfaces import MediaDownloader

logger = setup_logging()

AUDIO_STEM = "audio"


class YtDlpDownloader(MediaDownloader):
    """Handles remote metadata and audio retrieval using the yt-dlp CLI."""

    def __init__(self, executor: CommandExecutor, config: ToolsConfig):
        self._executor = executor
        self._binary = config.ytdlp_binary
        self._audio_format = config.audio_format

    async def fetch_metadata(
        self, url: str, on_retry: RetryNotifier | None = None
    ) -> DownloaderMetadata:
        try:
            outcome = await self._executor.run_with_retry(
                [self._binary, "--dump-json", "--no-playlist", "--no-warnings", url],
                on_retry=on_retry,
            )
        except CommandExecutionError as e:
            logger.exception("yt-dlp metadata fetch failed", extra={"url": url})
            raise MetadataFetchError(url, e) from e

        # A playlist-shaped dump is one JSON object per line; the first is the video.
        lines = outcome.stdout.strip().splitlines()
        try:
            metadata = DownloaderMetadata.model_validate_json(lines[0] if lines else "")
        except ValidationError as e:
            logger.exception("yt-dlp metadata could not be parsed", extra={"url": url})
            raise MetadataFetchError(url, e) from e

        logger.info(
            "Metadata fetched",
            extra={"url": url, "video_id": metadata.id, "extractor": metadata.extractor_name},
        )
        return metadata

    async def download_audio(
        self, url: str, working_dir: Path, on_retry: RetryNotifier | None = None
    ) -> Path:
        audio_path = working_dir / f"{AUDIO_STEM}.{self._audio_format}"
        try:
            await self._executor.run_with_retry(
                [
                    self._binary,
                    "--extract-audio",
                    "--audio-format",
                    self._audio_format,
                    "--format",
                    "bestaudio/best",
                    "--no-playlist",
                    "--no-warnings",
                    "--output",
                    f"{AUDIO_STEM}.%(ext)s",
                    url,
                ],
                cwd=working_dir,
                on_retry=on_retry,
            )
        except CommandExecutionError as e:
            logger.exception("yt-dlp audio download failed", extra={"url": url})
            raise AudioAcquisitionError(url, e) from e

        if not audio_path.is_file():
            raise AudioAcquisitionError(
                url, FileNotFoundError(f"expected audio file {audio_path} was not written")
            )

        logger.info(
            "Audio downloaded",
            extra={"url": url, "audio_path": str(audio_path)},
        )
        return audio_path

    async def list_extractors(self) -> list[str]:
        outcome = await self._executor.run([self._binary, "--list-extractors"])
        return [line.strip() for line in outcome.stdout.splitlines() if line.strip()]
