"""Acquisition of the working audio file for a resolved source."""

from pathlib import Path

from video_transcriber.domain.models import (
    LocalSource,
    RemoteSource,
    RetryNotifier,
    WorkingAudio,
)
from video_transcriber.infrastructure.interfaces import AudioExtractor, MediaDownloader


class MediaAcquirer:
    """Downloads remote audio or extracts local audio into a working directory."""

    def __init__(self, downloader: MediaDownloader, extractor: AudioExtractor):
        self._downloader = downloader
        self._extractor = extractor

    async def acquire(
        self,
        source: RemoteSource | LocalSource,
        working_dir: Path,
        on_retry: RetryNotifier | None = None,
    ) -> WorkingAudio:
        """
        Places the source's audio track inside working_dir.

        Remote downloads retry on network-class failures; local extraction
        runs once.

        Raises:
            AudioAcquisitionError: If the download fails.
            AudioExtractionError: If local extraction fails.
        """
        if isinstance(source, RemoteSource):
            audio_path = await self._downloader.download_audio(
                source.reference, working_dir, on_retry=on_retry
            )
        else:
            audio_path = await self._extractor.extract_audio(source.path, working_dir)
        return WorkingAudio(path=audio_path, working_dir=working_dir)
