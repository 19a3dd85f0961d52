"""Abstract interface for the remote media download tool."""

from abc import ABC, abstractmethod
from pathlib import Path

from video_transcriber.domain.models import DownloaderMetadata, RetryNotifier


class MediaDownloader(ABC):
    """Abstract base class for remote video download backends."""

    @abstractmethod
    async def fetch_metadata(
        self, url: str, on_retry: RetryNotifier | None = None
    ) -> DownloaderMetadata:
        """
        Fetches video metadata without downloading media.

        Args:
            url: The video locator.
            on_retry: Called with a message each time a retry is scheduled.

        Returns:
            The parsed metadata dump.

        Raises:
            MetadataFetchError: If the tool fails or its output cannot be parsed.
        """

    @abstractmethod
    async def download_audio(
        self, url: str, working_dir: Path, on_retry: RetryNotifier | None = None
    ) -> Path:
        """
        Downloads the best audio track and transcodes it inside working_dir.

        Args:
            url: The video locator.
            working_dir: The request's private working directory.
            on_retry: Called with a message each time a retry is scheduled.

        Returns:
            Path of the audio file.

        Raises:
            AudioAcquisitionError: If the download or transcode fails.
        """

    @abstractmethod
    async def list_extractors(self) -> list[str]:
        """Returns the names of the sites the tool can download from."""
