"""Abstract interface for local video probing and audio extraction."""

from abc import ABC, abstractmethod
from pathlib import Path


class AudioExtractor(ABC):
    """Abstract base class for local audio extraction backends."""

    @abstractmethod
    async def probe_duration(self, video_path: Path) -> float:
        """
        Reads the container duration of a local video.

        Raises:
            AudioProbeError: If the file cannot be probed.
        """

    @abstractmethod
    async def extract_audio(self, video_path: Path, working_dir: Path) -> Path:
        """
        Extracts the audio track of a local video into working_dir.

        Args:
            video_path: Absolute path of the source video.
            working_dir: The request's private working directory.

        Returns:
            Path of the audio file.

        Raises:
            AudioExtractionError: If extraction fails.
        """
