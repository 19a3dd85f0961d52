"""Infrastructure interface exports."""

from .audio_extractor import AudioExtractor
from .media_downloader import MediaDownloader
from .transcription_service import TranscriptionService

__all__ = ["AudioExtractor", "MediaDownloader", "TranscriptionService"]
