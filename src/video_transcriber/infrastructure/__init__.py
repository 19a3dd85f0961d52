"""Infrastructure layer exports."""

from .command_executor import CommandExecutor
from .dependency_checker import DependencyChecker
from .moviepy_extractor import MoviePyAudioExtractor
from .whisper_transcriber import WhisperTranscriber
from .ytdlp_downloader import YtDlpDownloader

__all__ = [
    "CommandExecutor",
    "DependencyChecker",
    "MoviePyAudioExtractor",
    "WhisperTranscriber",
    "YtDlpDownloader",
]
