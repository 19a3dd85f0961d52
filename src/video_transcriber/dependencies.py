"""Dependency injection configuration for the video transcriber service."""

from video_transcriber.config import AppConfig, load_config
from video_transcriber.domain import ArtifactComposer, MediaAcquirer, MetadataAcquirer
from video_transcriber.handlers import TranscriptionHandler
from video_transcriber.infrastructure import (
    CommandExecutor,
    DependencyChecker,
    MoviePyAudioExtractor,
    WhisperTranscriber,
    YtDlpDownloader,
)
from video_transcriber.infrastructure.interfaces import (
    AudioExtractor,
    MediaDownloader,
    TranscriptionService,
)
from video_transcriber.logging import setup_logging
from video_transcriber.repositories import TranscriptRepository
from video_transcriber.server import VideoTranscriberServer

logger = setup_logging()

_config = load_config()

_executor = CommandExecutor(_config.executor)
_downloader = YtDlpDownloader(_executor, _config.tools)
_extractor = MoviePyAudioExtractor(_config.tools)
_transcriber = WhisperTranscriber(_executor, _config.tools)
_dependency_checker = DependencyChecker(_executor, _config.tools)
_repository = TranscriptRepository(_config.transcription.output_dir)


def get_config() -> AppConfig:
    """Returns the loaded application configuration."""
    return _config


def get_downloader() -> MediaDownloader:
    """Returns the configured media downloader."""
    return _downloader


def get_extractor() -> AudioExtractor:
    """Returns the configured local audio extractor."""
    return _extractor


def get_transcriber() -> TranscriptionService:
    """Returns the configured transcription service."""
    return _transcriber


def get_dependency_checker() -> DependencyChecker:
    """Returns the shared dependency checker."""
    return _dependency_checker


def get_repository() -> TranscriptRepository:
    """Returns the transcript repository for the default output directory."""
    return _repository


def get_handler() -> TranscriptionHandler:
    """Returns the configured transcription handler."""
    return TranscriptionHandler(
        MetadataAcquirer(_downloader, _extractor),
        MediaAcquirer(_downloader, _extractor),
        _transcriber,
        ArtifactComposer(),
        _config.transcription,
        _dependency_checker,
    )


def get_server() -> VideoTranscriberServer:
    """Returns the configured MCP server."""
    return VideoTranscriberServer(
        get_handler(), _repository, _downloader, _dependency_checker
    )
