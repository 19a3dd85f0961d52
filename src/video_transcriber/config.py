"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

WhisperModel = Literal["tiny", "base", "small", "medium", "large"]

AUTO_LANGUAGE = "auto"


class RetryConfig(BaseModel, frozen=True):
    """Backoff policy for network-class tool failures."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 10.0


class ExecutorConfig(BaseModel, frozen=True):
    """External process execution limits."""

    max_buffer_bytes: int = 10 * 1024 * 1024
    retry: RetryConfig = RetryConfig()


class ToolsConfig(BaseModel, frozen=True):
    """Names of the external programs the pipeline drives."""

    ytdlp_binary: str = "yt-dlp"
    whisper_binary: str = "whisper"
    ffmpeg_binary: str = "ffmpeg"
    audio_format: str = "mp3"


class TranscriptionConfig(BaseModel, frozen=True):
    """Defaults applied when a request leaves them out."""

    output_dir: Path
    temp_dir: Path | None = None
    default_model: WhisperModel = "base"
    default_language: str = AUTO_LANGUAGE


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    transcription: TranscriptionConfig
    executor: ExecutorConfig
    tools: ToolsConfig


def _default_output_dir() -> Path:
    return Path.home() / "Downloads" / "video-transcripts"


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    temp_dir = os.getenv("VIDEO_TRANSCRIBER_TEMP_DIR")
    return AppConfig(
        transcription=TranscriptionConfig(
            output_dir=Path(
                os.getenv("VIDEO_TRANSCRIBER_OUTPUT_DIR", str(_default_output_dir()))
            ).expanduser(),
            temp_dir=Path(temp_dir).expanduser() if temp_dir else None,
            default_model=os.getenv("VIDEO_TRANSCRIBER_MODEL", "base"),
            default_language=os.getenv("VIDEO_TRANSCRIBER_LANGUAGE", AUTO_LANGUAGE),
        ),
        executor=ExecutorConfig(
            max_buffer_bytes=int(
                os.getenv("VIDEO_TRANSCRIBER_MAX_BUFFER_BYTES", str(10 * 1024 * 1024))
            ),
            retry=RetryConfig(
                max_attempts=int(os.getenv("VIDEO_TRANSCRIBER_MAX_ATTEMPTS", "3")),
            ),
        ),
        tools=ToolsConfig(
            ytdlp_binary=os.getenv("YTDLP_BINARY", "yt-dlp"),
            whisper_binary=os.getenv("WHISPER_BINARY", "whisper"),
            ffmpeg_binary=os.getenv("FFMPEG_BINARY", "ffmpeg"),
        ),
    )
