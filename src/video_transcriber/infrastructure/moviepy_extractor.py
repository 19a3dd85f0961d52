"""moviepy implementation of the AudioExtractor interface."""

import asyncio
from pathlib import Path

import moviepy

from video_transcriber.config import ToolsConfig
from video_transcriber.exceptions import AudioExtractionError, AudioProbeError
from video_transcriber.logging import setup_logging

from .interfaces import AudioExtractor

logger = setup_logging()

AUDIO_STEM = "audio"


class MoviePyAudioExtractor(AudioExtractor):
    """Extracts audio tracks from local video files."""

    def __init__(self, config: ToolsConfig):
        self._audio_format = config.audio_format

    async def probe_duration(self, video_path: Path) -> float:
        try:
            duration = await asyncio.to_thread(self._read_duration, video_path)
        except Exception as e:
            logger.warning(
                "Duration probe failed", extra={"file_name": str(video_path), "error": str(e)}
            )
            raise AudioProbeError(str(video_path), e) from e
        return duration

    async def extract_audio(self, video_path: Path, working_dir: Path) -> Path:
        audio_path = working_dir / f"{AUDIO_STEM}.{self._audio_format}"
        try:
            await asyncio.to_thread(self._write_audio, video_path, audio_path)
        except Exception as e:
            logger.exception(
                "Audio extraction failed", extra={"file_name": str(video_path)}
            )
            raise AudioExtractionError(str(video_path), e) from e

        logger.info(
            "Audio extracted successfully",
            extra={"video_file": str(video_path), "audio_file": str(audio_path)},
        )
        return audio_path

    def _read_duration(self, video_path: Path) -> float:
        """Opens the container without decoding audio and reads its duration."""
        video = moviepy.VideoFileClip(str(video_path), audio=False)
        try:
            return float(video.duration or 0)
        finally:
            video.close()

    def _write_audio(self, video_path: Path, audio_path: Path) -> None:
        """Performs the actual audio extraction using moviepy."""
        video = moviepy.VideoFileClip(str(video_path))
        try:
            if video.audio is None:
                raise ValueError(f"'{video_path.name}' has no audio track")
            video.audio.write_audiofile(str(audio_path), logger=None)
        finally:
            if video.audio is not None:
                video.audio.close()
            video.close()
