"""Abstract interface for speech-to-text engine operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from video_transcriber.config import WhisperModel
from video_transcriber.domain.models import EngineOutput


class TranscriptionService(ABC):
    """Abstract base class for audio transcription backends."""

    @abstractmethod
    async def transcribe(
        self,
        audio_path: Path,
        output_dir: Path,
        model: WhisperModel,
        language: str,
    ) -> EngineOutput:
        """
        Transcribes an audio file, writing the engine's outputs to output_dir.

        Args:
            audio_path: The audio file to transcribe.
            output_dir: Directory that receives the engine's output files.
            model: Model size to load.
            language: ISO language code, or "auto" to let the engine detect it.

        Returns:
            Paths of the plain-text and structured outputs.

        Raises:
            TranscriptionEngineError: If the engine fails.
        """
