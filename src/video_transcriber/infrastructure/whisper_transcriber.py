"""OpenAI Whisper CLI implementation of the TranscriptionService interface."""

from pathlib import Path

from video_transcriber.config import AUTO_LANGUAGE, ToolsConfig, WhisperModel
from video_transcriber.domain.models import EngineOutput
from video_transcriber.exceptions import CommandExecutionError, TranscriptionEngineError
from video_transcriber.infrastructure.command_executor import CommandExecutor
from video_transcriber.logging import setup_logging

from .interfaces import TranscriptionService

logger = setup_logging()


class WhisperTranscriber(TranscriptionService):
    """Handles audio transcription by invoking the whisper command line."""

    def __init__(self, executor: CommandExecutor, config: ToolsConfig):
        self._executor = executor
        self._binary = config.whisper_binary

    def build_command(
        self, audio_path: Path, output_dir: Path, model: WhisperModel, language: str
    ) -> list[str]:
        """Builds the engine invocation; the language flag is omitted for auto-detection."""
        args = [
            self._binary,
            str(audio_path),
            "--model",
            model,
            "--output_format",
            "all",
            "--output_dir",
            str(output_dir),
            "--verbose",
            "False",
        ]
        if language and language != AUTO_LANGUAGE:
            args.extend(["--language", language])
        return args

    async def transcribe(
        self,
        audio_path: Path,
        output_dir: Path,
        model: WhisperModel,
        language: str,
    ) -> EngineOutput:
        logger.info(
            "Starting transcription",
            extra={"audio_path": str(audio_path), "model": model, "language": language},
        )
        try:
            await self._executor.run(
                self.build_command(audio_path, output_dir, model, language),
                cwd=output_dir,
            )
        except CommandExecutionError as e:
            logger.exception(
                "Whisper transcription failed", extra={"audio_path": str(audio_path)}
            )
            raise TranscriptionEngineError(str(audio_path), e) from e

        logger.info("Audio transcription successful", extra={"audio_path": str(audio_path)})
        return EngineOutput(
            text_path=output_dir / f"{audio_path.stem}.txt",
            json_path=output_dir / f"{audio_path.stem}.json",
        )
