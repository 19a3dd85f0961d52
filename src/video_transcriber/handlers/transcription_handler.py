"""Handler that runs the video-to-transcript pipeline."""

import shutil
import tempfile
from pathlib import Path

from video_transcriber.config import TranscriptionConfig
from video_transcriber.domain import (
    ArtifactComposer,
    MediaAcquirer,
    MetadataAcquirer,
    PipelineStage,
    ProgressEvent,
    ProgressSink,
    RemoteSource,
    TranscriptionRequest,
    TranscriptionResult,
    classify_reference,
)
from video_transcriber.exceptions import TranscriptionFailedError
from video_transcriber.infrastructure import DependencyChecker
from video_transcriber.infrastructure.interfaces import TranscriptionService
from video_transcriber.logging import setup_logging

logger = setup_logging()

WORKING_DIR_PREFIX = "video-transcript-"


class ProgressReporter:
    """Emits milestone events to the caller's sink and the log."""

    def __init__(self, sink: ProgressSink | None, reference: str):
        self._sink = sink
        self._reference = reference

    def entered(self, stage: PipelineStage, message: str) -> None:
        self._emit(ProgressEvent(kind="stage_entered", stage=stage, message=message))

    def completed(self, stage: PipelineStage, message: str) -> None:
        self._emit(ProgressEvent(kind="stage_completed", stage=stage, message=message))

    def retry_notifier(self, stage: PipelineStage):
        def notify(message: str) -> None:
            self._emit(
                ProgressEvent(kind="retry_scheduled", stage=stage, message=message)
            )

        return notify

    def _emit(self, event: ProgressEvent) -> None:
        logger.info(
            event.message,
            extra={
                "event": event.kind,
                "stage": event.stage.value,
                "reference": self._reference,
            },
        )
        if self._sink:
            try:
                self._sink(event)
            except Exception:
                logger.exception(
                    "Progress sink failed",
                    extra={"event": event.kind, "stage": event.stage.value},
                )


class TranscriptionHandler:
    """Orchestrates reference-to-transcript operations."""

    def __init__(
        self,
        metadata_acquirer: MetadataAcquirer,
        media_acquirer: MediaAcquirer,
        transcription_service: TranscriptionService,
        artifact_composer: ArtifactComposer,
        config: TranscriptionConfig,
        dependency_checker: DependencyChecker | None = None,
    ):
        self._metadata_acquirer = metadata_acquirer
        self._media_acquirer = media_acquirer
        self._transcription_service = transcription_service
        self._artifact_composer = artifact_composer
        self._config = config
        self._dependency_checker = dependency_checker

    async def transcribe(self, request: TranscriptionRequest) -> TranscriptionResult:
        """
        Transcribes a video reference into text, JSON and Markdown files.

        Stages run strictly in order: classify, fetch metadata, acquire audio,
        transcribe, compose artifacts. The request's working directory is
        removed on every exit path.

        Args:
            request: The reference, destination and engine settings.

        Returns:
            TranscriptionResult with the artifact paths, metadata and transcript.

        Raises:
            DependencyMissingError: If a required external tool is not installed.
            TranscriptionFailedError: Wrapping the first stage failure.
        """
        if self._dependency_checker:
            await self._dependency_checker.ensure_available()

        model = request.model or self._config.default_model
        language = request.language or self._config.default_language
        progress = ProgressReporter(request.on_progress, request.reference)

        logger.info(
            "Processing transcription request",
            extra={"reference": request.reference, "model": model, "language": language},
        )

        stage = PipelineStage.CLASSIFY
        working_dir: Path | None = None
        try:
            progress.entered(stage, "Validating input...")
            working_dir = self._create_working_dir()
            classified = classify_reference(request.reference)
            output_dir = self._prepare_output_dir(request.output_dir)
            progress.completed(stage, f"Input classified as {classified.kind.value}")

            stage = PipelineStage.FETCH_METADATA
            progress.entered(stage, "Fetching video metadata...")
            source = await self._metadata_acquirer.acquire(
                classified, on_retry=progress.retry_notifier(stage)
            )
            progress.completed(stage, f"Metadata ready: {source.title}")

            stage = PipelineStage.ACQUIRE_AUDIO
            if isinstance(source, RemoteSource):
                progress.entered(stage, "Downloading audio...")
            else:
                progress.entered(stage, "Extracting audio from local file...")
            audio = await self._media_acquirer.acquire(
                source, working_dir, on_retry=progress.retry_notifier(stage)
            )
            progress.completed(stage, "Audio ready")

            stage = PipelineStage.TRANSCRIBE
            progress.entered(
                stage,
                f"Transcribing audio with Whisper ({model} model, "
                "this may take a few minutes)...",
            )
            engine_output = await self._transcription_service.transcribe(
                audio.path, working_dir, model, language
            )
            progress.completed(stage, "Transcription complete")

            stage = PipelineStage.COMPOSE_ARTIFACTS
            progress.entered(stage, "Writing transcript files...")
            artifacts = self._artifact_composer.compose(
                source, engine_output, output_dir, model, language
            )
            progress.completed(stage, f"Transcript saved to {output_dir}")

            stage = PipelineStage.CLEANUP
            progress.entered(stage, "Cleaning up...")
            self._remove_working_dir(working_dir)
            progress.completed(stage, "Done!")
        except Exception as e:
            logger.exception(
                "Transcription pipeline failed",
                extra={"reference": request.reference, "stage": stage.value},
            )
            raise TranscriptionFailedError(stage.value, e) from e
        finally:
            if working_dir is not None:
                self._remove_working_dir(working_dir)

        return TranscriptionResult(
            source=source, artifacts=artifacts, model=model, language=language
        )

    def _create_working_dir(self) -> Path:
        temp_root = self._config.temp_dir
        if temp_root is not None:
            temp_root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=WORKING_DIR_PREFIX, dir=temp_root))

    def _prepare_output_dir(self, requested: Path | None) -> Path:
        """Resolves the destination directory and creates it if needed."""
        output_dir = (requested or self._config.output_dir).expanduser().resolve()
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir

    def _remove_working_dir(self, working_dir: Path) -> None:
        """Best-effort removal; a failure here never replaces the run's outcome."""
        if not working_dir.exists():
            return
        try:
            shutil.rmtree(working_dir)
        except OSError:
            logger.warning(
                "Working directory cleanup failed",
                extra={"working_dir": str(working_dir)},
                exc_info=True,
            )
