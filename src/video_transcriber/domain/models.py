"""Domain models for the video transcription pipeline."""

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from video_transcriber.config import WhisperModel

PREVIEW_LENGTH = 500

LOCAL_FILE_LABEL = "Local File"
UNKNOWN_LABEL = "Unknown"


class ReferenceKind(str, Enum):
    """Whether a reference names a network locator or a file on disk."""

    REMOTE = "remote"
    LOCAL = "local"


class PipelineStage(str, Enum):
    """Stages of a transcription run, in execution order."""

    CLASSIFY = "classify"
    FETCH_METADATA = "fetch_metadata"
    ACQUIRE_AUDIO = "acquire_audio"
    TRANSCRIBE = "transcribe"
    COMPOSE_ARTIFACTS = "compose_artifacts"
    CLEANUP = "cleanup"


class ProgressEvent(BaseModel, frozen=True):
    """A milestone notification emitted while a request runs."""

    kind: Literal["stage_entered", "retry_scheduled", "stage_completed"]
    stage: PipelineStage
    message: str

    def __str__(self) -> str:
        return self.message


ProgressSink = Callable[[ProgressEvent], None]
RetryNotifier = Callable[[str], None]


class TranscriptionRequest(BaseModel, frozen=True):
    """Caller-supplied parameters for one transcription run."""

    reference: str = Field(min_length=1)
    output_dir: Path | None = None
    model: WhisperModel | None = None
    language: str | None = None
    on_progress: ProgressSink | None = Field(default=None, exclude=True)


class ClassifiedReference(BaseModel, frozen=True):
    """A validated reference; local paths are resolved to absolute form."""

    kind: ReferenceKind
    reference: str
    path: Path | None = None


class DownloaderMetadata(BaseModel):
    """
    The subset of the download tool's metadata dump the pipeline reads.

    Every field is optional; absent or null values fall back to the
    documented defaults through the accessor properties.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str | None = None
    channel: str | None = None
    uploader: str | None = None
    duration: float | None = None
    upload_date: str | None = None
    extractor: str | None = None
    extractor_key: str | None = None

    @property
    def resolved_title(self) -> str:
        return self.title or UNKNOWN_LABEL

    @property
    def resolved_channel(self) -> str:
        return self.channel or self.uploader or UNKNOWN_LABEL

    @property
    def resolved_duration(self) -> int:
        return int(round(self.duration)) if self.duration else 0

    @property
    def resolved_upload_date(self) -> str:
        return self.upload_date or ""

    @property
    def extractor_name(self) -> str | None:
        return self.extractor_key or self.extractor


class RemoteSource(BaseModel, frozen=True):
    """Metadata for a video fetched from a network locator."""

    kind: Literal["remote"] = "remote"
    reference: str
    video_id: str
    title: str
    channel: str
    duration: int = 0
    upload_date: str = ""
    platform: str = UNKNOWN_LABEL


class LocalSource(BaseModel, frozen=True):
    """Metadata for a video file on local disk."""

    kind: Literal["local"] = "local"
    path: Path
    video_id: str
    title: str
    duration: int = 0
    channel: str = LOCAL_FILE_LABEL
    upload_date: str = ""
    platform: str = LOCAL_FILE_LABEL

    @property
    def reference(self) -> str:
        return str(self.path)


ResolvedSource = Annotated[RemoteSource | LocalSource, Field(discriminator="kind")]


class WorkingAudio(BaseModel, frozen=True):
    """The acquired audio file inside a request's private working directory."""

    path: Path
    working_dir: Path


class ExecutionOutcome(BaseModel, frozen=True):
    """Captured result of one external program invocation."""

    program: str
    returncode: int | None
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class EngineOutput(BaseModel, frozen=True):
    """Paths of the engine's native outputs for one audio file."""

    text_path: Path
    json_path: Path


class TranscriptArtifacts(BaseModel, frozen=True):
    """The three persisted transcript files plus the transcript text."""

    txt_path: Path
    json_path: Path
    md_path: Path
    transcript: str
    preview: str


class TranscriptionResult(BaseModel, frozen=True):
    """Terminal result of a successful transcription run."""

    source: ResolvedSource
    artifacts: TranscriptArtifacts
    model: WhisperModel
    language: str

    @property
    def transcript(self) -> str:
        return self.artifacts.transcript

    @property
    def transcript_preview(self) -> str:
        return self.artifacts.preview
