"""Domain layer exports."""

from .models import (
    ClassifiedReference,
    DownloaderMetadata,
    EngineOutput,
    ExecutionOutcome,
    LocalSource,
    PipelineStage,
    ProgressEvent,
    ProgressSink,
    ReferenceKind,
    RemoteSource,
    ResolvedSource,
    TranscriptArtifacts,
    TranscriptionRequest,
    TranscriptionResult,
    WorkingAudio,
)
from .artifact_composer import ArtifactComposer
from .classifier import classify_reference, reference_kind
from .media_acquirer import MediaAcquirer
from .metadata_acquirer import MetadataAcquirer

__all__ = [
    "ArtifactComposer",
    "ClassifiedReference",
    "DownloaderMetadata",
    "EngineOutput",
    "ExecutionOutcome",
    "LocalSource",
    "MediaAcquirer",
    "MetadataAcquirer",
    "PipelineStage",
    "ProgressEvent",
    "ProgressSink",
    "ReferenceKind",
    "RemoteSource",
    "ResolvedSource",
    "TranscriptArtifacts",
    "TranscriptionRequest",
    "TranscriptionResult",
    "WorkingAudio",
    "classify_reference",
    "reference_kind",
]
