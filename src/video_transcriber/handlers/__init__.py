"""Request handlers."""

from .transcription_handler import ProgressReporter, TranscriptionHandler

__all__ = ["ProgressReporter", "TranscriptionHandler"]
