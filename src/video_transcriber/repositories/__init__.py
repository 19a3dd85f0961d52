"""Repository layer exports."""

from .transcript_repository import TranscriptFile, TranscriptGroup, TranscriptRepository

__all__ = ["TranscriptFile", "TranscriptGroup", "TranscriptRepository"]
