"""Classification and validation of video references."""

from pathlib import Path
from urllib.parse import urlparse

from video_transcriber.domain.models import ClassifiedReference, ReferenceKind
from video_transcriber.exceptions import (
    InvalidReferenceError,
    UnsupportedFormatError,
    VideoFileNotFoundError,
)

VIDEO_EXTENSIONS = frozenset(
    {
        ".mp4",
        ".avi",
        ".mov",
        ".mkv",
        ".flv",
        ".wmv",
        ".webm",
        ".m4v",
        ".mpg",
        ".mpeg",
        ".3gp",
        ".ogv",
    }
)

_REMOTE_SCHEMES = ("http://", "https://")


def reference_kind(reference: str) -> ReferenceKind:
    """Returns REMOTE for http(s) locators and LOCAL for everything else."""
    if reference.strip().lower().startswith(_REMOTE_SCHEMES):
        return ReferenceKind.REMOTE
    return ReferenceKind.LOCAL


def classify_reference(reference: str) -> ClassifiedReference:
    """
    Classifies a reference and validates it for its kind.

    Args:
        reference: A video URL or a local file path.

    Returns:
        ClassifiedReference; for local files the path is absolute.

    Raises:
        InvalidReferenceError: If the reference is empty or the locator has no host.
        VideoFileNotFoundError: If a local path does not exist.
        UnsupportedFormatError: If a local file is not a known video container.
    """
    reference = reference.strip()
    if not reference:
        raise InvalidReferenceError(reference, "reference is empty")

    if reference_kind(reference) is ReferenceKind.REMOTE:
        try:
            parsed = urlparse(reference)
        except ValueError as e:
            raise InvalidReferenceError(reference, str(e)) from e
        if not parsed.hostname:
            raise InvalidReferenceError(reference, "locator has no host")
        return ClassifiedReference(kind=ReferenceKind.REMOTE, reference=reference)

    try:
        path = Path(reference).expanduser().resolve()
    except (OSError, RuntimeError, ValueError) as e:
        raise InvalidReferenceError(reference, str(e)) from e
    if not path.is_file():
        raise VideoFileNotFoundError(str(path))

    extension = path.suffix.lower()
    if extension not in VIDEO_EXTENSIONS:
        raise UnsupportedFormatError(str(path), extension)

    return ClassifiedReference(kind=ReferenceKind.LOCAL, reference=reference, path=path)
