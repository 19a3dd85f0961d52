"""Repository for transcripts already written to disk."""

import re
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from video_transcriber.exceptions import TranscriptNotFoundError
from video_transcriber.logging import setup_logging

logger = setup_logging()

MIME_TYPES = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".json": "application/json",
}

_VIDEO_ID_LINE = re.compile(r"^\*\*Video ID:\*\* (.+)$", re.MULTILINE)
_TITLE_LINE = re.compile(r"^# (.+)$", re.MULTILINE)


class TranscriptFile(BaseModel, frozen=True):
    """A transcript file found in the transcript directory."""

    name: str
    path: Path
    size_bytes: int
    modified: datetime
    mime_type: str

    @property
    def uri(self) -> str:
        return self.path.as_uri()


class TranscriptGroup(BaseModel, frozen=True):
    """All files produced for one transcribed source."""

    video_id: str
    title: str
    files: list[TranscriptFile]


class TranscriptRepository:
    """
    Lists and reads transcript artifacts in a directory.

    Reads are confined to the repository's directory so a caller-supplied
    URI cannot reach arbitrary files.
    """

    def __init__(self, output_dir: Path):
        self._output_dir = output_dir

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def list_files(
        self,
        directory: Path | None = None,
        extensions: tuple[str, ...] = (".txt", ".md", ".json"),
    ) -> list[TranscriptFile]:
        """Returns transcript files in the directory sorted by name; missing directories yield []."""
        directory = directory or self._output_dir
        if not directory.is_dir():
            return []

        files = []
        for path in sorted(directory.iterdir()):
            if not path.is_file() or path.suffix not in extensions:
                continue
            stats = path.stat()
            files.append(
                TranscriptFile(
                    name=path.name,
                    path=path.resolve(),
                    size_bytes=stats.st_size,
                    modified=datetime.fromtimestamp(stats.st_mtime),
                    mime_type=MIME_TYPES[path.suffix],
                )
            )
        return files

    def list_groups(self, directory: Path | None = None) -> list[TranscriptGroup]:
        """
        Groups the text and Markdown transcripts by the source they came from.

        Files sharing a base name belong to the same source. The identifier
        and title are read from the Markdown header when present, otherwise
        derived from the base name.
        """
        grouped: dict[str, list[TranscriptFile]] = {}
        for transcript in self.list_files(directory, extensions=(".txt", ".md")):
            grouped.setdefault(Path(transcript.name).stem, []).append(transcript)

        return [
            self._describe_group(stem, files) for stem, files in grouped.items()
        ]

    def read(self, path: Path) -> str:
        """
        Reads a transcript file inside the repository's directory.

        Raises:
            TranscriptNotFoundError: If the path is outside the directory,
                is not a transcript file or cannot be read.
        """
        resolved = path.expanduser().resolve()
        if not resolved.is_relative_to(self._output_dir.resolve()):
            raise TranscriptNotFoundError(str(path))
        if resolved.suffix not in MIME_TYPES:
            raise TranscriptNotFoundError(str(path))
        try:
            return resolved.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.exception("Transcript read failed", extra={"path": str(resolved)})
            raise TranscriptNotFoundError(str(path), e) from e

    def _describe_group(self, stem: str, files: list[TranscriptFile]) -> TranscriptGroup:
        video_id, _, title = stem.partition("-")
        title = title.replace("-", " ")

        markdown = next((f for f in files if f.path.suffix == ".md"), None)
        if markdown is not None:
            header = self._read_header(markdown.path)
            id_match = _VIDEO_ID_LINE.search(header)
            if id_match:
                video_id = id_match.group(1).strip()
            title_match = _TITLE_LINE.search(header)
            if title_match:
                title = title_match.group(1).strip()

        return TranscriptGroup(video_id=video_id, title=title, files=files)

    def _read_header(self, path: Path) -> str:
        try:
            with path.open(encoding="utf-8") as f:
                return f.read(4096)
        except (OSError, UnicodeDecodeError):
            logger.warning("Transcript header unreadable", extra={"path": str(path)})
            return ""
