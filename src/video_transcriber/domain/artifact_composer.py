"""Core business logic for transcript artifact generation."""

from pathlib import Path

from video_transcriber.config import WhisperModel
from video_transcriber.domain.formatting import format_date, format_duration
from video_transcriber.domain.models import (
    PREVIEW_LENGTH,
    EngineOutput,
    LocalSource,
    RemoteSource,
    TranscriptArtifacts,
)
from video_transcriber.domain.naming import artifact_basename
from video_transcriber.exceptions import (
    ArtifactWriteError,
    TranscriptionOutputMissingError,
)
from video_transcriber.logging import setup_logging

logger = setup_logging()

TRANSCRIPT_HEADING = "## Transcript"
SECTION_RULE = "---"


class ArtifactComposer:
    """Builds the text, JSON and Markdown transcript files for a source."""

    def compose(
        self,
        source: RemoteSource | LocalSource,
        engine_output: EngineOutput,
        output_dir: Path,
        model: WhisperModel,
        language: str,
    ) -> TranscriptArtifacts:
        """
        Reads the engine's outputs and writes the three artifacts to output_dir.

        Either all three files are written or none are.

        Args:
            source: Resolved metadata for the transcribed video.
            engine_output: Paths of the engine's text and JSON outputs.
            output_dir: Destination directory.
            model: Model size used, recorded in the Markdown trailer.
            language: Language hint used, recorded in the Markdown trailer.

        Returns:
            TranscriptArtifacts with the written paths and the transcript text.

        Raises:
            TranscriptionOutputMissingError: If an engine output is absent or unreadable.
            ArtifactWriteError: If the destination files cannot be written.
        """
        transcript = self._read_engine_output(engine_output.text_path)
        structured = self._read_engine_output(engine_output.json_path)

        basename = artifact_basename(source.video_id, source.title)
        txt_path = output_dir / f"{basename}.txt"
        json_path = output_dir / f"{basename}.json"
        md_path = output_dir / f"{basename}.md"

        self._write_all(
            {
                txt_path: transcript,
                json_path: structured,
                md_path: self.render_markdown(source, transcript, model, language),
            },
            output_dir,
        )

        logger.info(
            "Transcript artifacts written",
            extra={"video_id": source.video_id, "output_dir": str(output_dir)},
        )
        return TranscriptArtifacts(
            txt_path=txt_path,
            json_path=json_path,
            md_path=md_path,
            transcript=transcript,
            preview=transcript[:PREVIEW_LENGTH],
        )

    def render_markdown(
        self,
        source: RemoteSource | LocalSource,
        transcript: str,
        model: WhisperModel,
        language: str,
    ) -> str:
        """Renders the annotated Markdown document for a transcript."""
        source_label = "Video" if isinstance(source, RemoteSource) else "File"
        return (
            f"# {source.title}\n"
            "\n"
            f"**{source_label}:** {source.reference}\n"
            f"**Platform:** {source.platform}\n"
            f"**Channel:** {source.channel}\n"
            f"**Video ID:** {source.video_id}\n"
            f"**Duration:** {format_duration(source.duration)}\n"
            f"**Published:** {format_date(source.upload_date)}\n"
            "\n"
            f"{SECTION_RULE}\n"
            "\n"
            f"{TRANSCRIPT_HEADING}\n"
            "\n"
            f"{transcript}\n"
            "\n"
            f"{SECTION_RULE}\n"
            "\n"
            f"*Transcribed using OpenAI Whisper (model: {model}, language: {language})*\n"
        )

    def _read_engine_output(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.exception("Engine output unreadable", extra={"path": str(path)})
            raise TranscriptionOutputMissingError(str(path), e) from e

    def _write_all(self, files: dict[Path, str], output_dir: Path) -> None:
        """Stages every file next to its target, then moves them into place."""
        staged: list[tuple[Path, Path]] = []
        committed: list[Path] = []
        try:
            for path, content in files.items():
                part = path.with_name(f".{path.name}.part")
                part.write_text(content, encoding="utf-8")
                staged.append((part, path))
            for part, path in staged:
                part.replace(path)
                committed.append(path)
        except OSError as e:
            for part, _ in staged:
                part.unlink(missing_ok=True)
            for path in committed:
                path.unlink(missing_ok=True)
            logger.exception(
                "Artifact write failed", extra={"output_dir": str(output_dir)}
            )
            raise ArtifactWriteError(str(output_dir), e) from e
