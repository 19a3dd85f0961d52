"""Custom exceptions for the video transcription service."""

_INSTALL_HINTS = {
    "yt-dlp": "pip install yt-dlp",
    "whisper": "pip install openai-whisper",
    "ffmpeg": "install ffmpeg from your package manager (e.g. brew install ffmpeg)",
}


class TranscriberError(Exception):
    """Base class for every error raised by the transcription pipeline."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class InvalidReferenceError(TranscriberError):
    """Raised when a reference is empty or a remote locator cannot be parsed."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Invalid video reference '{reference}': {reason}")


class VideoFileNotFoundError(TranscriberError):
    """Raised when a local reference does not point to an existing file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Video file not found: {path}")


class UnsupportedFormatError(TranscriberError):
    """Raised when a local file's extension is not a known video container."""

    def __init__(self, path: str, extension: str):
        self.path = path
        self.extension = extension
        super().__init__(
            f"Unsupported video format '{extension or '(none)'}' for file: {path}"
        )


class CommandExecutionError(TranscriberError):
    """Raised when an external program exits non-zero or cannot be started."""

    def __init__(
        self,
        program: str,
        returncode: int | None,
        stderr: str,
        cause: Exception | None = None,
    ):
        self.program = program
        self.returncode = returncode
        self.stderr = stderr
        status = "could not be started" if returncode is None else f"exited with code {returncode}"
        detail = stderr.strip()
        message = f"Command '{program}' {status}"
        super().__init__(f"{message}: {detail}" if detail else message, cause)


class OutputLimitExceededError(CommandExecutionError):
    """Raised when a program writes more output than the capture buffer holds."""

    def __init__(self, program: str, limit: int):
        self.limit = limit
        super().__init__(program, None, f"captured output exceeded {limit} bytes")


class MetadataFetchError(TranscriberError):
    """Raised when video metadata cannot be fetched or parsed."""

    def __init__(self, reference: str, cause: Exception | None = None):
        self.reference = reference
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to fetch metadata for '{reference}'{detail}", cause)


class AudioAcquisitionError(TranscriberError):
    """Raised when the audio track cannot be downloaded or extracted."""

    def __init__(self, reference: str, cause: Exception | None = None):
        self.reference = reference
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to acquire audio for '{reference}'{detail}", cause)


class AudioExtractionError(AudioAcquisitionError):
    """Raised when audio extraction from a local video file fails."""

    def __init__(self, file_name: str, cause: Exception | None = None):
        self.reference = file_name
        self.file_name = file_name
        detail = f": {cause}" if cause else ""
        TranscriberError.__init__(
            self, f"Failed to extract audio from '{file_name}'{detail}", cause
        )


class AudioProbeError(TranscriberError):
    """Raised when a local container cannot be probed for its duration."""

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        super().__init__(f"Failed to probe '{path}'", cause)


class TranscriptionEngineError(TranscriberError):
    """Raised when the speech-to-text engine fails."""

    def __init__(self, audio_path: str, cause: Exception | None = None):
        self.audio_path = audio_path
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to transcribe audio file '{audio_path}'{detail}", cause)


class TranscriptionOutputMissingError(TranscriberError):
    """Raised when the engine succeeded but its output files are absent or unreadable."""

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        super().__init__(f"Transcription output missing or unreadable: {output_path}", cause)


class ArtifactWriteError(TranscriberError):
    """Raised when transcript artifacts cannot be written to the destination."""

    def __init__(self, output_dir: str, cause: Exception | None = None):
        self.output_dir = output_dir
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to write transcript files to '{output_dir}'{detail}", cause)


class DependencyMissingError(TranscriberError):
    """Raised when one or more required external tools are not installed."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        hints = "\n".join(f"  {_INSTALL_HINTS.get(name, name)}" for name in missing)
        super().__init__(
            f"Missing dependencies: {', '.join(missing)}\n\nPlease install:\n{hints}"
        )


class TranscriptionFailedError(TranscriberError):
    """Raised by the pipeline, wrapping the first failure with the stage it occurred in."""

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        super().__init__(f"Transcription failed during {stage}: {cause}", cause)


class TranscriptNotFoundError(TranscriberError):
    """Raised when a requested transcript file is missing or outside the transcript directory."""

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        super().__init__(f"Transcript not found: {path}", cause)
