"""Shared fakes for the external tools the pipeline drives."""

from pathlib import Path

import pytest

from video_transcriber.config import ExecutorConfig, RetryConfig, TranscriptionConfig
from video_transcriber.domain.models import DownloaderMetadata, EngineOutput, ExecutionOutcome
from video_transcriber.exceptions import (
    AudioAcquisitionError,
    AudioExtractionError,
    AudioProbeError,
    MetadataFetchError,
    TranscriptionEngineError,
)
from video_transcriber.infrastructure.command_executor import CommandExecutor
from video_transcriber.infrastructure.interfaces import (
    AudioExtractor,
    MediaDownloader,
    TranscriptionService,
)


class ScriptedExecutor(CommandExecutor):
    """CommandExecutor whose program runs are answered by a responder instead of a subprocess."""

    def __init__(self, responder, max_attempts=3):
        self.sleeps = []

        async def record_sleep(seconds):
            self.sleeps.append(float(seconds))

        super().__init__(
            ExecutorConfig(retry=RetryConfig(max_attempts=max_attempts)),
            sleep=record_sleep,
        )
        self._responder = responder
        self.calls = []

    async def execute(self, args, cwd=None):
        self.calls.append((list(args), cwd))
        return self._responder(list(args), cwd)


def ok(program, stdout=""):
    return ExecutionOutcome(program=program, returncode=0, stdout=stdout)


def failed(program, stderr, returncode=1):
    return ExecutionOutcome(program=program, returncode=returncode, stderr=stderr)


class FakeDownloader(MediaDownloader):
    def __init__(self, metadata=None, fail_metadata=False, fail_download=False):
        self.metadata = metadata or DownloaderMetadata(
            id="xyz",
            title="Demo Talk",
            channel="Conf",
            duration=125,
            upload_date="20230601",
            extractor_key="Youtube",
        )
        self.fail_metadata = fail_metadata
        self.fail_download = fail_download
        self.downloads = []

    async def fetch_metadata(self, url, on_retry=None):
        if self.fail_metadata:
            raise MetadataFetchError(url)
        return self.metadata

    async def download_audio(self, url, working_dir, on_retry=None):
        if self.fail_download:
            raise AudioAcquisitionError(url)
        audio_path = working_dir / "audio.mp3"
        audio_path.write_bytes(b"ID3")
        self.downloads.append((url, working_dir))
        return audio_path

    async def list_extractors(self):
        return ["youtube", "vimeo", "generic"]


class FakeExtractor(AudioExtractor):
    def __init__(self, duration=42.4, fail_probe=False, fail_extract=False):
        self.duration = duration
        self.fail_probe = fail_probe
        self.fail_extract = fail_extract

    async def probe_duration(self, video_path):
        if self.fail_probe:
            raise AudioProbeError(str(video_path))
        return self.duration

    async def extract_audio(self, video_path, working_dir):
        if self.fail_extract:
            raise AudioExtractionError(video_path.name)
        audio_path = working_dir / "audio.mp3"
        audio_path.write_bytes(b"ID3")
        return audio_path


class FakeTranscriptionService(TranscriptionService):
    def __init__(self, text="Hello and welcome to the demo.", fail=False, write_json=True):
        self.text = text
        self.fail = fail
        self.write_json = write_json
        self.calls = []

    async def transcribe(self, audio_path, output_dir, model, language):
        self.calls.append((audio_path, output_dir, model, language))
        if self.fail:
            raise TranscriptionEngineError(str(audio_path))
        text_path = output_dir / f"{audio_path.stem}.txt"
        json_path = output_dir / f"{audio_path.stem}.json"
        text_path.write_text(self.text, encoding="utf-8")
        if self.write_json:
            json_path.write_text('{"text": "%s", "segments": []}' % self.text, encoding="utf-8")
        return EngineOutput(text_path=text_path, json_path=json_path)


@pytest.fixture
def transcription_config(tmp_path) -> TranscriptionConfig:
    return TranscriptionConfig(output_dir=tmp_path / "out", temp_dir=tmp_path / "work")


@pytest.fixture
def video_file(tmp_path) -> Path:
    path = tmp_path / "media" / "Team Sync.mp4"
    path.parent.mkdir()
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return path
