import json

import pytest

from conftest import ScriptedExecutor, failed, ok
from video_transcriber.config import ToolsConfig
from video_transcriber.exceptions import AudioAcquisitionError, MetadataFetchError
from video_transcriber.infrastructure import YtDlpDownloader

URL = "https://www.youtube.com/watch?v=xyz"

DUMP = {
    "id": "xyz",
    "title": "Demo Talk",
    "uploader": "Conf Uploads",
    "duration": 124.6,
    "upload_date": "20230601",
    "extractor": "youtube",
    "extractor_key": "Youtube",
    "formats": [{"format_id": "140"}],
}


@pytest.mark.asyncio
async def test_fetch_metadata_parses_first_json_line():
    stdout = json.dumps(DUMP) + "\n" + json.dumps({"id": "other"}) + "\n"
    executor = ScriptedExecutor(lambda args, cwd: ok("yt-dlp", stdout))
    downloader = YtDlpDownloader(executor, ToolsConfig())

    metadata = await downloader.fetch_metadata(URL)

    assert executor.calls[0][0] == ["yt-dlp", "--dump-json", "--no-playlist", "--no-warnings", URL]
    assert metadata.id == "xyz"
    assert metadata.resolved_title == "Demo Talk"
    assert metadata.resolved_channel == "Conf Uploads"
    assert metadata.resolved_duration == 125
    assert metadata.extractor_name == "Youtube"


@pytest.mark.asyncio
async def test_fetch_metadata_defaults_for_missing_fields():
    executor = ScriptedExecutor(lambda args, cwd: ok("yt-dlp", '{"duration": null}'))
    metadata = await YtDlpDownloader(executor, ToolsConfig()).fetch_metadata(URL)

    assert metadata.resolved_title == "Unknown"
    assert metadata.resolved_channel == "Unknown"
    assert metadata.resolved_duration == 0
    assert metadata.resolved_upload_date == ""


@pytest.mark.asyncio
async def test_fetch_metadata_rejects_unparsable_output():
    executor = ScriptedExecutor(lambda args, cwd: ok("yt-dlp", "not json"))
    with pytest.raises(MetadataFetchError):
        await YtDlpDownloader(executor, ToolsConfig()).fetch_metadata(URL)


@pytest.mark.asyncio
async def test_fetch_metadata_wraps_tool_failure():
    executor = ScriptedExecutor(lambda args, cwd: failed("yt-dlp", "ERROR: Video unavailable"))
    with pytest.raises(MetadataFetchError) as exc_info:
        await YtDlpDownloader(executor, ToolsConfig()).fetch_metadata(URL)
    assert "Video unavailable" in str(exc_info.value)
    assert len(executor.calls) == 1


@pytest.mark.asyncio
async def test_download_audio_writes_into_working_dir(tmp_path):
    def respond(args, cwd):
        (cwd / "audio.mp3").write_bytes(b"ID3")
        return ok("yt-dlp")

    executor = ScriptedExecutor(respond)
    audio_path = await YtDlpDownloader(executor, ToolsConfig()).download_audio(URL, tmp_path)

    args, cwd = executor.calls[0]
    assert cwd == tmp_path
    assert args[args.index("--audio-format") + 1] == "mp3"
    assert args[args.index("--output") + 1] == "audio.%(ext)s"
    assert args[-1] == URL
    assert audio_path == tmp_path / "audio.mp3"


@pytest.mark.asyncio
async def test_download_audio_requires_output_file(tmp_path):
    executor = ScriptedExecutor(lambda args, cwd: ok("yt-dlp"))
    with pytest.raises(AudioAcquisitionError):
        await YtDlpDownloader(executor, ToolsConfig()).download_audio(URL, tmp_path)


@pytest.mark.asyncio
async def test_list_extractors():
    executor = ScriptedExecutor(lambda args, cwd: ok("yt-dlp", "youtube\n\nvimeo\n  generic \n"))
    assert await YtDlpDownloader(executor, ToolsConfig()).list_extractors() == [
        "youtube",
        "vimeo",
        "generic",
    ]


@pytest.mark.asyncio
async def test_fetch_metadata_reports_retries():
    outcomes = [failed("yt-dlp", "ERROR: Read timeout"), ok("yt-dlp", json.dumps(DUMP))]
    executor = ScriptedExecutor(lambda args, cwd: outcomes.pop(0))
    notices = []

    metadata = await YtDlpDownloader(executor, ToolsConfig()).fetch_metadata(
        URL, on_retry=notices.append
    )

    assert metadata.id == "xyz"
    assert notices == ["Network error running yt-dlp, retrying in 1000ms (attempt 2/3)"]


@pytest.mark.asyncio
async def test_download_audio_reports_retries(tmp_path):
    attempts = []

    def respond(args, cwd):
        attempts.append(args)
        if len(attempts) == 1:
            return failed("yt-dlp", "ERROR: Connection reset by peer")
        (cwd / "audio.mp3").write_bytes(b"ID3")
        return ok("yt-dlp")

    notices = []
    audio_path = await YtDlpDownloader(ScriptedExecutor(respond), ToolsConfig()).download_audio(
        URL, tmp_path, on_retry=notices.append
    )

    assert audio_path.is_file()
    assert len(attempts) == 2
    assert notices == ["Network error running yt-dlp, retrying in 1000ms (attempt 2/3)"]
