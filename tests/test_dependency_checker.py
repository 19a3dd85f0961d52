import pytest

from conftest import ScriptedExecutor, failed, ok
from video_transcriber.config import ToolsConfig
from video_transcriber.exceptions import DependencyMissingError
from video_transcriber.infrastructure import DependencyChecker


def responder(missing):
    def respond(args, cwd):
        if args[0] in missing:
            return failed(args[0], "No such file or directory", returncode=None)
        return ok(args[0], "1.0")

    return respond


@pytest.mark.asyncio
async def test_probes_each_tool():
    executor = ScriptedExecutor(responder(set()))

    assert await DependencyChecker(executor, ToolsConfig()).check() == []
    assert [args for args, _ in executor.calls] == [
        ["yt-dlp", "--version"],
        ["whisper", "--help"],
        ["ffmpeg", "-version"],
    ]


@pytest.mark.asyncio
async def test_reports_missing_tools_with_install_hints():
    checker = DependencyChecker(ScriptedExecutor(responder({"yt-dlp", "ffmpeg"})), ToolsConfig())

    with pytest.raises(DependencyMissingError) as exc_info:
        await checker.ensure_available()

    message = str(exc_info.value)
    assert exc_info.value.missing == ["yt-dlp", "ffmpeg"]
    assert message.startswith("Missing dependencies: yt-dlp, ffmpeg")
    assert "pip install yt-dlp" in message
    assert "ffmpeg" in message.split("Please install:")[1]


@pytest.mark.asyncio
async def test_successful_check_is_cached():
    executor = ScriptedExecutor(responder(set()))
    checker = DependencyChecker(executor, ToolsConfig())

    await checker.ensure_available()
    await checker.ensure_available()

    assert len(executor.calls) == 3


@pytest.mark.asyncio
async def test_uses_configured_binaries():
    executor = ScriptedExecutor(responder(set()))
    config = ToolsConfig(ytdlp_binary="/opt/yt-dlp", whisper_binary="whisper-cli")

    await DependencyChecker(executor, config).check()

    assert executor.calls[0][0][0] == "/opt/yt-dlp"
    assert executor.calls[1][0][0] == "whisper-cli"
