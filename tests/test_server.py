import pytest

from conftest import FakeDownloader, FakeExtractor, FakeTranscriptionService, ScriptedExecutor, ok
from video_transcriber.config import ToolsConfig
from video_transcriber.domain import (
    ArtifactComposer,
    MediaAcquirer,
    MetadataAcquirer,
    RemoteSource,
    TranscriptArtifacts,
    TranscriptionResult,
)
from video_transcriber.exceptions import TranscriptionFailedError, TranscriptNotFoundError
from video_transcriber.handlers import TranscriptionHandler
from video_transcriber.infrastructure import DependencyChecker
from video_transcriber.repositories import TranscriptRepository
from video_transcriber.server import (
    VideoTranscriberServer,
    format_supported_sites,
    format_transcription_summary,
)


@pytest.fixture
def server(transcription_config):
    downloader = FakeDownloader()
    extractor = FakeExtractor()
    handler = TranscriptionHandler(
        MetadataAcquirer(downloader, extractor),
        MediaAcquirer(downloader, extractor),
        FakeTranscriptionService(),
        ArtifactComposer(),
        transcription_config,
    )
    checker = DependencyChecker(ScriptedExecutor(lambda args, cwd: ok(args[0])), ToolsConfig())
    return VideoTranscriberServer(
        handler,
        TranscriptRepository(transcription_config.output_dir),
        downloader,
        checker,
    )


def make_result(transcript):
    return TranscriptionResult(
        source=RemoteSource(
            reference="https://www.youtube.com/watch?v=xyz",
            video_id="xyz",
            title="Demo Talk",
            channel="Conf",
            duration=125,
            platform="YouTube",
        ),
        artifacts=TranscriptArtifacts(
            txt_path="/out/xyz-Demo-Talk.txt",
            json_path="/out/xyz-Demo-Talk.json",
            md_path="/out/xyz-Demo-Talk.md",
            transcript=transcript,
            preview=transcript[:500],
        ),
        model="base",
        language="auto",
    )


def test_summary_lists_details_and_word_count():
    summary = format_transcription_summary(make_result("one two three"))

    assert "- Title: Demo Talk" in summary
    assert "- Platform: YouTube" in summary
    assert "- Duration: 2:05" in summary
    assert "- Markdown: /out/xyz-Demo-Talk.md" in summary
    assert "one two three\n" in summary
    assert "**Full transcript has 3 words.**" in summary


def test_summary_marks_truncated_preview():
    summary = format_transcription_summary(make_result("a" * 600))
    assert "a" * 500 + "...\n" in summary


def test_supported_sites_preview():
    sites = [f"site{i}" for i in range(60)]
    text = format_supported_sites(sites)
    assert "(60 total)" in text
    assert "site49..." in text
    assert "site50" not in text


@pytest.mark.asyncio
async def test_list_tools(server):
    tools = await server.list_tools()
    assert [t.name for t in tools] == [
        "transcribe_video",
        "list_transcripts",
        "check_dependencies",
        "list_supported_sites",
    ]
    assert tools[0].inputSchema["required"] == ["url"]


@pytest.mark.asyncio
async def test_transcribe_then_list_and_read(server, transcription_config):
    content = await server.call_tool(
        "transcribe_video", {"url": "https://www.youtube.com/watch?v=xyz"}
    )
    assert content[0].text.startswith("✅ Video transcribed successfully!")

    listing = await server.call_tool("list_transcripts", {})
    assert "📚 Available transcripts (1 videos)" in listing[0].text
    assert "**Demo Talk**" in listing[0].text

    resources = await server.list_resources()
    assert sorted(r.name for r in resources) == [
        "xyz-Demo-Talk.json",
        "xyz-Demo-Talk.md",
        "xyz-Demo-Talk.txt",
    ]
    markdown = next(r for r in resources if r.name.endswith(".md"))
    contents = await server.read_resource(markdown.uri)
    assert contents[0].mime_type == "text/markdown"
    assert contents[0].content.startswith("# Demo Talk")


@pytest.mark.asyncio
async def test_transcribe_failure_propagates(server):
    with pytest.raises(TranscriptionFailedError):
        await server.call_tool("transcribe_video", {"url": "/no/such/file.mp4"})


@pytest.mark.asyncio
async def test_list_transcripts_without_directory(server, tmp_path):
    content = await server.call_tool("list_transcripts", {"output_dir": str(tmp_path / "nope")})
    assert content[0].text.startswith("📂 No transcripts directory found")


@pytest.mark.asyncio
async def test_check_dependencies(server):
    content = await server.call_tool("check_dependencies", {})
    assert "All dependencies are installed" in content[0].text


@pytest.mark.asyncio
async def test_list_supported_sites(server):
    content = await server.call_tool("list_supported_sites", None)
    assert "(3 total)" in content[0].text


@pytest.mark.asyncio
async def test_unknown_tool(server):
    with pytest.raises(ValueError):
        await server.call_tool("delete_everything", {})


@pytest.mark.asyncio
async def test_read_resource_rejects_other_schemes(server):
    with pytest.raises(TranscriptNotFoundError):
        await server.read_resource("https://example.com/x.md")
