import pytest

from video_transcriber.domain import ReferenceKind, classify_reference, reference_kind
from video_transcriber.exceptions import (
    InvalidReferenceError,
    UnsupportedFormatError,
    VideoFileNotFoundError,
)


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("https://www.youtube.com/watch?v=abc", ReferenceKind.REMOTE),
        ("http://example.com/video", ReferenceKind.REMOTE),
        ("HTTPS://EXAMPLE.COM/V", ReferenceKind.REMOTE),
        ("/tmp/video.mp4", ReferenceKind.LOCAL),
        ("video.mp4", ReferenceKind.LOCAL),
        ("ftp://example.com/video.mp4", ReferenceKind.LOCAL),
        ("", ReferenceKind.LOCAL),
    ],
)
def test_reference_kind_is_total(reference, expected):
    assert reference_kind(reference) is expected


def test_classify_remote_reference():
    classified = classify_reference("https://vimeo.com/12345")
    assert classified.kind is ReferenceKind.REMOTE
    assert classified.reference == "https://vimeo.com/12345"
    assert classified.path is None


def test_classify_rejects_empty_reference():
    with pytest.raises(InvalidReferenceError):
        classify_reference("   ")


def test_classify_rejects_locator_without_host():
    with pytest.raises(InvalidReferenceError):
        classify_reference("https://")


def test_classify_local_file_resolves_path(video_file, monkeypatch):
    monkeypatch.chdir(video_file.parent)
    classified = classify_reference(video_file.name)
    assert classified.kind is ReferenceKind.LOCAL
    assert classified.path == video_file.resolve()
    assert classified.path.is_absolute()


def test_classify_accepts_uppercase_extension(tmp_path):
    path = tmp_path / "CLIP.MOV"
    path.write_bytes(b"\x00")
    assert classify_reference(str(path)).path == path.resolve()


def test_classify_missing_file(tmp_path):
    with pytest.raises(VideoFileNotFoundError):
        classify_reference(str(tmp_path / "missing.mp4"))


def test_classify_directory_is_not_a_file(tmp_path):
    with pytest.raises(VideoFileNotFoundError):
        classify_reference(str(tmp_path))


def test_classify_unsupported_extension(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not a video")
    with pytest.raises(UnsupportedFormatError) as exc_info:
        classify_reference(str(path))
    assert exc_info.value.extension == ".txt"
