"""Filename, identifier and platform derivation for video references."""

import base64
import hashlib
import re
from pathlib import Path
from urllib.parse import urlparse

from video_transcriber.domain.models import UNKNOWN_LABEL

MAX_FILENAME_LENGTH = 150
FALLBACK_ID_LENGTH = 11

_ILLEGAL_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-{2,}")

_WATCH_PARAM = re.compile(r"[?&]v=([\w-]+)")
_SHORT_LINK = re.compile(r"youtu\.be/([\w-]+)")

# Matched against the URL host, first match wins.
PLATFORM_DOMAINS: list[tuple[tuple[str, ...], str]] = [
    (("youtube.com", "youtu.be", "youtube-nocookie.com"), "YouTube"),
    (("vimeo.com",), "Vimeo"),
    (("tiktok.com",), "TikTok"),
    (("twitter.com", "x.com"), "Twitter/X"),
    (("facebook.com", "fb.watch"), "Facebook"),
    (("instagram.com",), "Instagram"),
    (("twitch.tv",), "Twitch"),
    (("dailymotion.com", "dai.ly"), "Dailymotion"),
    (("reddit.com", "redd.it"), "Reddit"),
    (("linkedin.com",), "LinkedIn"),
]

# Substrings of yt-dlp extractor names mapped to canonical labels.
EXTRACTOR_LABELS: list[tuple[str, str]] = [
    ("youtube", "YouTube"),
    ("vimeo", "Vimeo"),
    ("tiktok", "TikTok"),
    ("twitter", "Twitter/X"),
    ("facebook", "Facebook"),
    ("instagram", "Instagram"),
    ("twitch", "Twitch"),
    ("dailymotion", "Dailymotion"),
    ("reddit", "Reddit"),
    ("linkedin", "LinkedIn"),
]


def sanitize_filename(title: str) -> str:
    """
    Converts an arbitrary title into a safe, bounded filename fragment.

    Illegal filesystem characters are removed, whitespace runs become a single
    hyphen, hyphen runs collapse and leading/trailing hyphens are trimmed. The
    result never exceeds MAX_FILENAME_LENGTH characters, and sanitizing the
    output again returns it unchanged.
    """
    name = _ILLEGAL_CHARS.sub("", title)
    name = _WHITESPACE.sub("-", name)
    name = _HYPHEN_RUNS.sub("-", name).strip("-")
    return name[:MAX_FILENAME_LENGTH].rstrip("-")


def fallback_video_id(reference: str) -> str:
    """Builds a deterministic identifier from the URL-safe base64 of the reference."""
    encoded = base64.urlsafe_b64encode(reference.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")[:FALLBACK_ID_LENGTH]


def extract_video_id(url: str, reported_id: str | None = None) -> str:
    """
    Derives a stable identifier for a remote video.

    Args:
        url: The video locator.
        reported_id: Identifier reported by the download tool, if any.

    Returns:
        The `v=` query value, the short-link path segment, the sanitized
        reported identifier, or the base64 fallback, in that order.
    """
    for pattern in (_WATCH_PARAM, _SHORT_LINK):
        match = pattern.search(url)
        if match:
            return match.group(1)

    if reported_id:
        safe_id = sanitize_filename(reported_id)
        if safe_id:
            return safe_id

    return fallback_video_id(url)


def local_video_id(path: Path) -> str:
    """Synthetic identifier for a local file, stable for a given base name without extension."""
    digest = hashlib.sha256(path.stem.encode("utf-8")).hexdigest()
    return f"local-{digest[:8]}"


def _host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def detect_platform(url: str, extractor: str | None = None) -> str:
    """
    Labels the hosting platform of a remote video.

    Checks the URL host against PLATFORM_DOMAINS, then the extractor name
    reported by the download tool. A non-generic extractor with no canonical
    label is reported as-is.
    """
    host = _host(url)
    for domains, label in PLATFORM_DOMAINS:
        if any(host == d or host.endswith("." + d) for d in domains):
            return label

    if extractor:
        lowered = extractor.lower()
        for fragment, label in EXTRACTOR_LABELS:
            if fragment in lowered:
                return label
        if lowered != "generic":
            return extractor

    return UNKNOWN_LABEL


def artifact_basename(video_id: str, title: str) -> str:
    """Name shared by the three artifact files, without extension."""
    safe_title = sanitize_filename(title)
    return f"{video_id}-{safe_title}" if safe_title else video_id
