# caption_harvest/transcription/video_id.py
"""
Video-ID extraction from YouTube URLs.

Patterns are tried in order; the first capture of the first matching
pattern wins. Pure and deterministic, no network access.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern

from caption_harvest.transcription.errors import InvalidUrlError


# watch?v=, youtu.be/, embed/ first; then watch URLs where v is not the first parameter
YOUTUBE_URL_PATTERNS: List[Pattern[str]] = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/watch\?(?:[^#\n]*&)?v=([^&\n?#]+)"),
]

UNSAFE_FILENAME_CHARS = re.compile(r"[^\w-]")


def extract_video_id(url: str) -> str:
    """Return the video id for a YouTube URL or raise InvalidUrlError."""
    for pattern in YOUTUBE_URL_PATTERNS:
        match = pattern.search(url or "")
        if match and match.group(1):
            return match.group(1)
    raise InvalidUrlError(f"Invalid YouTube URL format: {url!r}")


@dataclass(frozen=True)
class VideoReference:
    """A video id together with the URL it was derived from."""
    id: str
    source_url: str

    @classmethod
    def from_url(cls, url: str) -> "VideoReference":
        url = (url or "").strip()
        return cls(id=extract_video_id(url), source_url=url)

    @property
    def file_stem(self) -> str:
        """Filesystem-safe form of the id for scratch artifact names."""
        return UNSAFE_FILENAME_CHARS.sub("_", self.id)

    @property
    def watch_url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.id}"
