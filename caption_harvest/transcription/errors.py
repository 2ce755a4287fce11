# caption_harvest/transcription/errors.py
"""
Typed errors for the transcript pipeline.
Single responsibility: name every failure mode with a stable code.

Only InvalidUrlError and NoSubtitlesAvailableError ever leave the fetch
orchestrator; the per-candidate errors are recovered inside the loop.
"""

from __future__ import annotations

from typing import Optional


class CaptionHarvestError(Exception):
    """Base error carrying a machine-readable code."""

    default_code = "caption_harvest_error"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class InvalidUrlError(CaptionHarvestError):
    default_code = "invalid_url"


class RetrievalFailedError(CaptionHarvestError):
    """The external download failed for one candidate."""

    default_code = "retrieval_failed"


class ParseFailureError(CaptionHarvestError):
    """The artifact existed but could not be read."""

    default_code = "parse_failure"


class NoSubtitlesAvailableError(CaptionHarvestError):
    default_code = "no_subtitles"


class EmptyTranscriptError(CaptionHarvestError):
    default_code = "empty_transcript"
