"""
Shared contracts for transcription subsystem.
Single responsibility: define candidate, config and result dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple


SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "pl": "Polish",
}

DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class SubtitleCandidate:
    """One (language, track type) combination tried during retrieval."""
    language_code: str
    is_auto_generated: bool
    display_name: str

    @property
    def track_type(self) -> str:
        return "auto" if self.is_auto_generated else "manual"


def _display_name(language_code: str, is_auto_generated: bool) -> str:
    name = SUPPORTED_LANGUAGES.get(language_code, language_code)
    return f"{name} ({'auto' if is_auto_generated else 'manual'})"


def candidates_for_languages(language_codes: Iterable[str], prefer_auto: bool = True) -> Tuple[SubtitleCandidate, ...]:
    """
    Build an ordered candidate list: languages in the given order, and within
    each language the auto track first unless prefer_auto is False.
    """
    order = (True, False) if prefer_auto else (False, True)
    candidates: List[SubtitleCandidate] = []
    for code in language_codes:
        code = code.strip()
        if not code:
            continue
        for is_auto in order:
            candidates.append(SubtitleCandidate(code, is_auto, _display_name(code, is_auto)))
    return tuple(candidates)


# Priority order = tuple order
DEFAULT_CANDIDATES: Tuple[SubtitleCandidate, ...] = candidates_for_languages(["en", "pl"])


@dataclass
class FetchConfig:
    """Config for the subtitle fetch orchestrator."""
    candidates: Tuple[SubtitleCandidate, ...] = DEFAULT_CANDIDATES
    scratch_dir: Optional[str] = None  # None: system temp dir
    yt_dlp_binary: str = "yt-dlp"
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS  # per candidate, None: unbounded


@dataclass
class CleanedTranscript:
    """Final pipeline output; the caller owns persistence."""
    text: str
    language_code: Optional[str] = None
    attempts: List[str] = field(default_factory=list)  # display names tried, in order

    @property
    def word_count(self) -> int:
        return len(self.text.split())
