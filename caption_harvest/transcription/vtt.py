# caption_harvest/transcription/vtt.py
"""
WebVTT parsing: cue text extraction.
Single responsibility: turn a timed-text document into plain text.

Timing lines, cue identifiers, NOTE blocks and inline markup are dropped.
Auto-generated captions repeat whole lines between cues, so a coarse
sentence-level dedup runs before the text leaves this module.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Union

from caption_harvest.transcription.errors import ParseFailureError


TAG_PATTERN = re.compile(r"<[^>]*>")
SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
WHITESPACE_PATTERN = re.compile(r"\s+")
TIMESTAMP_ARROW = "-->"

# Decoded after tag stripping, so "&lt;b&gt;" survives as literal "<b>"
HTML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
)


def clean_cue_line(line: str) -> str:
    """Strip inline tags, then decode entities."""
    text = TAG_PATTERN.sub("", line)
    for entity, literal in HTML_ENTITIES:
        text = text.replace(entity, literal)
    return text.strip()


def extract_cue_text(content: str) -> List[str]:
    """Return cue text fragments in document order."""
    fragments: List[str] = []
    in_cue = False

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if not line:
            in_cue = False
            continue

        if line.startswith("WEBVTT") or line.startswith("NOTE"):
            continue

        if TIMESTAMP_ARROW in line:
            in_cue = True
            continue

        if not in_cue:
            # Cue identifiers and header metadata (Kind:, Language:)
            continue

        text = clean_cue_line(line)
        if text:
            fragments.append(text)

    return fragments


def _unique_sentences(text: str) -> List[str]:
    seen = set()
    unique: List[str] = []
    for sentence in SENTENCE_SPLIT_PATTERN.split(text):
        sentence = sentence.strip()
        key = sentence.lower()
        if sentence and key not in seen:
            seen.add(key)
            unique.append(sentence)
    return unique


def parse_vtt(content: str) -> str:
    """Convert a WebVTT document into deduplicated plain text."""
    joined = WHITESPACE_PATTERN.sub(" ", " ".join(extract_cue_text(content))).strip()
    sentences = _unique_sentences(joined)
    if not sentences:
        return ""
    return ". ".join(sentences) + "."


def parse_vtt_file(path: Union[str, Path]) -> str:
    """Read and parse a subtitle artifact; read errors become ParseFailureError."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseFailureError(f"Could not read subtitle file {path}: {exc}") from exc
    return parse_vtt(content)
