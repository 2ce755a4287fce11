# caption_harvest/summarization/prepare.py
"""
Summary input preparation.

Responsibility:
- Validate and normalize a cleaned transcript before it is handed to a model
- Flag transcripts that still look heavily repeated
- Pack sentences into size-bounded chunks

No prompts and no model calls live here.
"""

from __future__ import annotations

import logging
import re
from logging import Logger
from typing import List, Optional

from caption_harvest.logging_core.logger import log_event
from caption_harvest.transcription.cleaning import REPETITION_WARNING_THRESHOLD, repetition_ratio
from caption_harvest.transcription.errors import EmptyTranscriptError

DEFAULT_MAX_CHUNK_SIZE = 8000

SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
WHITESPACE_PATTERN = re.compile(r"\s+")


def preprocess_transcript(transcript: str, logger: Optional[Logger] = None) -> str:
    """
    Normalize whitespace and warn about suspicious repetition.

    Raises:
        EmptyTranscriptError: transcript is empty or whitespace only.
    """
    if not transcript or not transcript.strip():
        raise EmptyTranscriptError("Transcript is empty or invalid")

    processed = WHITESPACE_PATTERN.sub(" ", transcript).strip()

    ratio = repetition_ratio(processed)
    if ratio > REPETITION_WARNING_THRESHOLD and logger is not None:
        log_event(
            logger,
            logging.WARNING,
            "High repetition ratio detected; transcript may need additional cleaning",
            stage_name="prepare_summary",
            event_type="progress",
            metadata={"repetition_ratio": round(ratio, 2)},
        )

    return processed


def chunk_transcript(transcript: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> List[str]:
    """
    Split a transcript into chunks of at most max_chunk_size characters.

    Sentences are packed greedily and re-terminated with a period. A single
    sentence longer than the budget becomes a chunk of its own.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")

    if len(transcript) <= max_chunk_size:
        return [transcript]

    chunks: List[str] = []
    current = ""

    for sentence in SENTENCE_SPLIT_PATTERN.split(transcript):
        if not sentence.strip():
            continue
        sentence = sentence.strip() + "."

        if len(current) + len(sentence) > max_chunk_size:
            if current:
                chunks.append(current.strip())
                current = sentence
            else:
                chunks.append(sentence)
        else:
            current = f"{current} {sentence}" if current else sentence

    if current:
        chunks.append(current.strip())

    return chunks
