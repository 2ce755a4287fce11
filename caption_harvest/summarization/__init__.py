"""Preparation of cleaned transcripts for summarization."""

from caption_harvest.summarization.prepare import DEFAULT_MAX_CHUNK_SIZE, chunk_transcript, preprocess_transcript

__all__ = ["DEFAULT_MAX_CHUNK_SIZE", "chunk_transcript", "preprocess_transcript"]
