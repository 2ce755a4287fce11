"""
Transcript acquisition and cleaning.

URL -> video id -> subtitle artifact -> parsed text -> cleaned text.
"""

from caption_harvest.transcription.cleaning import clean_transcript, repetition_ratio
from caption_harvest.transcription.core import SubtitleFetcher, fetch_cleaned_transcript
from caption_harvest.transcription.errors import (
    CaptionHarvestError,
    EmptyTranscriptError,
    InvalidUrlError,
    NoSubtitlesAvailableError,
    ParseFailureError,
    RetrievalFailedError,
)
from caption_harvest.transcription.retrieval import YtDlpRetriever, is_yt_dlp_available
from caption_harvest.transcription.schema import (
    DEFAULT_CANDIDATES,
    SUPPORTED_LANGUAGES,
    CleanedTranscript,
    FetchConfig,
    SubtitleCandidate,
    candidates_for_languages,
)
from caption_harvest.transcription.video_id import VideoReference, extract_video_id
from caption_harvest.transcription.vtt import parse_vtt, parse_vtt_file

__all__ = [
    "CaptionHarvestError",
    "CleanedTranscript",
    "DEFAULT_CANDIDATES",
    "EmptyTranscriptError",
    "FetchConfig",
    "InvalidUrlError",
    "NoSubtitlesAvailableError",
    "ParseFailureError",
    "RetrievalFailedError",
    "SUPPORTED_LANGUAGES",
    "SubtitleCandidate",
    "SubtitleFetcher",
    "VideoReference",
    "YtDlpRetriever",
    "candidates_for_languages",
    "clean_transcript",
    "extract_video_id",
    "fetch_cleaned_transcript",
    "is_yt_dlp_available",
    "parse_vtt",
    "parse_vtt_file",
    "repetition_ratio",
]
