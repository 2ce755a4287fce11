# caption_harvest/content_ingestor/stages/fetch_transcript.py
"""
Stage 3: Fetch the cleaned transcript through the subtitle fetch orchestrator.

Config keys:
- languages: ordered language codes (default: en, pl)
- scratch_dir, yt_dlp_binary, timeout_seconds: see FetchConfig
- retriever: optional SubtitleRetriever replacing the yt-dlp subprocess
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from caption_harvest.content_ingestor.schema import FailureType, StageFailure, StageResult
from caption_harvest.content_ingestor.stages.base import skipped_result, timer
from caption_harvest.logging_core.logger import get_logger, log_event
from caption_harvest.transcription import (
    DEFAULT_CANDIDATES,
    FetchConfig,
    InvalidUrlError,
    NoSubtitlesAvailableError,
    SubtitleFetcher,
    candidates_for_languages,
    is_yt_dlp_available,
)
from caption_harvest.transcription.schema import DEFAULT_TIMEOUT_SECONDS

STAGE_NAME = "fetch_transcript"


def build_fetch_config(config: Dict[str, Any]) -> FetchConfig:
    languages = config.get("languages")
    return FetchConfig(
        candidates=candidates_for_languages(languages) if languages else DEFAULT_CANDIDATES,
        scratch_dir=config.get("scratch_dir"),
        yt_dlp_binary=config.get("yt_dlp_binary") or "yt-dlp",
        timeout_seconds=config.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
    )


def _failure_result(stage_failure: StageFailure, message: str, elapsed_ms: float) -> StageResult:
    return StageResult(
        stage_name=STAGE_NAME,
        success=False,
        errors=[message],
        failures=[stage_failure],
        suggested_fixes=stage_failure.suggested_fixes,
        execution_time_ms=elapsed_ms,
    )


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    """Fetch, parse and clean subtitles into raw.transcript_*."""
    logger = get_logger(run_id)
    source = content_object["source"]

    if not source.get("video_id"):
        return content_object, skipped_result(STAGE_NAME, "no video_id")

    fetch_config = build_fetch_config(config)
    retriever = config.get("retriever")

    log_event(
        logger,
        logging.INFO,
        "Starting transcript fetch",
        stage_name=STAGE_NAME,
        event_type="start",
        metadata={"candidates": [c.display_name for c in fetch_config.candidates]},
    )

    with timer() as end:
        if retriever is None and not is_yt_dlp_available(fetch_config.yt_dlp_binary):
            failure = StageFailure(
                stage=STAGE_NAME,
                type=FailureType.SOURCE_ERROR,
                cause="yt_dlp_missing",
                impact="No transcript",
                suggested_fixes=["Install yt-dlp and make sure it is on PATH"],
            )
            log_event(logger, logging.ERROR, "yt-dlp is not available", stage_name=STAGE_NAME, event_type="failure")
            return content_object, _failure_result(failure, f"{fetch_config.yt_dlp_binary} is not installed or not on PATH", end())

        try:
            transcript = SubtitleFetcher(fetch_config, retriever).fetch(source["url"], run_id=run_id)
        except InvalidUrlError as exc:
            failure = StageFailure(
                stage=STAGE_NAME,
                type=FailureType.INPUT_ERROR,
                cause="invalid_youtube_url",
                impact="No transcript",
                suggested_fixes=["Check the URL"],
            )
            return content_object, _failure_result(failure, exc.message, end())
        except NoSubtitlesAvailableError as exc:
            failure = StageFailure(
                stage=STAGE_NAME,
                type=FailureType.SOURCE_ERROR,
                cause="no_subtitles_available",
                impact="No transcript; summary input will be empty",
                suggested_fixes=["Check that the video has captions", "Try other languages with --lang"],
            )
            return content_object, _failure_result(failure, exc.message, end())

        raw = content_object.setdefault("raw", {})
        raw["transcript_text"] = transcript.text
        raw["transcript_language"] = transcript.language_code
        raw["transcript_word_count"] = transcript.word_count
        raw["candidates_tried"] = transcript.attempts

        result = StageResult(stage_name=STAGE_NAME, success=True, execution_time_ms=end())

    log_event(
        logger,
        logging.INFO,
        "Transcript fetched",
        stage_name=STAGE_NAME,
        event_type="success",
        metadata={"language": transcript.language_code, "words": transcript.word_count},
    )
    return content_object, result
