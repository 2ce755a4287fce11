# caption_harvest/content_ingestor/stages/validate_input.py
"""
Stage 1: Input validation and video_id extraction.

Responsibility:
- Confirm the provided URL is a recognizable YouTube URL
- Populate source.video_id and normalize source.url

Fails with INPUT_ERROR if the URL is missing or invalid.
No network calls.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from caption_harvest.content_ingestor.schema import FailureType, StageFailure, StageResult
from caption_harvest.content_ingestor.stages.base import timer
from caption_harvest.logging_core.logger import get_logger, log_event
from caption_harvest.transcription.errors import InvalidUrlError
from caption_harvest.transcription.video_id import VideoReference

STAGE_NAME = "validate_input"


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    """Validate the input URL and extract video_id."""
    logger = get_logger(run_id)
    source = content_object.setdefault("source", {})
    url = (source.get("url") or "").strip()

    log_event(
        logger,
        logging.INFO,
        "Validating YouTube URL",
        stage_name=STAGE_NAME,
        event_type="start",
        metadata={"raw_url": url},
    )

    with timer() as end:
        if not url:
            failure = StageFailure(
                stage=STAGE_NAME,
                type=FailureType.INPUT_ERROR,
                cause="missing_url",
                impact="Cannot proceed without input URL",
                suggested_fixes=["Provide a YouTube URL"],
            )
            log_event(logger, logging.ERROR, "Validation failed: missing URL", stage_name=STAGE_NAME, event_type="failure")
            return content_object, StageResult(
                stage_name=STAGE_NAME,
                success=False,
                errors=["No URL provided"],
                failures=[failure],
                execution_time_ms=end(),
            )

        try:
            video = VideoReference.from_url(url)
        except InvalidUrlError as exc:
            failure = StageFailure(
                stage=STAGE_NAME,
                type=FailureType.INPUT_ERROR,
                cause="invalid_youtube_url",
                impact="Cannot extract video_id; artifact will contain diagnostics only",
                suggested_fixes=[
                    "Use a watch?v=, youtu.be/ or embed/ link",
                    "Check for typos or extra characters",
                ],
            )
            log_event(
                logger,
                logging.ERROR,
                "Validation failed: invalid YouTube URL",
                stage_name=STAGE_NAME,
                event_type="failure",
                metadata={"url": url},
            )
            return content_object, StageResult(
                stage_name=STAGE_NAME,
                success=False,
                errors=[exc.message],
                failures=[failure],
                execution_time_ms=end(),
            )

        source["url"] = url
        source["video_id"] = video.id
        result = StageResult(stage_name=STAGE_NAME, success=True, execution_time_ms=end())

    log_event(
        logger,
        logging.INFO,
        "URL validated and video_id extracted",
        stage_name=STAGE_NAME,
        event_type="success",
        metadata={"video_id": video.id},
    )
    return content_object, result
