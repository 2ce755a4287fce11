# caption_harvest/content_ingestor/stages/fetch_metadata.py
"""
Stage 2: Fetch video metadata using yt-dlp.

Responsibility:
- Extract title, channel, duration and canonical URL
- Degrade gracefully: a metadata failure never blocks the transcript

No media is downloaded. Disabled with config["fetch_metadata"] = False.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

import yt_dlp

from caption_harvest.content_ingestor.schema import FailureType, StageFailure, StageResult
from caption_harvest.content_ingestor.stages.base import skipped_result, timer
from caption_harvest.logging_core.logger import get_logger, log_event

STAGE_NAME = "fetch_metadata"

YDL_PARAMS = {
    "quiet": True,
    "no_warnings": True,
    "skip_download": True,
    "noplaylist": True,
}


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    """Fetch metadata for the validated video_id."""
    logger = get_logger(run_id)
    source = content_object["source"]
    video_id = source.get("video_id")

    if not config.get("fetch_metadata", True):
        return content_object, StageResult(stage_name=STAGE_NAME, success=True, skipped=True)

    if not video_id:
        return content_object, skipped_result(STAGE_NAME, "no video_id")

    log_event(
        logger,
        logging.INFO,
        "Fetching YouTube metadata",
        stage_name=STAGE_NAME,
        event_type="start",
        metadata={"video_id": video_id},
    )

    with timer() as end:
        try:
            with yt_dlp.YoutubeDL(YDL_PARAMS) as ydl:
                info = ydl.extract_info(source["url"], download=False)

            if not info:
                raise yt_dlp.utils.DownloadError("No info returned")

            source["title"] = info.get("title")
            source["channel_name"] = info.get("channel") or info.get("uploader")
            source["duration_seconds"] = info.get("duration")
            source["webpage_url"] = info.get("webpage_url") or source["url"]

            result = StageResult(stage_name=STAGE_NAME, success=True, execution_time_ms=end())
            log_event(
                logger,
                logging.INFO,
                "Metadata fetched",
                stage_name=STAGE_NAME,
                event_type="success",
                metadata={"title": source["title"], "duration_seconds": source["duration_seconds"]},
            )

        except yt_dlp.utils.DownloadError as exc:
            message = str(exc).lower()
            cause = "video_unavailable" if "unavailable" in message else "download_error"
            suggested = ["Check if the video is public", "Try again later"]
            if "sign in" in message or "age" in message:
                cause = "age_restricted"
                suggested.append("Provide cookies for a logged-in session")

            result = StageResult(
                stage_name=STAGE_NAME,
                success=False,
                warnings=["Metadata fetch failed"],
                failures=[
                    StageFailure(
                        stage=STAGE_NAME,
                        type=FailureType.SOURCE_ERROR,
                        cause=cause,
                        impact="Artifact has no title or channel",
                        suggested_fixes=suggested,
                    )
                ],
                execution_time_ms=end(),
            )
            log_event(
                logger,
                logging.WARNING,
                "Metadata fetch failed",
                stage_name=STAGE_NAME,
                event_type="failure",
                metadata={"error": str(exc)},
            )

    return content_object, result
