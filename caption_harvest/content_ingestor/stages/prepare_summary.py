# caption_harvest/content_ingestor/stages/prepare_summary.py
"""
Stage 4: Prepare summary input.

Normalizes the cleaned transcript, records its repetition ratio and splits
it into chunks of at most config["max_chunk_size"] characters.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from caption_harvest.content_ingestor.schema import StageResult
from caption_harvest.content_ingestor.stages.base import skipped_result, timer
from caption_harvest.logging_core.logger import get_logger, log_event
from caption_harvest.summarization import DEFAULT_MAX_CHUNK_SIZE, chunk_transcript, preprocess_transcript
from caption_harvest.transcription import repetition_ratio

STAGE_NAME = "prepare_summary"


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    logger = get_logger(run_id)
    transcript = content_object.get("raw", {}).get("transcript_text")

    if not transcript:
        return content_object, skipped_result(STAGE_NAME, "no transcript")

    max_chunk_size = int(config.get("max_chunk_size") or DEFAULT_MAX_CHUNK_SIZE)

    with timer() as end:
        processed = preprocess_transcript(transcript, logger)
        chunks = chunk_transcript(processed, max_chunk_size)
        content_object["summary_input"] = {
            "chunks": chunks,
            "chunk_count": len(chunks),
            "max_chunk_size": max_chunk_size,
            "repetition_ratio": round(repetition_ratio(processed), 3),
        }
        result = StageResult(stage_name=STAGE_NAME, success=True, execution_time_ms=end())

    log_event(
        logger,
        logging.INFO,
        f"Transcript split into {len(chunks)} chunk(s)",
        stage_name=STAGE_NAME,
        event_type="success",
        metadata={"chunk_count": len(chunks)},
    )
    return content_object, result
