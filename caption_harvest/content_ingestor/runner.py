# caption_harvest/content_ingestor/runner.py
"""
Orchestration runner for YouTube transcript ingestion.

Responsibilities:
- Initialize traceability (run id, identity)
- Execute stages in fixed order
- Aggregate diagnostics
- Validate and return the final content object

No business logic lives here, only orchestration.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from caption_harvest.content_ingestor.diagnostics.collector import DiagnosticsCollector
from caption_harvest.content_ingestor.schema import (
    ContentObject,
    FailureType,
    Identity,
    Source,
    StageFailure,
    StageResult,
)
from caption_harvest.content_ingestor.stages import (
    fetch_metadata,
    fetch_transcript,
    prepare_summary,
    validate_input,
)
from caption_harvest.content_ingestor.stages.base import Stage
from caption_harvest.logging_core.logger import get_logger, log_event, release_logger


STAGES: List[Stage] = [
    validate_input.process,
    fetch_metadata.process,
    fetch_transcript.process,
    prepare_summary.process,
]


def _stage_name(stage_func: Stage) -> str:
    return stage_func.__module__.split(".")[-1]


def run_ingestion(url: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Execute the full ingestion pipeline for a YouTube URL.

    Args:
        url: YouTube video URL
        config: Optional stage configuration (languages, scratch_dir, timeout_seconds, ...)

    Returns:
        Content object dict conforming to ContentObject. An artifact is
        always produced, even when stages fail.
    """
    config = config or {}
    run_id = uuid.uuid4()
    logger = get_logger(run_id)

    try:
        log_event(
            logger,
            logging.INFO,
            "Starting transcript ingestion pipeline",
            event_type="pipeline_start",
            metadata={"url": url},
        )

        content_object: Dict[str, Any] = {
            "identity": Identity(workflow_run_id=run_id).model_dump(),
            "source": Source(url=url).model_dump(),
            "raw": {},
            "summary_input": {},
            "diagnostics": {},
        }
        collector = DiagnosticsCollector(run_id)

        for stage_func in STAGES:
            stage_name = _stage_name(stage_func)
            try:
                content_object, stage_result = stage_func(content_object, run_id, config)
            except Exception as exc:  # pylint: disable=broad-except
                stage_result = StageResult(
                    stage_name=stage_name,
                    success=False,
                    errors=[f"Unhandled exception: {exc}"],
                    failures=[
                        StageFailure(
                            stage=stage_name,
                            type=FailureType.SOURCE_ERROR,
                            cause="unexpected_exception",
                            impact="stage aborted",
                            suggested_fixes=["Review logs"],
                        )
                    ],
                )
                logger.error(
                    "Unhandled exception in stage",
                    exc_info=True,
                    extra={"stage_name": stage_name, "event_type": "failure"},
                )

            collector.add_stage_result(stage_result)

        content_object["diagnostics"] = collector.build_diagnostics()

        try:
            content_object = ContentObject.model_validate(content_object).model_dump(exclude_none=True)
        except ValidationError as exc:
            # Raw object is still returned for auditability
            log_event(
                logger,
                logging.ERROR,
                "Final schema validation failed, returning raw object",
                event_type="validation_failure",
                metadata={"validation_error": str(exc)},
            )
        else:
            log_event(
                logger,
                logging.WARNING if collector.has_failure() else logging.INFO,
                "Pipeline completed",
                event_type="pipeline_success",
                metadata={"failures": collector.has_failure()},
            )

        return content_object
    finally:
        release_logger(run_id)


# Notes
# Stages always run in declared order; each one checks its own prerequisites
# and returns a skipped result when an earlier stage left nothing to work on.
# An exception escaping a stage is recorded as a failed StageResult and the
# remaining stages still run. The artifact is returned even on total failure
# so the CLI can write diagnostics to disk.
