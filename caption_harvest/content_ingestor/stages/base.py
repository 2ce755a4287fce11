# caption_harvest/content_ingestor/stages/base.py
"""
Shared base definitions for ingestion stages.

This module defines:
- The Stage function contract
- A timer for execution_time_ms
- A helper for stages whose prerequisite was not met
"""

from __future__ import annotations

import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Tuple, TypeAlias

from caption_harvest.content_ingestor.schema import StageResult


Stage: TypeAlias = Callable[[Dict[str, Any], uuid.UUID, Dict[str, Any]], Tuple[Dict[str, Any], StageResult]]
"""
Signature:
    stage(content_object: dict, run_id: uuid.UUID, config: dict) -> (updated_content_object: dict, StageResult)
"""


@contextmanager
def timer() -> Iterator[Callable[[], float]]:
    """
    Yield a callable returning milliseconds elapsed since entry.

    Usage:
        with timer() as end:
            ...
        execution_time_ms = end()
    """
    start = time.perf_counter()

    def end() -> float:
        return (time.perf_counter() - start) * 1000

    yield end


def skipped_result(stage_name: str, reason: str) -> StageResult:
    """Result for a stage that did not run because its input is missing."""
    return StageResult(
        stage_name=stage_name,
        success=False,
        skipped=True,
        warnings=[f"Skipped: {reason}"],
    )
