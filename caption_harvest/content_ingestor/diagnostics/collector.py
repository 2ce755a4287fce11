# caption_harvest/content_ingestor/diagnostics/collector.py
"""
Diagnostics aggregation for the ingestion runner.

Collects stage results and builds the diagnostics section of the artifact.
"""

from __future__ import annotations

from typing import Any, Dict, List
from uuid import UUID

from caption_harvest.content_ingestor.schema import Diagnostics, StageResult


class DiagnosticsCollector:
    """
    Accumulates StageResult objects and merges their messages.

    One collector per run; not shared between threads.
    """

    def __init__(self, run_id: UUID) -> None:
        self.run_id = run_id
        self._stage_status: Dict[str, StageResult] = {}
        self._warnings: List[str] = []
        self._errors: List[str] = []
        self._suggested_fixes: List[str] = []

    def add_stage_result(self, result: StageResult) -> None:
        if result.stage_name in self._stage_status:
            raise ValueError(f"Duplicate stage result for {result.stage_name}")

        self._stage_status[result.stage_name] = result
        self._warnings.extend(result.warnings)
        self._errors.extend(result.errors)
        self._suggested_fixes.extend(result.suggested_fixes)
        for failure in result.failures:
            self._suggested_fixes.extend(failure.suggested_fixes)

    def has_failure(self) -> bool:
        """True if any stage that actually ran reported success=False."""
        return any(not r.success and not r.skipped for r in self._stage_status.values())

    def build_diagnostics(self) -> Dict[str, Any]:
        diag = Diagnostics(
            stage_status=self._stage_status.copy(),
            warnings=self._warnings.copy(),
            errors=self._errors.copy(),
            suggested_fixes=list(dict.fromkeys(self._suggested_fixes)),  # dedupe, keep order
        )
        return diag.model_dump(exclude_none=True)
