# caption_harvest/content_ingestor/schema.py
"""
Schema definitions for the ingestion artifact.

This module defines:
- The structure of the output JSON artifact
- The StageResult contract returned by every ingestion stage
- Typed failure categories for diagnostics
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from caption_harvest import __version__


class FailureType(str, Enum):
    """Typed failure categories for machine-parsable diagnostics."""
    INPUT_ERROR = "input_error"
    SOURCE_ERROR = "source_error"
    EXTRACTION_ERROR = "extraction_error"
    PREPARATION_ERROR = "preparation_error"


class StageFailure(BaseModel):
    """Structured representation of a single failure."""
    stage: str
    type: FailureType
    cause: str
    impact: str
    suggested_fixes: List[str] = Field(default_factory=list)


class StageResult(BaseModel):
    """
    Standardized result returned by every ingestion stage.

    success is False if any error occurred, even if partial progress was made.
    """
    stage_name: str
    success: bool
    skipped: bool = False
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    failures: List[StageFailure] = Field(default_factory=list)
    suggested_fixes: List[str] = Field(default_factory=list)
    execution_time_ms: Optional[float] = None

    model_config = ConfigDict(frozen=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Identity(BaseModel):
    """Traceability fields."""
    content_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    workflow_run_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    created_at: datetime = Field(default_factory=_utcnow)
    workflow_version: str = __version__


class Source(BaseModel):
    """Origin facts about the video."""
    source_type: str = "youtube"
    url: str
    video_id: Optional[str] = None
    title: Optional[str] = None
    channel_name: Optional[str] = None
    duration_seconds: Optional[int] = None
    webpage_url: Optional[str] = None


class Raw(BaseModel):
    """Cleaned transcript as returned by the fetch orchestrator."""
    transcript_text: Optional[str] = None
    transcript_language: Optional[str] = None
    transcript_word_count: Optional[int] = None
    candidates_tried: Optional[List[str]] = None


class SummaryInput(BaseModel):
    """Transcript chunks ready for a summarization model."""
    chunks: List[str] = Field(default_factory=list)
    chunk_count: int = 0
    max_chunk_size: Optional[int] = None
    repetition_ratio: Optional[float] = None


class Diagnostics(BaseModel):
    """Explainability and audit trail."""
    stage_status: Dict[str, StageResult] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    suggested_fixes: List[str] = Field(default_factory=list)


class ContentObject(BaseModel):
    """Root model for the complete ingestion artifact."""
    identity: Identity
    source: Source
    raw: Raw = Field(default_factory=Raw)
    summary_input: SummaryInput = Field(default_factory=SummaryInput)
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)
