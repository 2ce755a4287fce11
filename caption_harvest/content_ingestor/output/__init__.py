"""Artifact output."""

from caption_harvest.content_ingestor.output.writer import write_artifact

__all__ = ["write_artifact"]
