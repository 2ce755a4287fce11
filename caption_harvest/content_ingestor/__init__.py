"""Ingestion runner: the calling side of the transcript pipeline."""
