"""Ingestion stages, executed in order by the runner."""
