"""Aggregation of stage results into artifact diagnostics."""
