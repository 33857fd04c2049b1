"""Utilities for report verdicts."""

from report_verdict.utils.external_counts import coerce_counts, parse_external_summary

__all__ = [
    "coerce_counts",
    "parse_external_summary",
]
