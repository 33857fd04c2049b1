"""Diagnostics orchestrator package for the verdict pipeline."""

from report_verdict.orchestrator.exceptions import DiagnosticsError, OrchestratorError
from report_verdict.orchestrator.diagnostics import DiagnosticsOrchestrator
from report_verdict.orchestrator.pipeline import ReportPipeline
from report_verdict.orchestrator.scoring import compare_metrics, confidence_for, discrepancy_level

__all__ = [
    "DiagnosticsError",
    "DiagnosticsOrchestrator",
    "OrchestratorError",
    "ReportPipeline",
    "compare_metrics",
    "confidence_for",
    "discrepancy_level",
]
