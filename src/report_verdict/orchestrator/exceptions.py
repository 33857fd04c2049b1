"""Exceptions for orchestrator operations."""


class OrchestratorError(Exception):
    """Base exception for all orchestrator operations."""


class DiagnosticsError(OrchestratorError):
    """Raised when a diagnostic stage receives input it cannot analyse."""
