"""Exceptions for the verdict pipeline components."""


class VerdictError(Exception):
    """Base exception for all pipeline component operations."""


class StructureError(VerdictError):
    """Raised when the top-level report is not an array of features."""


class EntryError(VerdictError):
    """Raised when a single feature, scenario or step is malformed."""


class IntegrityCheckError(VerdictError):
    """Raised when integrity checking cannot complete."""
