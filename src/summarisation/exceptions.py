"""Custom exceptions for the summarisation module."""


class SummarisationError(Exception):
    """Raised when a summarisation provider call fails."""
