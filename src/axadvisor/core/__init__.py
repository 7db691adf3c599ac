"""Core modules for the advisor - error taxonomy and shared helpers."""

from axadvisor.core.errors import (
    AdvisorError,
    ComputationError,
    CycleWarning,
    ValidationError,
    format_error_message,
    guarded,
)

__all__ = [
    "AdvisorError",
    "ValidationError",
    "ComputationError",
    "CycleWarning",
    "guarded",
    "format_error_message",
]
