"""
Unified error handling for the recommendation engine.

Error taxonomy:
- ValidationError: a required input field is missing or malformed. Caught at
  the stage boundary; the affected rule or entry is skipped.
- CycleWarning: a dependency cycle detected while planning. Collected on the
  plan, never raised to the caller.
- ComputationError: an unexpected failure while scoring. Converted into an
  Error result envelope at the public entry point.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Protocol, TypeVar

import structlog

logger = structlog.get_logger()


class AdvisorError(Exception):
    """Base exception carrying structured details for logging."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(AdvisorError):
    """Raised when an input field is missing or has the wrong shape."""

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message, details)
        self.field = field
        if field is not None:
            self.details.setdefault("field", field)


class ComputationError(AdvisorError):
    """Raised for unexpected failures while scoring or planning."""


class CycleWarning(AdvisorError):
    """A dependency cycle found during planning. Non-fatal."""

    def __init__(self, cycle: list[str]):
        super().__init__(
            f"Dependency cycle detected: {' -> '.join(cycle)}",
            details={"cycle": list(cycle)},
        )
        self.cycle = list(cycle)


class FailureResult(Protocol):
    """Result envelope types that can represent a failed call."""

    @classmethod
    def failure(cls, message: str) -> Any: ...


R = TypeVar("R")


def guarded(result_type: type[FailureResult], operation: str) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    Decorator for public engine operations.

    Any exception escaping the wrapped call is logged and converted into
    ``result_type.failure(message)``. The wrapped call never raises.

    Usage:
        @guarded(EvaluationResult, "generate_recommendations")
        def generate_recommendations(self, ...) -> EvaluationResult:
            ...
    """

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> R:
            try:
                return func(*args, **kwargs)
            except AdvisorError as e:
                logger.error(
                    "operation_failed",
                    operation=operation,
                    error_type=type(e).__name__,
                    message=e.message,
                    **e.details,
                )
                return result_type.failure(format_error_message(e))
            except Exception as e:
                logger.error(
                    "unexpected_error",
                    operation=operation,
                    error_type=type(e).__name__,
                    message=str(e),
                    exc_info=True,
                )
                return result_type.failure(f"{operation} failed: {e}")

        return wrapper

    return decorator


def format_error_message(error: AdvisorError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
