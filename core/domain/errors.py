from __future__ import annotations

from collections.abc import Sequence


class DashboardError(RuntimeError):
    """Base class for failures surfaced to the dashboard user."""


class ApiError(DashboardError):
    """Raised when the dashboard cannot complete a call to the portfolio API."""


class LoadError(ApiError):
    """The portfolio snapshot could not be fetched or parsed."""


class WriteError(ApiError):
    """A create/update request was rejected or never reached the backend."""


class DraftValidationError(DashboardError):
    """A form draft is missing required fields; no request was sent."""

    def __init__(self, fields: Sequence[str], message: str | None = None) -> None:
        self.fields = tuple(fields)
        super().__init__(message or f"Missing required fields: {', '.join(self.fields)}")


class OperationBusyError(DashboardError):
    """The same write operation is already in flight."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} is already in progress")


__all__ = [
    "ApiError",
    "DashboardError",
    "DraftValidationError",
    "LoadError",
    "OperationBusyError",
    "WriteError",
]
