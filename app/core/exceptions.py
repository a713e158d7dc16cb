"""Exception hierarchy for ingestion, benchmarking and reporting."""

from __future__ import annotations


class UsageBenchmarkError(Exception):
    """Base exception for all application errors."""

    pass


# =============================================================================
# Structural input errors (abort the whole batch)
# =============================================================================


class StructuralInputError(UsageBenchmarkError):
    """Raised when an import batch cannot be processed at all."""

    pass


class EmptyInputError(StructuralInputError):
    """Raised when a batch has no header or no data rows."""

    def __init__(self, message: str = "File must contain header and at least one data row") -> None:
        super().__init__(message)


class MissingHeadersError(StructuralInputError):
    """Raised when required header fields are absent."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required headers: {', '.join(self.missing)}")


# =============================================================================
# Row errors (collected per row, never abort a batch)
# =============================================================================


class RowError(UsageBenchmarkError):
    """Raised when a single data row fails validation."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class MissingFieldError(RowError):
    """A required field is empty."""

    def __init__(self, reason: str = "Missing required fields") -> None:
        super().__init__(reason)


class InvalidValueError(RowError):
    """A field holds a value that cannot be used."""

    pass


# =============================================================================
# Lookup and storage errors
# =============================================================================


class NotFoundError(UsageBenchmarkError):
    """Raised when a requested community or unit does not exist."""

    pass


class StoreError(UsageBenchmarkError):
    """Raised when the backing store fails."""

    pass
