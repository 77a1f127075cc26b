from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MissingColumnsError(ValidationError):
    """Raised when a CSV header lacks one of the required logical columns."""

    def __init__(self, required: Sequence[str], found: Sequence[str]):
        self.required = list(required)
        self.found = list(found)
        super().__init__("CSV is missing required columns")


class EmptyInputError(ValidationError):
    """Raised when a CSV has a header but no data rows."""


class AuthenticationError(DomainError):
    """Raised when a bearer token is missing or invalid."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a requested snapshot, term or profile does not exist."""


class StoreUnavailable(DomainError):
    """Transient storage failure; safe for the caller to retry."""


class QuotaExceeded(DomainError):
    """Storage rejected the request for capacity reasons; retry later."""


class BatchLimitExceeded(DomainError):
    """Raised when a write batch would exceed the per-batch operation cap."""


class IngestionFailure(DomainError):
    """Unexpected error in the middle of an ingestion pipeline."""
