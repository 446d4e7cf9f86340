"""
Exception hierarchy for the paper corpus.

Every corpus operation either returns a well-formed result or raises exactly
one of the subclasses below.
"""

from typing import Any, Optional


class PapershelfError(Exception):
    """Base exception for corpus errors."""

    code = "PAPERSHELF_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(PapershelfError):
    """Raised when a caller-supplied identifier, record or term is invalid."""

    code = "VALIDATION_ERROR"


class FetchError(PapershelfError):
    """Raised when downloading an artifact fails."""

    code = "FETCH_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Any] = None
    ):
        super().__init__(message, details)
        self.status_code = status_code


class StorageError(PapershelfError):
    """Raised when a local filesystem operation on an artifact or the catalog fails."""

    code = "STORAGE_ERROR"


class DecodeError(PapershelfError):
    """Raised when PDF text extraction fails."""

    code = "DECODE_ERROR"


class NotDownloadedError(PapershelfError):
    """Raised when content is requested for a paper with no valid catalog entry."""

    code = "NOT_DOWNLOADED"

    def __init__(self, paper_id: str):
        super().__init__(
            f"Paper {paper_id} is not downloaded. Acquire it first.",
            details={"paper_id": paper_id}
        )
        self.paper_id = paper_id
