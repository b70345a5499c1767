"""
Error taxonomy for round imports.

Every failure the import pipeline can report carries a machine-readable
category and the HTTP status the API boundary should answer with, so the
route handlers never have to guess which fault is the client's.
"""

from typing import Any, Dict, Optional


class RoundImportError(Exception):
    """
    Base class for all classified import failures.

    Attributes:
        category: Stable machine-distinguishable error category
        status_code: HTTP status the API maps this error to
        message: Human-readable summary
        details: Extra diagnostic payload (headers, offending values, ...)
    """

    category = "server_error"
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON error body returned by the API."""
        body: Dict[str, Any] = {
            'error': self.message,
            'category': self.category,
        }
        if self.details is not None:
            body['details'] = self.details
        return body


class InvalidRequest(RoundImportError):
    """Missing file, missing user id, or wrong content type."""

    category = "invalid_request"
    status_code = 400


class MalformedInput(RoundImportError):
    """CSV text has no header row or no data rows."""

    category = "malformed_input"
    status_code = 400


class MissingColumns(RoundImportError):
    """No hole columns were found after header resolution."""

    category = "missing_columns"
    status_code = 400


class RowNotFound(RoundImportError):
    """The requested player row (or any default player row) is absent."""

    category = "row_not_found"
    status_code = 400


class RoundNotFound(RoundImportError):
    """No stored round has the requested id."""

    category = "not_found"
    status_code = 404


class PersistenceError(RoundImportError):
    """
    A write to the round store failed.

    Only the round stage is ever raised; a failed hole write is reported
    on the materialize result instead because the round already exists.
    """

    category = "persistence_error"
    status_code = 500

    def __init__(
        self,
        message: str,
        stage: str = "round",
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message, details)
        self.stage = stage

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body['stage'] = self.stage
        return body
