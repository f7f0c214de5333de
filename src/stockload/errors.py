"""
Errors raised by the import pipeline.

Each one carries the HTTP status it maps to and renders as ``{"error": message}``.
"""


class ImportFailure(Exception):
    """
    Base exception for a failed upload.

    Attributes:
        message: Human-readable message returned to the client
        status_code: HTTP status code
    """

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {"error": self.message}


class MissingFileError(ImportFailure):
    """No file was attached to the upload (400)."""

    status_code = 400

    def __init__(self, message: str = "CSV file is required."):
        super().__init__(message)


class EmptyInputError(ImportFailure):
    """The CSV had no data rows, or none survived normalization (400)."""

    status_code = 400

    def __init__(self, message: str = "CSV file is empty."):
        super().__init__(message)


class ParseError(ImportFailure):
    """The upload is not readable as CSV (400)."""

    status_code = 400

    def __init__(self, detail: str = ""):
        super().__init__(f"Failed to parse CSV file. {detail}".strip())


class PersistenceError(ImportFailure):
    """The batch could not be written; nothing was committed (500)."""

    status_code = 500

    def __init__(self, message: str = "Failed to save data to the database."):
        super().__init__(message)
