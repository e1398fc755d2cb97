"""Domain errors raised by the lending service and its input pipeline.

Every error carries a machine-readable ``code`` and structured ``metadata``
so API clients can branch on the kind of failure without parsing messages.
"""
from typing import Any, Dict, Optional


class LibraryError(Exception):
    """Base class for request-level failures; none of them is fatal."""

    code = "LIBRARY_ERROR"
    status_code = 400

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.metadata: Dict[str, Any] = metadata or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code, **self.metadata}


class InvalidIdentifierError(LibraryError):
    code = "INVALID_ID_FORMAT"
    status_code = 400

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(f"{field}: {reason}", {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class BookNotFoundError(LibraryError):
    code = "BOOK_NOT_FOUND"
    status_code = 404

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book with ID {book_id} not found", {"bookId": book_id})
        self.book_id = book_id


class PersonNotFoundError(LibraryError):
    code = "PERSON_NOT_FOUND"
    status_code = 404

    def __init__(self, person_id: str) -> None:
        super().__init__(f"Person with ID {person_id} not found", {"personId": person_id})
        self.person_id = person_id


class BookAlreadyCheckedOutError(LibraryError):
    code = "BOOK_ALREADY_CHECKED_OUT"
    status_code = 409

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book with ID {book_id} is already checked out", {"bookId": book_id})
        self.book_id = book_id


class BookNotCheckedOutError(LibraryError):
    code = "BOOK_NOT_CHECKED_OUT"
    status_code = 409

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book with ID {book_id} is not checked out", {"bookId": book_id})
        self.book_id = book_id


class UnknownFieldError(LibraryError):
    code = "UNKNOWN_FIELD"
    status_code = 400

    def __init__(self, field: str, available: Optional[list] = None) -> None:
        message = f"Unknown field: {field}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message, {"field": field})
        self.field = field


class SeedDataError(LibraryError):
    code = "INVALID_SEED_DATA"
    status_code = 500

    def __init__(self, record: str, reason: str) -> None:
        super().__init__(f"Invalid seed record {record}: {reason}", {"record": record, "reason": reason})
        self.record = record
        self.reason = reason
