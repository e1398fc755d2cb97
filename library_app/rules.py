"""Checkout state transitions allowed for a book."""
from library_app.book import Book


def can_check_out(book: Book) -> bool:
    return book.checked_out_by_id is None


def can_return(book: Book) -> bool:
    return book.checked_out_by_id is not None
