import logging
import threading
from typing import List

from library_app.book import Book
from library_app.errors import (
    BookAlreadyCheckedOutError,
    BookNotCheckedOutError,
    BookNotFoundError,
    PersonNotFoundError,
)
from library_app.person import Person
from library_app.rules import can_check_out, can_return
from library_app.store import Store

logger = logging.getLogger(__name__)


class LibraryService:
    """Checkout and return of books; the only writer of checkout state.

    Ids passed in must already be validated and normalized.  Each operation
    holds ``self._lock`` for its whole lookup -> rule check -> update
    sequence, so two racing checkouts of the same book have exactly one
    winner and the other caller gets BookAlreadyCheckedOutError.
    """

    def __init__(self, book_store: Store[Book], person_store: Store[Person], lock=None) -> None:
        self.book_store = book_store
        self.person_store = person_store
        self._lock = lock or threading.RLock()

    # ------------------------- Queries ------------------------- #
    def get_all_books(self) -> List[Book]:
        with self._lock:
            books = self.book_store.get_all()
        logger.debug("get_all_books returning %d books", len(books))
        return books

    def get_book(self, book_id: str) -> Book:
        with self._lock:
            book = self.book_store.get(book_id)
        if book is None:
            logger.debug("Book %s not found", book_id)
            raise BookNotFoundError(book_id)
        return book

    def get_persons(self) -> List[Person]:
        with self._lock:
            return self.person_store.get_all()

    def get_person(self, person_id: str) -> Person:
        with self._lock:
            person = self.person_store.get(person_id)
        if person is None:
            raise PersonNotFoundError(person_id)
        return person

    def get_books_checked_out_by(self, person_id: str) -> List[Book]:
        """Books currently on loan to ``person_id``."""
        with self._lock:
            if not self.person_store.exists(person_id):
                raise PersonNotFoundError(person_id)
            return [b for b in self.book_store.get_all() if b.checked_out_by_id == person_id]

    # ------------------------- Transitions ------------------------- #
    def check_out_book(self, book_id: str, person_id: str) -> Book:
        """Move a book from available to checked out by ``person_id``."""
        with self._lock:
            book = self.book_store.get(book_id)
            if book is None:
                raise BookNotFoundError(book_id)

            if self.person_store.get(person_id) is None:
                raise PersonNotFoundError(person_id)

            if not can_check_out(book):
                raise BookAlreadyCheckedOutError(book_id)

            updated = self.book_store.update(book_id, checked_out_by_id=person_id)
            if updated is None:
                raise BookNotFoundError(book_id)

        logger.info("Book %s (%s) checked out to person %s", book_id, updated.title, person_id)
        return updated

    def return_book(self, book_id: str) -> Book:
        """Move a checked-out book back to available."""
        with self._lock:
            book = self.book_store.get(book_id)
            if book is None:
                raise BookNotFoundError(book_id)

            if not can_return(book):
                raise BookNotCheckedOutError(book_id)

            previous_holder = book.checked_out_by_id
            updated = self.book_store.update(book_id, checked_out_by_id=None)
            if updated is None:
                raise BookNotFoundError(book_id)

        logger.info("Book %s (%s) returned by person %s", book_id, updated.title, previous_holder)
        return updated
