"""Initial catalog data.

The built-in demo catalog has eight books (three on loan) and three
persons.  A JSON seed file with the same wire field names can replace it::

    {"books": [{"id": "1", "title": "...", "author": "...", "checkedOutById": null}],
     "persons": [{"id": "1", "firstName": "...", "lastName": "...", "emailAddress": "..."}]}
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from library_app.book import Book
from library_app.errors import InvalidIdentifierError, SeedDataError
from library_app.normalization import normalize_text
from library_app.person import Person
from library_app.store import Store
from library_app.validators import TextValidator, parse_identifier

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 500

DEFAULT_BOOKS: List[Dict[str, Any]] = [
    {"id": "1", "title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "checkedOutById": None},
    {"id": "2", "title": "To Kill a Mockingbird", "author": "Harper Lee", "checkedOutById": "1"},
    {"id": "3", "title": "1984", "author": "George Orwell", "checkedOutById": None},
    {"id": "4", "title": "Pride and Prejudice", "author": "Jane Austen", "checkedOutById": "2"},
    {"id": "5", "title": "The Catcher in the Rye", "author": "J.D. Salinger", "checkedOutById": None},
    {"id": "6", "title": "Moby Dick", "author": "Herman Melville", "checkedOutById": None},
    {"id": "7", "title": "War and Peace", "author": "Leo Tolstoy", "checkedOutById": "1"},
    {"id": "8", "title": "The Odyssey", "author": "Homer", "checkedOutById": None},
]

DEFAULT_PERSONS: List[Dict[str, Any]] = [
    {"id": "1", "firstName": "John", "lastName": "Doe",
     "emailAddress": "john.doe@example.com", "phoneNumber": "555-0101"},
    {"id": "2", "firstName": "Jane", "lastName": "Smith",
     "emailAddress": "jane.smith@example.com", "phoneNumber": "555-0102"},
    {"id": "3", "firstName": "Bob", "lastName": "Johnson",
     "emailAddress": "bob.johnson@example.com", "phoneNumber": None},
]


def _clean_text(data: Dict[str, Any], key: str, label: str) -> str:
    value = normalize_text(data.get(key))
    for result in (TextValidator.validate_non_empty(value, key),
                   TextValidator.validate_length(value, 1, MAX_TEXT_LENGTH, key)):
        if not result:
            raise SeedDataError(label, result.error)
    return value


def _clean_id(data: Dict[str, Any], key: str, label: str) -> str:
    try:
        return parse_identifier(key, data.get(key))
    except InvalidIdentifierError as e:
        raise SeedDataError(label, e.message) from e


def _record_label(kind: str, data: Any) -> str:
    if not isinstance(data, dict):
        raise SeedDataError(f"{kind} {data!r}", "record must be a JSON object")
    return f"{kind} {data.get('id')!r}"


def book_from_seed(data: Dict[str, Any]) -> Book:
    label = _record_label("book", data)
    holder = data.get("checkedOutById")
    return Book.from_dict({
        "id": _clean_id(data, "id", label),
        "title": _clean_text(data, "title", label),
        "author": _clean_text(data, "author", label),
        "checkedOutById": None if holder is None else _clean_id(data, "checkedOutById", label),
    })


def person_from_seed(data: Dict[str, Any]) -> Person:
    label = _record_label("person", data)
    phone = data.get("phoneNumber")
    return Person.from_dict({
        "id": _clean_id(data, "id", label),
        "firstName": _clean_text(data, "firstName", label),
        "lastName": _clean_text(data, "lastName", label),
        "emailAddress": _clean_text(data, "emailAddress", label),
        "phoneNumber": None if phone is None else _clean_text(data, "phoneNumber", label),
    })


def load_seed_file(path: Union[str, Path]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Read ``(books, persons)`` raw records from a JSON seed file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SeedDataError(str(path), f"cannot read seed file: {e}") from e

    if not isinstance(payload, dict):
        raise SeedDataError(str(path), "seed file must contain a JSON object")
    books = payload.get("books", [])
    persons = payload.get("persons", [])
    if not isinstance(books, list) or not isinstance(persons, list):
        raise SeedDataError(str(path), "'books' and 'persons' must be lists")
    return books, persons


def seed_books(store: Store[Book], records: List[Dict[str, Any]] = DEFAULT_BOOKS) -> List[Book]:
    return [store.create(book_from_seed(r)) for r in records]


def seed_persons(store: Store[Person], records: List[Dict[str, Any]] = DEFAULT_PERSONS) -> List[Person]:
    return [store.create(person_from_seed(r)) for r in records]


def seed_data(book_store: Store[Book], person_store: Store[Person],
              seed_file: Union[str, Path, None] = None) -> Tuple[List[Book], List[Person]]:
    """Populate both stores, from ``seed_file`` when given."""
    if seed_file:
        book_records, person_records = load_seed_file(seed_file)
        logger.info("Loading seed data from %s", seed_file)
    else:
        book_records, person_records = DEFAULT_BOOKS, DEFAULT_PERSONS

    books = seed_books(book_store, book_records)
    persons = seed_persons(person_store, person_records)
    logger.debug(
        "Seed data loaded: %d books (%d checked out), %d persons",
        len(books), sum(1 for b in books if b.checked_out_by_id is not None), len(persons),
    )
    return books, persons
