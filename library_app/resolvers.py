"""Lazy field resolution for API and CLI output.

A caller asks for a set of wire field names (``id``, ``isCheckedOut``,
``checkedOutBy.firstName``...).  Each field has its own resolver and only
the selected ones run, so related records are loaded only when asked for:
listing books without ``checkedOutBy`` performs no person lookups, and
with it performs one lookup per checked-out book.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from library_app.book import Book
from library_app.errors import UnknownFieldError
from library_app.person import Person
from library_app.store import Store

logger = logging.getLogger(__name__)


@dataclass
class RecordSchema:
    """Selectable fields of one record type."""

    name: str
    scalars: tuple
    defaults: tuple
    relations: Dict[str, "RecordSchema"] = field(default_factory=dict)

    @property
    def field_names(self) -> List[str]:
        return list(self.scalars) + list(self.relations)


BOOK_SCHEMA = RecordSchema(
    name="Book",
    scalars=("id", "title", "author", "checkedOutById", "isCheckedOut"),
    defaults=("id", "title", "author", "checkedOutById", "isCheckedOut"),
)
PERSON_SCHEMA = RecordSchema(
    name="Person",
    scalars=("id", "firstName", "lastName", "emailAddress", "phoneNumber"),
    defaults=("id", "firstName", "lastName", "emailAddress", "phoneNumber"),
)
BOOK_SCHEMA.relations["checkedOutBy"] = PERSON_SCHEMA
PERSON_SCHEMA.relations["checkedOutBooks"] = BOOK_SCHEMA


class FieldSelection:
    """Parsed set of requested fields; relations map to nested selections."""

    def __init__(self, schema: RecordSchema, fields: Dict[str, Optional["FieldSelection"]]) -> None:
        self.schema = schema
        self.fields = fields

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def __iter__(self):
        return iter(self.fields)

    def nested(self, name: str) -> "FieldSelection":
        return self.fields[name]

    def __repr__(self) -> str:
        return f"FieldSelection({self.schema.name}, {list(self.fields)})"

    @classmethod
    def default(cls, schema: RecordSchema) -> "FieldSelection":
        return cls(schema, {name: None for name in schema.defaults})

    @classmethod
    def parse(cls, schema: RecordSchema, requested: Union[None, str, Iterable[str]] = None) -> "FieldSelection":
        """Build a selection from comma-separated or listed field paths.

        ``None`` or an empty request selects the schema defaults.  A bare
        relation name selects the related record's default fields.
        """
        if requested is None:
            return cls.default(schema)
        if isinstance(requested, str):
            requested = requested.split(",")
        paths = [p.strip() for p in requested if p and p.strip()]
        if not paths:
            return cls.default(schema)

        fields: Dict[str, Optional[FieldSelection]] = {}
        nested_paths: Dict[str, List[str]] = {}
        for path in paths:
            head, _, rest = path.partition(".")
            if head in schema.scalars and not rest:
                fields[head] = None
            elif head in schema.relations:
                sub = nested_paths.setdefault(head, [])
                sub.extend([rest] if rest else schema.relations[head].defaults)
                fields[head] = None
            else:
                raise UnknownFieldError(path, schema.field_names)

        for name, sub_paths in nested_paths.items():
            fields[name] = cls.parse(schema.relations[name], sub_paths)
        return cls(schema, fields)


FieldRequest = Union[None, str, Iterable[str], FieldSelection]


class FieldResolver:
    """Per-field resolvers for books and persons.

    The stores are injected and shared with the lending service; this class
    only reads from them.
    """

    def __init__(self, book_store: Store[Book], person_store: Store[Person]) -> None:
        self.book_store = book_store
        self.person_store = person_store
        self._book_scalars: Dict[str, Callable[[Book], Any]] = {
            "id": lambda b: b.id,
            "title": lambda b: b.title,
            "author": lambda b: b.author,
            "checkedOutById": lambda b: b.checked_out_by_id,
            "isCheckedOut": self.is_checked_out,
        }
        self._person_scalars: Dict[str, Callable[[Person], Any]] = {
            "id": lambda p: p.id,
            "firstName": lambda p: p.first_name,
            "lastName": lambda p: p.last_name,
            "emailAddress": lambda p: p.email_address,
            "phoneNumber": lambda p: p.phone_number,
        }

    # ------------------------- Book fields ------------------------- #
    @staticmethod
    def is_checked_out(book: Book) -> bool:
        return book.checked_out_by_id is not None

    def checked_out_by(self, book: Book) -> Optional[Person]:
        """The borrowing person, or None for available books and dangling ids."""
        if book.checked_out_by_id is None:
            return None
        person = self.person_store.get(book.checked_out_by_id)
        if person is None:
            logger.debug("Book %s references missing person %s", book.id, book.checked_out_by_id)
        return person

    # ------------------------- Person fields ------------------------- #
    def checked_out_books(self, person: Person) -> List[Book]:
        return [b for b in self.book_store.get_all() if b.checked_out_by_id == person.id]

    # ------------------------- Record assembly ------------------------- #
    def resolve_book(self, book: Book, fields: FieldRequest = None) -> Dict[str, Any]:
        selection = self._selection(BOOK_SCHEMA, fields)
        out: Dict[str, Any] = {}
        for name in selection:
            if name == "checkedOutBy":
                person = self.checked_out_by(book)
                out[name] = self.resolve_person(person, selection.nested(name)) if person else None
            else:
                out[name] = self._book_scalars[name](book)
        return out

    def resolve_books(self, books: Iterable[Book], fields: FieldRequest = None) -> List[Dict[str, Any]]:
        selection = self._selection(BOOK_SCHEMA, fields)
        return [self.resolve_book(b, selection) for b in books]

    def resolve_person(self, person: Person, fields: FieldRequest = None) -> Dict[str, Any]:
        selection = self._selection(PERSON_SCHEMA, fields)
        out: Dict[str, Any] = {}
        for name in selection:
            if name == "checkedOutBooks":
                out[name] = self.resolve_books(self.checked_out_books(person), selection.nested(name))
            else:
                out[name] = self._person_scalars[name](person)
        return out

    def resolve_persons(self, persons: Iterable[Person], fields: FieldRequest = None) -> List[Dict[str, Any]]:
        selection = self._selection(PERSON_SCHEMA, fields)
        return [self.resolve_person(p, selection) for p in persons]

    @staticmethod
    def _selection(schema: RecordSchema, fields: FieldRequest) -> FieldSelection:
        if isinstance(fields, FieldSelection):
            return fields
        return FieldSelection.parse(schema, fields)
