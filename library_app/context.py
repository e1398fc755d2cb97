"""Wiring of stores, service and resolvers.

A ``LibraryContext`` is built once per process (or per test) and handed to
the API and the CLI; nothing in the core reaches for module-level state.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from library_app.book import Book
from library_app.config import Settings, settings as default_settings
from library_app.library import LibraryService
from library_app.person import Person
from library_app.resolvers import FieldResolver
from library_app.seed import seed_data
from library_app.store import MemoryStore, Store

logger = logging.getLogger(__name__)


@dataclass
class LibraryContext:
    settings: Settings
    book_store: Store[Book]
    person_store: Store[Person]
    service: LibraryService
    resolver: FieldResolver


def create_context(settings: Optional[Settings] = None, seed: bool = True) -> LibraryContext:
    settings = settings or default_settings
    book_store: MemoryStore[Book] = MemoryStore()
    person_store: MemoryStore[Person] = MemoryStore()

    if seed:
        seed_data(book_store, person_store, settings.seed_file)

    context = LibraryContext(
        settings=settings,
        book_store=book_store,
        person_store=person_store,
        service=LibraryService(book_store, person_store),
        resolver=FieldResolver(book_store, person_store),
    )
    logger.debug("Library context initialized (%d books, %d persons)", len(book_store), len(person_store))
    return context
