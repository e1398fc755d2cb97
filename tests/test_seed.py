import json

import pytest

from library_app.book import Book
from library_app.config import Settings
from library_app.context import create_context
from library_app.errors import SeedDataError
from library_app.person import Person
from library_app.seed import DEFAULT_BOOKS, book_from_seed, load_seed_file, person_from_seed


def test_default_catalog(context):
    books = context.book_store.get_all()
    assert len(books) == 8
    assert {b.id: b.checked_out_by_id for b in books if b.checked_out_by_id} == {"2": "1", "4": "2", "7": "1"}
    assert len(context.person_store) == 3


def test_unseeded_context_is_empty(settings):
    context = create_context(settings, seed=False)
    assert context.service.get_all_books() == []
    assert context.service.get_persons() == []


def test_seed_file_replaces_default_catalog(tmp_path):
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps({
        "books": [{"id": "b1", "title": "  Dune\u0000 ", "author": "Frank Herbert", "checkedOutById": "p1"}],
        "persons": [{"id": "p1", "firstName": "Paul", "lastName": "Atreides", "emailAddress": "paul@arrakis.test"}],
    }), encoding="utf-8")

    context = create_context(Settings(seed_file=str(seed_file)))

    book = context.service.get_book("b1")
    assert book.title == "Dune"
    assert book.checked_out_by_id == "p1"
    assert context.service.get_person("p1").phone_number is None
    assert context.service.return_book("b1").checked_out_by_id is None


def test_seed_file_errors(tmp_path):
    with pytest.raises(SeedDataError, match="cannot read seed file"):
        load_seed_file(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(SeedDataError, match="JSON object"):
        load_seed_file(bad)


def test_invalid_seed_records():
    with pytest.raises(SeedDataError, match="leading or trailing whitespace"):
        book_from_seed({"id": " 1", "title": "T", "author": "A"})
    with pytest.raises(SeedDataError, match="title cannot be empty"):
        book_from_seed({"id": "1", "title": "   ", "author": "A"})
    with pytest.raises(SeedDataError, match="emailAddress must be a non-empty string"):
        person_from_seed({"id": "1", "firstName": "A", "lastName": "B"})


def test_default_records_are_valid():
    assert [book_from_seed(r).id for r in DEFAULT_BOOKS] == [str(i) for i in range(1, 9)]


@pytest.mark.parametrize("payload", [
    {"books": ["oops"], "persons": []},
    {"books": [], "persons": [["1", "Jane"]]},
])
def test_seed_records_must_be_objects(tmp_path, payload):
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(SeedDataError, match="record must be a JSON object") as excinfo:
        create_context(Settings(seed_file=str(seed_file)))
    assert excinfo.value.code == "INVALID_SEED_DATA"


def test_seed_ids_use_fixed_length_limit():
    assert book_from_seed({"id": "b" * 100, "title": "T", "author": "A"}).id == "b" * 100
    with pytest.raises(SeedDataError, match="between 1 and 100"):
        book_from_seed({"id": "b" * 101, "title": "T", "author": "A"})


def test_records_round_trip_through_wire_names():
    book = book_from_seed(DEFAULT_BOOKS[1])
    assert Book.from_dict(book.to_dict()) == book
    person = Person.from_dict({"id": "9", "firstName": "Ada", "lastName": "Lovelace",
                               "emailAddress": "ada@example.com"})
    assert person.phone_number is None
    assert person.to_dict()["firstName"] == "Ada"
