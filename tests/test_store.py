import pytest

from library_app.book import Book
from library_app.person import Person
from library_app.store import MemoryStore


@pytest.fixture
def store():
    return MemoryStore([
        Book("1", "Ulysses", "James Joyce"),
        Book("2", "Dubliners", "James Joyce", checked_out_by_id="7"),
    ])


def test_get_is_exact_match(store):
    assert store.get("1").title == "Ulysses"
    assert store.get(" 1") is None
    assert store.get("missing") is None


def test_get_all_enumerates_in_insertion_order(store):
    store.create(Book("0", "Finnegans Wake", "James Joyce"))
    assert [b.id for b in store.get_all()] == ["1", "2", "0"]


def test_create_overwrites_and_is_idempotent(store):
    book = Book("3", "Sapiens", "Yuval Noah Harari")
    store.create(book)
    store.create(Book("3", "Sapiens", "Yuval Noah Harari"))
    assert len(store) == 3
    assert store.get("3") == book

    store.create(Book("3", "Homo Deus", "Yuval Noah Harari"))
    assert store.get("3").title == "Homo Deus"
    assert len(store) == 3


def test_update_merges_only_supplied_fields(store):
    updated = store.update("2", checked_out_by_id=None)
    assert updated.checked_out_by_id is None
    assert updated.title == "Dubliners"
    assert updated.author == "James Joyce"
    assert store.get("2") == updated


def test_update_does_not_mutate_previously_returned_record(store):
    before = store.get("1")
    store.update("1", title="Ulysses (annotated)")
    assert before.title == "Ulysses"
    assert store.get("1").title == "Ulysses (annotated)"


def test_update_missing_id_returns_none_without_side_effects(store):
    assert store.update("nope", title="Ghost") is None
    assert not store.exists("nope")
    assert len(store) == 2


def test_update_rejects_unknown_fields_and_id_changes(store):
    with pytest.raises(ValueError, match="Unknown field"):
        store.update("1", is_checked_out=True)
    with pytest.raises(ValueError, match="id cannot be changed"):
        store.update("1", id="99")
    assert store.get("1").title == "Ulysses"
    assert not store.exists("99")


def test_delete_and_exists(store):
    assert store.exists("1")
    assert "1" in store
    assert store.delete("1") is True
    assert store.delete("1") is False
    assert not store.exists("1")


def test_store_is_generic_over_record_type():
    persons = MemoryStore([Person("1", "Jane", "Smith", "jane@example.com")])
    updated = persons.update("1", phone_number="555-0102")
    assert updated.phone_number == "555-0102"
    assert updated.email_address == "jane@example.com"


def test_records_hash_on_id(store):
    before = store.get("2")
    after = store.update("2", checked_out_by_id=None)
    assert hash(before) == hash(after)
    assert len({before, after, store.get("1")}) == 3
    assert {store.get("1"), Book("1", "Ulysses", "James Joyce")} == {store.get("1")}
    assert hash(Person("1", "Jane", "Smith", "jane@example.com")) == hash("1")
