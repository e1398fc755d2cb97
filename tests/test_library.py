import threading

import pytest

from library_app.book import Book
from library_app.errors import (
    BookAlreadyCheckedOutError,
    BookNotCheckedOutError,
    BookNotFoundError,
    PersonNotFoundError,
)
from library_app.context import create_context
from library_app.library import LibraryService
from library_app.person import Person
from library_app.rules import can_check_out, can_return
from library_app.store import MemoryStore


def test_rules():
    available = Book("1", "Ulysses", "James Joyce")
    on_loan = Book("2", "Dubliners", "James Joyce", checked_out_by_id="1")
    assert can_check_out(available) and not can_return(available)
    assert can_return(on_loan) and not can_check_out(on_loan)


@pytest.mark.parametrize("book_id", ["1", "3", "5", "6", "8"])
def test_check_out_available_book(service, book_id):
    book = service.check_out_book(book_id, "3")
    assert book.checked_out_by_id == "3"
    assert service.get_book(book_id).checked_out_by_id == "3"


def test_check_out_mutates_only_the_book(context):
    persons_before = [p.to_dict() for p in context.person_store.get_all()]
    others_before = {b.id: b.to_dict() for b in context.book_store.get_all() if b.id != "1"}

    context.service.check_out_book("1", "2")

    assert [p.to_dict() for p in context.person_store.get_all()] == persons_before
    assert {b.id: b.to_dict() for b in context.book_store.get_all() if b.id != "1"} == others_before


@pytest.mark.parametrize("person_id", ["1", "2", "3"])
def test_second_checkout_fails_and_keeps_holder(service, person_id):
    with pytest.raises(BookAlreadyCheckedOutError) as exc_info:
        service.check_out_book("2", person_id)
    assert exc_info.value.code == "BOOK_ALREADY_CHECKED_OUT"
    assert exc_info.value.metadata == {"bookId": "2"}
    assert service.get_book("2").checked_out_by_id == "1"


def test_check_out_unknown_book(service):
    with pytest.raises(BookNotFoundError) as exc_info:
        service.check_out_book("999", "1")
    assert exc_info.value.metadata == {"bookId": "999"}


def test_check_out_unknown_person_leaves_book_available(service):
    with pytest.raises(PersonNotFoundError) as exc_info:
        service.check_out_book("1", "999")
    assert exc_info.value.code == "PERSON_NOT_FOUND"
    assert exc_info.value.metadata == {"personId": "999"}
    assert service.get_book("1").checked_out_by_id is None


def test_book_lookup_happens_before_person_lookup(service):
    with pytest.raises(BookNotFoundError):
        service.check_out_book("999", "999")


def test_person_lookup_happens_before_rule_check(service):
    with pytest.raises(PersonNotFoundError):
        service.check_out_book("2", "999")


def test_return_checked_out_book(service):
    book = service.return_book("2")
    assert book.checked_out_by_id is None
    assert service.get_book("2").checked_out_by_id is None


def test_return_available_book_fails(service):
    with pytest.raises(BookNotCheckedOutError) as exc_info:
        service.return_book("1")
    assert exc_info.value.code == "BOOK_NOT_CHECKED_OUT"
    assert service.get_book("1").checked_out_by_id is None


def test_return_unknown_book(service):
    with pytest.raises(BookNotFoundError):
        service.return_book("999")


def test_return_then_check_out_again(service):
    assert service.return_book("2").checked_out_by_id is None
    assert service.check_out_book("2", "2").checked_out_by_id == "2"


def test_update_reporting_absence_is_book_not_found(context, monkeypatch):
    # The record vanishes between the lookup and the write
    monkeypatch.setattr(context.book_store, "update", lambda id, **fields: None)
    with pytest.raises(BookNotFoundError):
        context.service.check_out_book("1", "1")
    with pytest.raises(BookNotFoundError):
        context.service.return_book("2")


def test_operations_are_deterministic(settings):
    outcomes = []
    for _ in range(2):
        svc = create_context(settings).service
        result = []
        for call in (lambda: svc.check_out_book("1", "1"), lambda: svc.check_out_book("1", "2"),
                     lambda: svc.return_book("3"), lambda: svc.return_book("1")):
            try:
                result.append(call().to_dict())
            except Exception as e:
                result.append(type(e).__name__)
        outcomes.append(result)
    assert outcomes[0] == outcomes[1]


def test_concurrent_checkouts_have_exactly_one_winner(context):
    person_ids = ["1", "2", "3"] * 4
    barrier = threading.Barrier(len(person_ids))
    winners, losers, unexpected = [], [], []

    def attempt(person_id):
        barrier.wait()
        try:
            winners.append(context.service.check_out_book("5", person_id))
        except BookAlreadyCheckedOutError:
            losers.append(person_id)
        except Exception as e:  # pragma: no cover - reported below
            unexpected.append(e)

    threads = [threading.Thread(target=attempt, args=(pid,)) for pid in person_ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert unexpected == []
    assert len(winners) == 1
    assert len(losers) == len(person_ids) - 1
    assert context.book_store.get("5").checked_out_by_id == winners[0].checked_out_by_id


def test_queries(service):
    assert len(service.get_all_books()) == 8
    assert [p.id for p in service.get_persons()] == ["1", "2", "3"]
    assert service.get_person("3").phone_number is None
    with pytest.raises(PersonNotFoundError):
        service.get_person("999")
    with pytest.raises(BookNotFoundError):
        service.get_book("999")


def test_books_checked_out_by_person(service):
    assert [b.id for b in service.get_books_checked_out_by("1")] == ["2", "7"]
    assert service.get_books_checked_out_by("3") == []
    with pytest.raises(PersonNotFoundError):
        service.get_books_checked_out_by("999")


def test_service_uses_injected_stores():
    books = MemoryStore([Book("a", "Title", "Author")])
    persons = MemoryStore([Person("p", "Ada", "Lovelace", "ada@example.com")])
    svc = LibraryService(books, persons)
    svc.check_out_book("a", "p")
    assert books.get("a").checked_out_by_id == "p"
