from __future__ import annotations


class Book:
    """Represents a single book in the lending catalog.

    Checkout status lives only in ``checked_out_by_id``; whether the book is
    checked out is derived from it by the field resolvers.
    """

    FIELDS = ("id", "title", "author", "checked_out_by_id")

    def __init__(self, id: str, title: str, author: str, checked_out_by_id: str | None = None) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.checked_out_by_id = checked_out_by_id

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ID: {self.id})"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, checked_out_by_id={self.checked_out_by_id!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "checkedOutById": self.checked_out_by_id,
        }

    def replace(self, **changes) -> "Book":
        values = {name: getattr(self, name) for name in self.FIELDS}
        values.update(changes)
        return Book(**values)

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            id=data["id"],
            title=data["title"],
            author=data["author"],
            checked_out_by_id=data.get("checkedOutById"),
        )
