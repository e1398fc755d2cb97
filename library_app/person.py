from __future__ import annotations


class Person:
    """A library member who can check out books."""

    FIELDS = ("id", "first_name", "last_name", "email_address", "phone_number")

    def __init__(self, id: str, first_name: str, last_name: str, email_address: str,
                 phone_number: str | None = None) -> None:
        self.id = id
        self.first_name = first_name
        self.last_name = last_name
        self.email_address = email_address
        self.phone_number = phone_number

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.full_name} <{self.email_address}> (ID: {self.id})"

    def __repr__(self) -> str:
        return f"Person(id={self.id!r}, name={self.full_name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Person):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "emailAddress": self.email_address,
            "phoneNumber": self.phone_number,
        }

    def replace(self, **changes) -> "Person":
        values = {name: getattr(self, name) for name in self.FIELDS}
        values.update(changes)
        return Person(**values)

    @staticmethod
    def from_dict(data: dict) -> "Person":
        return Person(
            id=data["id"],
            first_name=data["firstName"],
            last_name=data["lastName"],
            email_address=data["emailAddress"],
            phone_number=data.get("phoneNumber"),
        )
