from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Book:
    """Represents a single catalog entry. Immutable once built."""

    title: str
    author: str
    identifier: str

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ID: {self.identifier})"

    def to_dict(self) -> dict:
        return {"title": self.title, "author": self.author, "identifier": self.identifier}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(title=data.get("title", ""), author=data.get("author", ""), identifier=data.get("identifier", ""))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Loan:
    """An active borrowing of the book `identifier` by `borrower`."""

    identifier: str
    borrower: str
    timestamp: datetime = field(default_factory=_utcnow)

    def matches(self, identifier: str, borrower: str) -> bool:
        return self.identifier == identifier and self.borrower == borrower

    def to_dict(self) -> dict:
        return {"identifier": self.identifier, "borrower": self.borrower, "timestamp": self.timestamp.isoformat()}


class BookBuilder:
    """Fluent builder for Book.

    Fields may be set in any order or left out; omitted fields build as
    empty strings. ``build`` may be called repeatedly and each call returns
    a fresh Book with the fields configured at that moment.
    """

    def __init__(self) -> None:
        self._title = ""
        self._author = ""
        self._identifier = ""

    def with_title(self, title: str) -> "BookBuilder":
        self._title = title
        return self

    def with_author(self, author: str) -> "BookBuilder":
        self._author = author
        return self

    def with_identifier(self, identifier: str) -> "BookBuilder":
        self._identifier = identifier
        return self

    def build(self) -> Book:
        return Book(title=self._title, author=self._author, identifier=self._identifier)
