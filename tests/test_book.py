import dataclasses
from datetime import timezone

import pytest

from book import Book, BookBuilder, Loan


def test_builder_chains_and_builds():
    builder = BookBuilder()
    assert builder.with_title("Ulysses") is builder
    assert builder.with_author("James Joyce") is builder
    assert builder.with_identifier("9780199535675") is builder

    book = builder.build()
    assert book == Book(title="Ulysses", author="James Joyce", identifier="9780199535675")

def test_builder_any_order_and_omitted_fields_default_to_empty():
    book = BookBuilder().with_identifier("42").with_title("Only Title").build()
    assert book.title == "Only Title"
    assert book.author == ""
    assert book.identifier == "42"

    assert BookBuilder().build() == Book("", "", "")

def test_build_returns_snapshot_each_call():
    builder = BookBuilder().with_title("First").with_author("A").with_identifier("1")
    first = builder.build()
    second = builder.with_title("Second").build()

    assert first.title == "First"
    assert second.title == "Second"
    assert first is not second

def test_book_is_immutable():
    book = Book("Sapiens", "Yuval Noah Harari", "9780099590088")
    with pytest.raises(dataclasses.FrozenInstanceError):
        book.title = "Changed"

def test_book_dict_round_trip():
    book = Book("Sapiens", "Yuval Noah Harari", "9780099590088")
    assert book.to_dict() == {"title": "Sapiens", "author": "Yuval Noah Harari", "identifier": "9780099590088"}
    assert Book.from_dict(book.to_dict()) == book

def test_loan_defaults_to_aware_utc_timestamp():
    loan = Loan("123", "u1")
    assert loan.timestamp.tzinfo == timezone.utc
    assert loan.matches("123", "u1")
    assert not loan.matches("123", "u2")
    assert loan.to_dict()["timestamp"] == loan.timestamp.isoformat()
