import logging
from abc import ABC, abstractmethod
from typing import List

from book import Book

logger = logging.getLogger(__name__)


class BookObserver(ABC):
    """Receives a callback each time a book is added to the catalog."""

    @abstractmethod
    def update(self, book: Book) -> None:
        ...


class User(BookObserver):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        self.notified_books: List[Book] = []

    def update(self, book: Book) -> None:
        logger.info(f'User {self.user_id} notified: book "{book.title}" was added')
        self.notified_books.append(book)

    def __repr__(self) -> str:
        return f"User({self.user_id!r})"
