import logging
from threading import Lock, RLock
from typing import Any, Dict, List, Optional, Tuple, Union

from book import Book, BookBuilder, Loan
from config import Settings, settings as default_settings
from exceptions import BookNotFoundError, BookUnavailableError, DuplicateBookError, LoanNotFoundError
from notifications import NotificationSink
from observers import BookObserver

logger = logging.getLogger(__name__)


class LibraryManager:
    """Manages the catalog, the active loans and the registered observers.

    The manager is the only mutator of its three sequences and the only
    place that sends notifications or dispatches observer callbacks. One
    re-entrant lock covers every read and write, so a loan or return is
    checked and applied atomically even when a threaded host shares the
    instance.
    """

    _instance: Optional["LibraryManager"] = None
    _instance_lock = Lock()

    def __init__(self, notifier: NotificationSink, settings: Optional[Settings] = None) -> None:
        self.notifier = notifier
        self.settings = settings or default_settings
        self._books: List[Book] = []
        self._loans: List[Loan] = []
        self._observers: List[BookObserver] = []
        self._lock = RLock()

    # ------------------------- Shared instance ------------------------- #
    @classmethod
    def get_instance(cls, notifier: NotificationSink, settings: Optional[Settings] = None) -> "LibraryManager":
        """Return the process-wide manager, creating it on first call.

        Only the first call's notifier (and settings) are used; later calls
        get the existing instance whatever they pass.
        """
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls(notifier, settings)
                logger.debug("Shared library manager created")
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        with cls._instance_lock:
            cls._instance = None

    # ------------------------- Catalog operations ------------------------- #
    def add_book(self, book: Union[Book, BookBuilder]) -> Book:
        """Append a book to the catalog and tell every observer about it.

        A BookBuilder is built on the spot. Observers run synchronously in
        registration order before this method returns.
        """
        if isinstance(book, BookBuilder):
            book = book.build()
        with self._lock:
            if not self.settings.allow_duplicate_identifiers and self._find_book(book.identifier) is not None:
                logger.warning(f"Rejected duplicate book {book.identifier}")
                raise DuplicateBookError(book.identifier)
            self._books.append(book)
            logger.info(f"Added book {book.identifier}: {book.title}")
            failures = self._notify_observers(book)
            if failures:
                logger.warning(f"{len(failures)} of {len(self._observers)} observer(s) failed for book {book.identifier}")
        return book

    def remove_book(self, identifier: str) -> bool:
        with self._lock:
            for index, book in enumerate(self._books):
                if book.identifier == identifier:
                    del self._books[index]
                    logger.info(f"Removed book {identifier}")
                    return True
        return False

    def search_by_title(self, title: str) -> List[Book]:
        with self._lock:
            return [book for book in self._books if title in book.title]

    def search_by_author(self, author: str) -> List[Book]:
        with self._lock:
            return [book for book in self._books if author in book.author]

    def search_by_identifier(self, identifier: str) -> Optional[Book]:
        with self._lock:
            return self._find_book(identifier)

    def list_books(self) -> List[Book]:
        with self._lock:
            return list(self._books)

    # ------------------------- Loans ------------------------- #
    def loan_book(self, identifier: str, borrower: str) -> Loan:
        """Record a loan of `identifier` to `borrower` and notify the borrower.

        Raises BookNotFoundError when the catalog has no such book, and
        BookUnavailableError when loans are exclusive and the book is out.
        """
        with self._lock:
            book = self._find_book(identifier)
            if book is None:
                logger.warning(f"Loan refused: book {identifier} does not exist")
                raise BookNotFoundError(identifier)
            if self.settings.exclusive_loans and any(loan.identifier == identifier for loan in self._loans):
                logger.warning(f"Loan refused: book {identifier} is already on loan")
                raise BookUnavailableError(identifier)
            loan = Loan(identifier=identifier, borrower=borrower)
            self._loans.append(loan)
            logger.info(f"Book {identifier} loaned to {borrower}")
            self.notifier.send_notification(borrower, f"You have borrowed the book {book.title}")
        return loan

    def return_book(self, identifier: str, borrower: str) -> Loan:
        """Close the first active loan of `identifier` held by `borrower`.

        The borrower is only notified when the book is still catalogued.
        Raises LoanNotFoundError (an InvalidOperationError) when no loan
        matches both fields.
        """
        with self._lock:
            index = next((i for i, loan in enumerate(self._loans) if loan.matches(identifier, borrower)), None)
            if index is None:
                logger.warning(f"Return refused: no loan of {identifier} for {borrower}")
                raise LoanNotFoundError(identifier, borrower)
            loan = self._loans.pop(index)
            logger.info(f"Book {identifier} returned by {borrower}")
            if self._find_book(identifier) is not None:
                self.notifier.send_notification(
                    borrower, f"You have returned the book with identifier {identifier}. Thank you!"
                )
        return loan

    def list_loans(self, borrower: Optional[str] = None) -> List[Loan]:
        with self._lock:
            if borrower is None:
                return list(self._loans)
            return [loan for loan in self._loans if loan.borrower == borrower]

    # ------------------------- Observers ------------------------- #
    def add_observer(self, observer: BookObserver) -> None:
        with self._lock:
            self._observers.append(observer)

    def _notify_observers(self, book: Book) -> List[Tuple[BookObserver, Exception]]:
        failures: List[Tuple[BookObserver, Exception]] = []
        for observer in list(self._observers):
            if not self.settings.isolate_observer_failures:
                observer.update(book)
                continue
            try:
                observer.update(book)
            except Exception as exc:
                logger.exception(f"Observer {observer!r} failed for book {book.identifier}")
                failures.append((observer, exc))
        return failures

    # ------------------------- Utilities ------------------------- #
    def get_statistics(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "total_books": len(self._books),
                "unique_authors": len({book.author for book in self._books}),
                "active_loans": len(self._loans),
                "observers": len(self._observers),
            }

    def _find_book(self, identifier: str) -> Optional[Book]:
        for book in self._books:
            if book.identifier == identifier:
                return book
        return None
