class LibraryError(Exception):
    """Base exception for catalog and loan errors."""


class BookNotFoundError(LibraryError, LookupError):
    """The requested identifier has no catalog entry."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Book with identifier {identifier} does not exist.")


class InvalidOperationError(LibraryError):
    """The operation does not apply to the current loan state."""


class LoanNotFoundError(InvalidOperationError):
    """No active loan matches the identifier and borrower."""

    def __init__(self, identifier: str, borrower: str) -> None:
        self.identifier = identifier
        self.borrower = borrower
        super().__init__(
            f"Loan for book {identifier} does not exist or belongs to another borrower than {borrower}."
        )


class BookUnavailableError(InvalidOperationError):
    """The book is already on loan and loans are exclusive."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Book with identifier {identifier} is already on loan.")


class DuplicateBookError(LibraryError, ValueError):
    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Book with identifier {identifier} already exists.")
