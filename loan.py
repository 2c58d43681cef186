from __future__ import annotations

import enum
import logging
from datetime import date, timedelta
from typing import TYPE_CHECKING, Callable, Optional

from book import Book
from config import settings

if TYPE_CHECKING:
    from people import Patron

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


class LoanStatus(str, enum.Enum):
    """Lifecycle of one borrowing event.

    ACTIVE -> RETURNED (via process_return)
    ACTIVE -> OVERDUE  (via an explicit check_state)
    """
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"


class LoanIdSequence:
    """Monotonic loan id generator: P0001, P0002, ...

    Never resets. One sequence is owned by each Library and shared by the
    employees registered with it.
    """

    PREFIX = "P"

    def __init__(self, start: int = 0) -> None:
        self._counter = start

    @property
    def last(self) -> int:
        return self._counter

    def advance_to(self, counter: int) -> None:
        """Skip ahead so the next id is above ``counter``; never moves backwards."""
        if counter > self._counter:
            self._counter = counter

    def next_id(self) -> str:
        self._counter += 1
        return f"{self.PREFIX}{self._counter:04d}"


class Loan:
    """Binds a patron and a book with dates and a LoanStatus."""

    def __init__(self, loan_id: str, patron: "Patron", book: Book,
                 loan_period_days: Optional[int] = None, clock: Clock = date.today) -> None:
        self.id = loan_id
        self._patron = patron
        self._book = book
        self._clock = clock
        period = settings.loan_period_days if loan_period_days is None else loan_period_days
        self.loan_date: date = clock()
        self.expected_return_date: date = self.loan_date + timedelta(days=period)
        self.actual_return_date: Optional[date] = None
        self.status = LoanStatus.ACTIVE

    # Read-only references; callers must not mutate the entities through them.
    @property
    def patron(self) -> "Patron":
        return self._patron

    @property
    def book(self) -> Book:
        return self._book

    @property
    def is_active(self) -> bool:
        return self.status is LoanStatus.ACTIVE

    @property
    def is_overdue(self) -> bool:
        return self.status is LoanStatus.OVERDUE

    def register(self) -> bool:
        """Ask the patron to take the book for this loan.

        Refused when the book is already out or the patron holds any book.
        """
        if self._book.on_loan or self._patron.borrowed_books:
            return False
        if self._patron.request_loan(self._book):
            self.status = LoanStatus.ACTIVE
            return True
        return False

    def process_return(self) -> bool:
        """Close the loan, undoing the book flag if the patron cannot drop the book."""
        if self.status is not LoanStatus.ACTIVE:
            return False
        self.actual_return_date = self._clock()
        self._book.return_book()
        if self._patron.return_book(self._book):
            self.status = LoanStatus.RETURNED
            logger.info("Loan %s returned on %s", self.id, self.actual_return_date)
            return True
        # Compensate: the book is still with someone as far as we know
        logger.warning("Loan %s: patron %s does not hold %s, reverting return",
                       self.id, self._patron.id, self._book.isbn)
        self._book.on_loan = True
        self.actual_return_date = None
        return False

    def check_state(self) -> LoanStatus:
        if self.status is LoanStatus.ACTIVE and self._clock() > self.expected_return_date:
            self.status = LoanStatus.OVERDUE
            logger.info("Loan %s is overdue (due %s)", self.id, self.expected_return_date)
        return self.status

    def extend(self, days: int) -> bool:
        # TODO: validate days; a negative value currently shortens the loan window
        if self.status is LoanStatus.ACTIVE and not self._clock() > self.expected_return_date:
            self.expected_return_date += timedelta(days=days)
            return True
        return False

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        returned = self.actual_return_date.isoformat() if self.actual_return_date else "Not returned"
        return (f"Loan [ID={self.id}, Patron={self._patron.name}, Book={self._book.title}, "
                f"Loan date={self.loan_date.isoformat()}, "
                f"Expected return={self.expected_return_date.isoformat()}, "
                f"Actual return={returned}, Status={self.status.value}]")

    def __repr__(self) -> str:
        return f"Loan(id={self.id!r}, isbn={self._book.isbn!r}, status={self.status.value})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patron_id": self._patron.id,
            "isbn": self._book.isbn,
            "title": self._book.title,
            "loan_date": self.loan_date.isoformat(),
            "expected_return_date": self.expected_return_date.isoformat(),
            "actual_return_date": self.actual_return_date.isoformat() if self.actual_return_date else None,
            "status": self.status.value,
        }
