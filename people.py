from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from datetime import date
from typing import Deque, List, Optional, Set, Tuple

from book import Book
from loan import Clock, Loan, LoanIdSequence

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    pass


class LoanMismatchError(LibraryError):
    """The oldest in-flight loan is not for the book being returned."""

    def __init__(self, loan: Loan, isbn: str) -> None:
        super().__init__(f"Oldest in-flight loan {loan.id} is for {loan.book.isbn}, not {isbn}")
        self.loan = loan
        self.isbn = isbn


class Role(str, enum.Enum):
    EMPLOYEE = "Employee"
    PATRON = "Patron"


class Shift(str, enum.Enum):
    MORNING = "MORNING"
    EVENING = "EVENING"
    MIXED = "MIXED"


@dataclass
class Person:
    """Identity and contact details shared by every role."""
    name: str
    id: str
    role: Role
    email: str = "user@server.com"
    phone: str = "0000000000"


class _Member:
    """Role holder wrapping a Person record."""

    role_tag: Role

    def __init__(self, name: str, person_id: str) -> None:
        self.person = Person(name=name, id=person_id, role=self.role_tag)

    @property
    def name(self) -> str:
        return self.person.name

    @property
    def id(self) -> str:
        return self.person.id

    @property
    def email(self) -> str:
        return self.person.email

    @email.setter
    def email(self, value: str) -> None:
        self.person.email = value

    @property
    def phone(self) -> str:
        return self.person.phone

    @phone.setter
    def phone(self, value: str) -> None:
        self.person.phone = value

    def role(self) -> Role:
        return self.person.role


class Patron(_Member):
    """A library user and the books they currently hold."""

    role_tag = Role.PATRON

    def __init__(self, name: str, patron_id: str) -> None:
        super().__init__(name, patron_id)
        self._borrowed: List[Book] = []
        # Audit trail of every ISBN ever borrowed; never pruned
        self.history: Set[str] = set()

    @property
    def borrowed_books(self) -> Tuple[Book, ...]:
        return tuple(self._borrowed)

    def request_loan(self, book: Book) -> bool:
        if book.on_loan:
            return False
        if book.attempt_loan():
            self._borrowed.append(book)
            self.history.add(book.isbn)
            return True
        return False

    def return_book(self, book: Book) -> bool:
        if book not in self._borrowed:
            return False
        book.return_book()
        self._borrowed.remove(book)
        return True

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        text = f"ID: {self.id}, Name: {self.name}. "
        if self._borrowed:
            titles = ", ".join(b.title for b in self._borrowed)
            return text + f"Has on loan: {titles}."
        return text + "Has no books on loan."

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role().value,
            "borrowed": [b.isbn for b in self._borrowed],
            "history": sorted(self.history),
        }


class Employee(_Member):
    """Library staff member who processes loans and keeps them in a FIFO queue."""

    role_tag = Role.EMPLOYEE

    def __init__(self, name: str, employee_id: str, salary: float, position: str,
                 shift: Shift = Shift.MORNING, loan_ids: Optional[LoanIdSequence] = None,
                 loan_period_days: Optional[int] = None, clock: Clock = date.today) -> None:
        super().__init__(name, employee_id)
        self._salary = 0.0
        self.salary = salary
        self.position = position
        self.shift = shift
        self.loan_ids = loan_ids or LoanIdSequence()
        self.loan_period_days = loan_period_days
        self.clock = clock
        self._in_flight: Deque[Loan] = deque()
        self._history: List[Loan] = []

    @property
    def salary(self) -> float:
        return self._salary

    @salary.setter
    def salary(self, value: float) -> None:
        self._salary = value if value > 0 else 0.0

    @property
    def in_flight_loans(self) -> Tuple[Loan, ...]:
        return tuple(self._in_flight)

    @property
    def loan_history(self) -> Tuple[Loan, ...]:
        return tuple(self._history)

    def peek_in_flight(self) -> Optional[Loan]:
        return self._in_flight[0] if self._in_flight else None

    def process_loan(self, book: Optional[Book], patron: Optional[Patron]) -> bool:
        """Lend ``book`` to ``patron``; the loan record only exists if the patron accepted it."""
        if book is None or patron is None or book.on_loan:
            return False
        if not patron.request_loan(book):
            logger.debug("Patron %s could not take %s", patron.id, book.isbn)
            return False
        loan = Loan(self.loan_ids.next_id(), patron, book, self.loan_period_days, clock=self.clock)
        self._in_flight.append(loan)
        self._history.append(loan)
        logger.info("Employee %s lent %s to %s as %s", self.id, book.isbn, patron.id, loan.id)
        return True

    def process_return(self, expected_isbn: Optional[str] = None) -> bool:
        """Dequeue the oldest in-flight loan.

        Without ``expected_isbn`` the queue is popped blindly. With it, a loan
        for a different book raises LoanMismatchError and nothing is dequeued.
        """
        if not self._in_flight:
            return False
        if expected_isbn is not None and self._in_flight[0].book.isbn != expected_isbn:
            raise LoanMismatchError(self._in_flight[0], expected_isbn)
        self._in_flight.popleft()
        return True

    def find_in_flight(self, book: Book) -> Optional[Loan]:
        for loan in self._in_flight:
            if loan.book.isbn == book.isbn:
                return loan
        return None

    def process_return_for(self, book: Book) -> Optional[Loan]:
        """Dequeue the oldest in-flight loan for ``book``'s ISBN, if any."""
        loan = self.find_in_flight(book)
        if loan is not None:
            self._in_flight.remove(loan)
        return loan

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return (f"Employee [position={self.position}, salary={self._salary}, shift={self.shift.value}, "
                f"active loans={len(self._in_flight)}, name={self.name}, id={self.id}]")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role().value,
            "position": self.position,
            "salary": self._salary,
            "shift": self.shift.value,
            "in_flight": [loan.id for loan in self._in_flight],
            "history": [loan.id for loan in self._history],
        }
