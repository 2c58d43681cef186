import logging
from typing import Any, Dict, List, Optional

from book import Book
from config import Settings, settings as default_settings
from loan import Loan, LoanIdSequence, LoanStatus
from people import Employee, Patron
from utils.validators import ISBNValidator

logger = logging.getLogger(__name__)


class Library:
    """Registry of books, patrons and employees, and the entry point for loans and returns."""

    def __init__(self, name: Optional[str] = None, location: Optional[str] = None,
                 settings: Optional[Settings] = None) -> None:
        self.settings = settings or default_settings
        self.name = name or self.settings.library_name
        self.location = location or self.settings.library_location
        # Duplicates are allowed; each entry is a physical item
        self.books: List[Book] = []
        self.patrons: List[Patron] = []
        self.employees: Dict[str, Employee] = {}
        self.loan_ids = LoanIdSequence()

    # ------------------------- Employees ------------------------- #
    def add_employee(self, employee: Employee) -> None:
        """Register an employee; it mints loan ids from this library's sequence."""
        # Ids the employee already handed out must not be minted again
        self.loan_ids.advance_to(employee.loan_ids.last)
        employee.loan_ids = self.loan_ids
        if employee.loan_period_days is None:
            employee.loan_period_days = self.settings.loan_period_days
        self.employees[employee.id] = employee

    def remove_employee(self, employee_id: str) -> None:
        self.employees.pop(employee_id, None)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    # ------------------------- Books ------------------------- #
    def add_book(self, book: Book) -> None:
        self.books.append(book)

    def remove_book(self, book: Book) -> bool:
        if book in self.books:
            self.books.remove(book)
            return True
        return False

    def find_book(self, isbn: str) -> Optional[Book]:
        norm = ISBNValidator.normalize_isbn(isbn)
        for book in self.books:
            if book.isbn == norm:
                return book
        return None

    def search_books_by_title(self, text: str) -> List[Book]:
        """Case-insensitive substring search over titles."""
        term = text.lower()
        return [b for b in self.books if term in b.title.lower()]

    def available_books(self) -> List[Book]:
        return [b for b in self.books if not b.on_loan]

    def loaned_books(self) -> List[Book]:
        return [b for b in self.books if b.on_loan]

    # ------------------------- Patrons ------------------------- #
    def add_patron(self, patron: Patron) -> None:
        if patron not in self.patrons:
            self.patrons.append(patron)

    def remove_patron(self, patron: Patron) -> None:
        # Outstanding loans are left untouched
        if patron in self.patrons:
            self.patrons.remove(patron)

    def find_patron(self, patron_id: str) -> Optional[Patron]:
        for patron in self.patrons:
            if patron.id == patron_id:
                return patron
        return None

    # ------------------------- Lending ------------------------- #
    def lend_book(self, isbn: str, patron_id: str, employee_id: str) -> bool:
        book = self.find_book(isbn)
        patron = self.find_patron(patron_id)
        employee = self.employees.get(employee_id)

        if book is None or patron is None or employee is None:
            logger.debug("Loan refused: isbn=%s patron=%s employee=%s not all registered",
                         isbn, patron_id, employee_id)
            return False
        if book.on_loan:
            logger.debug("Loan refused: %s is already on loan", isbn)
            return False
        return employee.process_loan(book, patron)

    def return_book(self, isbn: str, employee_id: str) -> bool:
        book = self.find_book(isbn)
        employee = self.employees.get(employee_id)

        if book is None or employee is None or not book.on_loan:
            logger.debug("Return refused: isbn=%s employee=%s", isbn, employee_id)
            return False
        if self.settings.strict_returns:
            return self._return_matching(book, employee)

        oldest = employee.peek_in_flight()
        if oldest is not None and oldest.book.isbn != isbn:
            logger.warning("Employee %s dequeues loan %s (%s) for returned book %s",
                           employee_id, oldest.id, oldest.book.isbn, isbn)
        # Two independent steps: the book flag and the employee queue
        book.return_book()
        employee.process_return()
        logger.info("Book %s returned via employee %s", isbn, employee_id)
        return True

    def _return_matching(self, book: Book, employee: Employee) -> bool:
        loan = employee.find_in_flight(book)
        if loan is None:
            logger.warning("Employee %s has no in-flight loan for %s", employee.id, book.isbn)
            return False
        if not loan.process_return():
            return False
        employee.process_return_for(book)
        return True

    def active_loans(self) -> List[Loan]:
        loans: List[Loan] = []
        for employee in self.employees.values():
            loans.extend(employee.in_flight_loans)
        return loans

    def check_overdue(self) -> List[Loan]:
        """Refresh every in-flight loan and return the overdue ones."""
        return [loan for loan in self.active_loans() if loan.check_state() is LoanStatus.OVERDUE]

    # ------------------------- Reporting ------------------------- #
    def get_statistics(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "location": self.location,
            "total_books": len(self.books),
            "available_books": len(self.available_books()),
            "loaned_books": len(self.loaned_books()),
            "patrons": len(self.patrons),
            "employees": len(self.employees),
        }

    def summary(self) -> str:
        stats = self.get_statistics()
        lines = [
            f"Library: {stats['name']}",
            f"Location: {stats['location']}",
            f"Total books: {stats['total_books']}",
            f"Available books: {stats['available_books']}",
            f"Books on loan: {stats['loaned_books']}",
            f"Registered patrons: {stats['patrons']}",
            f"Employees: {stats['employees']}",
            "",
            "Books currently on loan:",
        ]
        lines.extend(f"- {book.title}" for book in self.loaned_books())
        return "\n".join(lines)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return self.summary()
