import logging

import pytest

from book import Book
from config import Settings
from demo import build_library
from library import Library
from loan import LoanStatus
from people import Employee, Patron

ISBN = "9788498381498"


def test_lend_and_return_end_to_end(lib):
    book = lib.find_book(ISBN)
    assert lib.lend_book(ISBN, "U001", "E001") is True
    assert book.on_loan is True
    assert lib.lend_book(ISBN, "U001", "E001") is False

    assert lib.return_book(ISBN, "E001") is True
    assert book.on_loan is False
    assert lib.get_employee("E001").in_flight_loans == ()


@pytest.mark.parametrize("isbn, patron_id, employee_id", [
    ("0000000000000", "U001", "E001"),
    (ISBN, "U999", "E001"),
    (ISBN, "U001", "E999"),
])
def test_lend_with_unknown_entity(lib, isbn, patron_id, employee_id):
    assert lib.lend_book(isbn, patron_id, employee_id) is False
    assert lib.loaned_books() == []
    assert lib.active_loans() == []


def test_return_requires_book_on_loan(lib):
    assert lib.return_book(ISBN, "E001") is False
    lib.lend_book(ISBN, "U001", "E001")
    assert lib.return_book("0000000000000", "E001") is False
    assert lib.return_book(ISBN, "E999") is False


def test_fifo_return_dequeues_oldest_loan(lib, caplog):
    lib.add_book(Book("Fahrenheit 451", "Ray Bradbury", "9788445073192", 192))
    lib.lend_book(ISBN, "U001", "E001")
    lib.lend_book("9788445073192", "U001", "E001")

    with caplog.at_level(logging.WARNING, logger="library"):
        assert lib.return_book("9788445073192", "E001") is True

    remaining = lib.get_employee("E001").in_flight_loans
    # The oldest loan was popped even though it is for the other book
    assert [loan.book.isbn for loan in remaining] == ["9788445073192"]
    assert lib.find_book("9788445073192").on_loan is False
    assert "dequeues loan P0001" in caplog.text


def test_strict_return_matches_isbn(clock):
    lib = Library(settings=Settings(strict_returns=True))
    lib.add_employee(Employee("Juan Pérez", "E001", 16000.0, "Librarian", clock=clock))
    patron = Patron("Ana López", "U001")
    lib.add_patron(patron)
    lib.add_book(Book("El Principito", "Antoine de Saint-Exupéry", ISBN, 96))
    lib.add_book(Book("Fahrenheit 451", "Ray Bradbury", "9788445073192", 192))
    lib.lend_book(ISBN, "U001", "E001")
    lib.lend_book("9788445073192", "U001", "E001")
    first, second = lib.get_employee("E001").in_flight_loans

    assert lib.return_book("9788445073192", "E001") is True
    assert second.status is LoanStatus.RETURNED
    assert second.actual_return_date == clock.today
    assert lib.get_employee("E001").in_flight_loans == (first,)
    assert [b.isbn for b in patron.borrowed_books] == [ISBN]


def test_strict_return_without_matching_loan(clock):
    lib = Library(settings=Settings(strict_returns=True))
    lib.add_employee(Employee("Juan Pérez", "E001", 16000.0, "Librarian", clock=clock))
    lib.add_employee(Employee("María García", "E002", 8000.0, "Assistant", clock=clock))
    lib.add_patron(Patron("Ana López", "U001"))
    lib.add_book(Book("El Principito", "Antoine de Saint-Exupéry", ISBN, 96))
    lib.lend_book(ISBN, "U001", "E001")

    assert lib.return_book(ISBN, "E002") is False
    assert lib.find_book(ISBN).on_loan is True
    assert len(lib.get_employee("E001").in_flight_loans) == 1


def test_loan_ids_shared_across_library_employees(lib, clock):
    lib.add_employee(Employee("María García", "E002", 8000.0, "Assistant", clock=clock))
    lib.add_book(Book("1984", "George Orwell", "9788499890944", 326))
    lib.lend_book(ISBN, "U001", "E001")
    lib.lend_book("9788499890944", "U001", "E002")
    assert [loan.id for loan in lib.active_loans()] == ["P0001", "P0002"]


def test_each_library_owns_its_sequence(test_settings):
    first = build_library(test_settings)
    second = build_library(test_settings)
    first.lend_book(ISBN, "U001", "E001")
    second.lend_book(ISBN, "U001", "E001")
    assert first.active_loans()[0].id == second.active_loans()[0].id == "P0001"


def test_loan_period_from_library_settings(clock):
    lib = Library(settings=Settings(loan_period_days=7))
    lib.add_employee(Employee("Juan Pérez", "E001", 16000.0, "Librarian", clock=clock))
    lib.add_patron(Patron("Ana López", "U001"))
    lib.add_book(Book("El Principito", "Antoine de Saint-Exupéry", ISBN, 96))
    lib.lend_book(ISBN, "U001", "E001")
    loan = lib.active_loans()[0]
    assert (loan.expected_return_date - loan.loan_date).days == 7


def test_check_overdue(lib, clock):
    lib.lend_book(ISBN, "U001", "E001")
    assert lib.check_overdue() == []
    clock.advance(15)
    overdue = lib.check_overdue()
    assert [loan.book.isbn for loan in overdue] == [ISBN]
    assert overdue[0].status is LoanStatus.OVERDUE


def test_search_books_by_title_is_case_insensitive(test_settings):
    lib = build_library(test_settings)
    results = lib.search_books_by_title("DON")
    assert [b.title for b in results] == ["Don Quijote de la Mancha"]
    assert {b.title for b in lib.search_books_by_title("la")} == {
        "Don Quijote de la Mancha",
        "La Odisea",
        "La Metamorfosis",
    }
    assert lib.search_books_by_title("zzz") == []


def test_book_registry(lib):
    book = lib.find_book(ISBN)
    duplicate = book.copy()
    lib.add_book(duplicate)
    assert len(lib.books) == 2
    assert lib.find_book(ISBN) is book
    assert lib.remove_book(book) is True
    assert lib.find_book(ISBN) is duplicate
    assert lib.remove_book(book) is False


def test_patron_registry(lib):
    patron = lib.find_patron("U001")
    lib.add_patron(patron)
    assert len(lib.patrons) == 1
    assert lib.find_patron("U404") is None


def test_removing_patron_keeps_loans(lib):
    lib.lend_book(ISBN, "U001", "E001")
    lib.remove_patron(lib.find_patron("U001"))
    assert lib.find_patron("U001") is None
    assert len(lib.active_loans()) == 1
    assert lib.find_book(ISBN).on_loan is True


def test_employee_registry(lib):
    assert lib.get_employee("E001").name == "Juan Pérez"
    lib.remove_employee("E001")
    assert lib.get_employee("E001") is None
    lib.remove_employee("E001")
    assert lib.lend_book(ISBN, "U001", "E001") is False


def test_available_and_loaned_books(test_settings):
    lib = build_library(test_settings)
    lib.lend_book(ISBN, "U001", "E001")
    assert len(lib.available_books()) == 8
    assert [b.isbn for b in lib.loaned_books()] == [ISBN]


def test_statistics_and_summary(test_settings):
    lib = build_library(test_settings)
    lib.lend_book("9788498381498", "U001", "E001")
    lib.lend_book("9788445073192", "U001", "E001")
    lib.return_book("9788498381498", "E001")

    stats = lib.get_statistics()
    assert stats["total_books"] == 9
    assert stats["available_books"] == 8
    assert stats["loaned_books"] == 1
    assert stats["patrons"] == 2
    assert stats["employees"] == 2

    summary = lib.summary()
    assert "Total books: 9" in summary
    assert summary.endswith("- Fahrenheit 451")


def test_find_book_accepts_hyphenated_isbn(lib):
    assert lib.find_book("978-84-9838-149-8") is lib.books[0]


def test_employee_with_earlier_loans_keeps_unique_ids(clock):
    employee = Employee("Juan Pérez", "E001", 16000.0, "Librarian", clock=clock)
    patron = Patron("Ana López", "U001")
    employee.process_loan(Book("La Odisea", "Homero", "9788467037050", 400), patron)

    first = Library(settings=Settings())
    first.add_employee(employee)
    first.add_patron(patron)
    first.add_book(Book("El Principito", "Antoine de Saint-Exupéry", ISBN, 96))
    assert first.lend_book(ISBN, "U001", "E001") is True

    second = Library(settings=Settings())
    second.add_employee(employee)
    second.add_patron(patron)
    second.add_book(Book("1984", "George Orwell", "9788499890944", 326))
    assert second.lend_book("9788499890944", "U001", "E001") is True

    assert [loan.id for loan in employee.loan_history] == ["P0001", "P0002", "P0003"]
