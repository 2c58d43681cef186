"""Seed data for the demonstration library used by the CLI."""

from typing import Optional

from book import Book
from config import Settings
from library import Library
from people import Employee, Patron, Shift

EMPLOYEES = [
    ("Juan Pérez", "E001", 16000.00, "Librarian", Shift.MORNING),
    ("María García", "E002", 8000.00, "Assistant", Shift.EVENING),
]

BOOKS = [
    ("Don Quijote de la Mancha", "Miguel de Cervantes", "9788424922498", 863),
    ("Cien años de soledad", "Gabriel García Márquez", "9780307474728", 417),
    ("El Principito", "Antoine de Saint-Exupéry", "9788498381498", 96),
    ("1984", "George Orwell", "9788499890944", 326),
    ("Orgullo y Prejuicio", "Jane Austen", "9788491052050", 424),
    ("La Odisea", "Homero", "9788467028621", 448),
    ("Fahrenheit 451", "Ray Bradbury", "9788445073192", 192),
    ("La Metamorfosis", "Franz Kafka", "9788420651361", 128),
    ("Moby Dick", "Herman Melville", "9788491051322", 752),
]

PATRONS = [
    ("Ana López", "U001"),
    ("Carlos Ruiz", "U002"),
]

# Loans exercised by the demo run, then the one return
DEMO_LOANS = [
    ("9788498381498", "U001", "E001"),
    ("9788445073192", "U001", "E001"),
]
DEMO_RETURN = ("9788498381498", "E001")
DEMO_SEARCH = "don"


def build_library(settings: Optional[Settings] = None) -> Library:
    lib = Library(settings=settings)
    for name, emp_id, salary, position, shift in EMPLOYEES:
        lib.add_employee(Employee(name, emp_id, salary, position, shift=shift))
    for title, author, isbn, pages in BOOKS:
        lib.add_book(Book(title, author, isbn, pages))
    for name, patron_id in PATRONS:
        lib.add_patron(Patron(name, patron_id))
    return lib
