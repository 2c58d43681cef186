from datetime import date, timedelta

import pytest

from book import Book
from config import Settings
from library import Library
from people import Employee, Patron


class FakeClock:
    """Callable date source that tests can move forward."""

    def __init__(self, today: date = date(2024, 3, 1)) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        self.today += timedelta(days=days)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(loan_period_days=14, download_limit=3, strict_returns=False)


@pytest.fixture
def lib(test_settings, clock):
    # One employee, one patron and one available book
    library = Library("Test Library", "Main St", settings=test_settings)
    library.add_employee(Employee("Juan Pérez", "E001", 16000.0, "Librarian", clock=clock))
    library.add_patron(Patron("Ana López", "U001"))
    library.add_book(Book("El Principito", "Antoine de Saint-Exupéry", "9788498381498", 96))
    yield library


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # Output mode lives in the environment; keep tests independent of each other
    monkeypatch.setenv("LIB_CLI_OUTPUT", "plain")
