import logging
from typing import Optional

import typer

from config import settings
from demo import DEMO_LOANS, DEMO_RETURN, DEMO_SEARCH, build_library
from library import Library
from utils.ui_helpers import (
    get_output_mode,
    print_book_list,
    print_loan_list,
    print_outcome,
    print_summary,
    set_output_mode,
)

APP_NAME = settings.app_name

logger = logging.getLogger(__name__)


# Shared in-memory library for the lifetime of the process
class LibraryManager:
    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        """Get the demo library, seeding it on first use."""
        if cls._instance is None:
            cls._instance = build_library()
            logger.debug("Demo library seeded with %d books", len(cls._instance.books))
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


# --- Typer CLI Application ---
app = typer.Typer(help=f"{APP_NAME} CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level, e.g. INFO or DEBUG"),
):
    """Global options for the CLI (output mode, logging)."""
    set_output_mode(output or settings.output_mode)
    level = (log_level or settings.log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise typer.BadParameter(f"unknown logging level '{level}'", param_hint="'--log-level' / LOG_LEVEL")
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


@app.command("list")
def cli_list(
    available: bool = typer.Option(False, "--available", help="Only books that can be lent"),
    loaned: bool = typer.Option(False, "--loaned", help="Only books currently on loan"),
):
    """List the catalog."""
    lib = LibraryManager.get_instance()
    if available and loaned:
        print("Choose either --available or --loaned, not both.")
        return
    if available:
        print_book_list(lib.available_books(), title="Available")
    elif loaned:
        print_book_list(lib.loaned_books(), title="On loan")
    else:
        print_book_list(lib.books, title="Catalog")


@app.command("search")
def cli_search(query: str = typer.Argument(..., help="Text to look for in titles")):
    """Search titles, ignoring case."""
    lib = LibraryManager.get_instance()
    books = lib.search_books_by_title(query)
    if get_output_mode() == "plain" and books:
        print(f"Found {len(books)} book(s):")
    print_book_list(books, title=f"Results for '{query}'")


@app.command("lend")
def cli_lend(isbn: str, patron_id: str, employee_id: str):
    """Lend a book to a patron through an employee.

    The library is seeded fresh for every run and nothing is saved, so a
    later `return` or `loans` invocation will not see this loan.
    """
    lib = LibraryManager.get_instance()
    print_outcome(f"Loan of {isbn} to {patron_id}", lib.lend_book(isbn, patron_id, employee_id))


@app.command("return")
def cli_return(isbn: str, employee_id: str):
    """Return a book through an employee.

    The library is seeded fresh for every run with no books on loan, so a
    return only succeeds for a loan made in the same process.
    """
    lib = LibraryManager.get_instance()
    print_outcome(f"Return of {isbn}", lib.return_book(isbn, employee_id))


@app.command("loans")
def cli_loans(overdue: bool = typer.Option(False, "--overdue", help="Refresh and show overdue loans only")):
    """Show the loans employees are currently handling.

    The library is seeded fresh for every run, so loans made by earlier
    `lend` invocations are not listed.
    """
    lib = LibraryManager.get_instance()
    print_loan_list(lib.check_overdue() if overdue else lib.active_loans())


@app.command("report")
def cli_report():
    """Show the library summary."""
    print_summary(LibraryManager.get_instance())


@app.command("demo")
def cli_demo():
    """Run the demonstration scenario on a freshly seeded library."""
    LibraryManager.reset()
    lib = LibraryManager.get_instance()
    plain = get_output_mode() == "plain"

    if plain:
        print(f"Title search for '{DEMO_SEARCH}':")
    print_book_list(lib.search_books_by_title(DEMO_SEARCH), title=f"Search '{DEMO_SEARCH}'")

    for isbn, patron_id, employee_id in DEMO_LOANS:
        print_outcome(f"Loan of {isbn} to {patron_id}", lib.lend_book(isbn, patron_id, employee_id))

    if plain:
        print("Books on loan:")
    print_book_list(lib.loaned_books(), title="On loan")

    isbn, employee_id = DEMO_RETURN
    print_outcome(f"Return of {isbn}", lib.return_book(isbn, employee_id))

    if plain:
        print("Final state of the library:")
    print_summary(lib)


if __name__ == "__main__":
    app()
