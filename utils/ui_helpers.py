import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_book_list(books: List[Any], title: str = "Books") -> None:
    """Print books in the current output mode.
    - plain: 'ISBN - Title by Author [status]' lines, or 'No books found.'
    - json: JSON array of the book dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books found.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title=f"📚 {title}", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Status", style="white")
        for b in books:
            table.add_row(b.isbn, b.title, b.author, "On loan" if b.on_loan else "Available")
        _console.print(table)
    else:
        for b in books:
            status = "on loan" if b.on_loan else "available"
            print(f"{b.isbn} - {b.title} by {b.author} [{status}]")


def print_loan_list(loans: List[Any]) -> None:
    mode = get_output_mode()

    if not loans:
        print("No active loans.")
        return

    if mode == "json":
        print(json.dumps([loan.to_dict() for loan in loans], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="🔖 Loans", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Patron", style="white")
        table.add_column("Book", style="white")
        table.add_column("Due", style="white")
        table.add_column("Status", style="white")
        for loan in loans:
            table.add_row(loan.id, loan.patron.name, loan.book.title,
                          loan.expected_return_date.isoformat(), loan.status.value)
        _console.print(table)
    else:
        for loan in loans:
            print(f"{loan.id} - {loan.book.title} -> {loan.patron.id} "
                  f"(due {loan.expected_return_date.isoformat()}, {loan.status.value})")


def print_outcome(action: str, success: bool) -> None:
    """One line per lend/return attempt, kept identical across modes except json."""
    if get_output_mode() == "json":
        print(json.dumps({"action": action, "success": success}))
    elif success:
        print(f"{action}: success")
    else:
        print(f"{action}: failed")


def print_summary(library: Any) -> None:
    """Print the library report.
    - plain: Library.summary()
    - json: stats object plus loaned titles
    - rich: Panel with the key figures
    """
    mode = get_output_mode()
    stats: Dict[str, Any] = library.get_statistics()
    loaned_titles = [b.title for b in library.loaned_books()]

    if mode == "json":
        print(json.dumps({**stats, "loaned_titles": loaned_titles}, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Location:[/] {stats['location']}\n"
            f"[bold]Total Books:[/] {stats['total_books']}\n"
            f"[bold]Available:[/] {stats['available_books']}\n"
            f"[bold]On Loan:[/] {stats['loaned_books']}\n"
            f"[bold]Patrons:[/] {stats['patrons']}\n"
            f"[bold]Employees:[/] {stats['employees']}"
        )
        for title in loaned_titles:
            content += f"\n  - {title}"
        _console.print(Panel.fit(content, title=f"📊 {stats['name']}", border_style="blue"))
    else:
        print(library.summary())
