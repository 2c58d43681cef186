from __future__ import annotations

import logging
from typing import Optional

from config import settings
from utils.validators import ISBNValidator, TextValidator

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHOR = "Unknown"
DEFAULT_ISBN = "0000000000000"


class DownloadQuota:
    """Download counter attached to a digital edition of a book.

    Downloads and loans are tracked independently, but a book whose quota is
    exhausted can no longer be lent.
    """

    def __init__(self, file_format: str = "PDF", size_mb: float = 0.0, download_url: str = "",
                 limit: Optional[int] = None) -> None:
        self.file_format = file_format
        self.size_mb = size_mb
        self.download_url = download_url
        self.limit = settings.download_limit if limit is None else limit
        self.used = 0

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    def consume(self) -> bool:
        if self.exhausted:
            return False
        self.used += 1
        return True

    def reset(self) -> None:
        self.used = 0

    def fresh(self) -> "DownloadQuota":
        """Same file metadata and limit, counter back at zero."""
        return DownloadQuota(self.file_format, self.size_mb, self.download_url, self.limit)

    def to_dict(self) -> dict:
        return {
            "format": self.file_format,
            "size_mb": self.size_mb,
            "download_url": self.download_url,
            "downloads_used": self.used,
            "downloads_allowed": self.limit,
        }


class Book:
    """A single item of the catalog.

    ``on_loan`` is the only availability flag. The book never records who
    holds it; that belongs to the patron and loan records.
    """

    def __init__(self, title: str = DEFAULT_TITLE, author: str = DEFAULT_AUTHOR, isbn: str = DEFAULT_ISBN,
                 page_count: int = 0, quota: Optional[DownloadQuota] = None) -> None:
        self._title = title
        self._author = author
        self._isbn = isbn
        self._page_count = page_count
        self.on_loan = False
        self.quota = quota

    @classmethod
    def digital(cls, title: str, author: str, isbn: str, page_count: int, file_format: str,
                size_mb: float, download_url: str, limit: Optional[int] = None) -> "Book":
        """Build a book that carries a download quota."""
        return cls(title, author, isbn, page_count,
                   quota=DownloadQuota(file_format, size_mb, download_url, limit))

    # ------------------------- Fields ------------------------- #
    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        if TextValidator.is_non_blank(value):
            self._title = value

    @property
    def author(self) -> str:
        return self._author

    @author.setter
    def author(self, value: str) -> None:
        if TextValidator.is_non_blank(value):
            self._author = value

    @property
    def isbn(self) -> str:
        return self._isbn

    @isbn.setter
    def isbn(self, value: str) -> None:
        if ISBNValidator.is_isbn13(value):
            self._isbn = value

    @property
    def page_count(self) -> int:
        return self._page_count

    @page_count.setter
    def page_count(self, value: int) -> None:
        if isinstance(value, int) and value > 0:
            self._page_count = value

    @property
    def is_digital(self) -> bool:
        return self.quota is not None

    @property
    def remaining_downloads(self) -> Optional[int]:
        return self.quota.remaining if self.quota else None

    # ------------------------- Availability gate ------------------------- #
    def attempt_loan(self) -> bool:
        """Flag the book as lent if it is free (and its quota is not spent)."""
        if self.quota is not None and self.quota.exhausted:
            logger.debug("Loan refused for %s: download quota exhausted", self._isbn)
            return False
        if self.on_loan:
            return False
        self.on_loan = True
        return True

    def return_book(self) -> None:
        self.on_loan = False

    def check_availability(self) -> bool:
        return not self.on_loan

    # ------------------------- Downloads ------------------------- #
    def download(self) -> bool:
        if self.quota is None:
            return False
        return self.quota.consume()

    def reset_downloads(self) -> None:
        if self.quota is not None:
            self.quota.reset()

    # ------------------------- Copies ------------------------- #
    def copy(self) -> "Book":
        """Independent copy of the metadata; the copy always starts available."""
        return Book(self._title, self._author, self._isbn, self._page_count,
                    quota=self.quota.fresh() if self.quota else None)

    def to_digital(self, file_format: str, size_mb: float, download_url: str,
                   limit: Optional[int] = None) -> "Book":
        """Digital edition of this book, available and with a fresh quota."""
        digital = self.copy()
        digital.quota = DownloadQuota(file_format, size_mb, download_url, limit)
        return digital

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        status = "On loan" if self.on_loan else "Available"
        text = (f"{self._title} by {self._author}\nISBN: {self._isbn}\n"
                f"Pages: {self._page_count}\nStatus: {status}")
        if self.quota:
            text += (f"\nFormat: {self.quota.file_format}\nSize: {self.quota.size_mb} MB"
                     f"\nDownload URL: {self.quota.download_url}"
                     f"\nDownloads: {self.quota.used}/{self.quota.limit}")
        return text

    def __repr__(self) -> str:
        return f"Book(title={self._title!r}, isbn={self._isbn!r}, on_loan={self.on_loan})"

    def to_dict(self) -> dict:
        data = {
            "title": self._title,
            "author": self._author,
            "isbn": self._isbn,
            "page_count": self._page_count,
            "on_loan": self.on_loan,
        }
        if self.quota:
            data["digital"] = self.quota.to_dict()
        return data
