import re
from typing import Optional

_ISBN13_RE = re.compile(r"\d{13}")


class ISBNValidator:
    """ISBN helpers for the catalog. Only the 13-digit form is accepted."""

    @staticmethod
    def normalize_isbn(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return re.sub(r"[\s-]", "", raw)

    @staticmethod
    def is_isbn13(isbn: Optional[str]) -> bool:
        # Format only: the catalog does not verify the check digit
        if not isinstance(isbn, str):
            return False
        return _ISBN13_RE.fullmatch(isbn) is not None


class TextValidator:
    """Basic text checks used by the model setters."""

    @staticmethod
    def is_non_blank(text: Optional[str]) -> bool:
        return isinstance(text, str) and bool(text.strip())
