# scripture_refs/services/usx/errors.py
"""Exceptions raised while validating or re-versifying USX documents."""


class UsxError(Exception):
    """Base exception for USX operations."""
    pass


class UsxFormatError(UsxError):
    """Raised when a document isn't USX or lacks the structure needed to process it."""
    pass


class UsxNumberingError(UsxError):
    """Raised when chapter and verse markers are not sequential."""

    def __init__(self, expected: str, element: str):
        self.expected = expected
        self.element = element
        super().__init__(f"Expected {expected} but got {element}")


class VersificationRulesError(UsxError):
    """Raised when versification rule data is inconsistent."""
    pass
