# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Raised for any malformed configuration, setting or message.

    Subclasses ``ValueError`` so callers that already guard input parsing
    with ``except ValueError`` keep working.
    """
