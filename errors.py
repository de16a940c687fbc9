# errors.py
from __future__ import annotations


class UnigmaError(ValueError):
    """Base class for machine configuration errors."""


class BadPositions(UnigmaError):
    """Start position string is not exactly three letters A-Z."""


class BadPlugboard(UnigmaError):
    """Plugboard string is malformed, too long or reuses a letter."""
