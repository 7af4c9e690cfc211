# errors.py
from __future__ import annotations


class EnigmaError(Exception):
    """Base class for every error raised by the simulator."""


class ConfigError(EnigmaError, ValueError):
    """Bad alphabet, wiring, rotor catalog, slot layout or settings line."""


class AlphabetLookupError(EnigmaError, LookupError):
    """A symbol (or index) that the alphabet does not know."""
