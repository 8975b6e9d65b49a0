"""Exception hierarchy for zone scanning, parsing and registry assembly."""
from __future__ import annotations


class ZoneError(Exception):
    """Base class for every zone loading failure.

    Args:
        reason: Human readable description of the failure.
        label: Diagnostic name of the source (usually the file's base name).
        line: 1-based line number the failure was detected on.

    The string form is ``"<label>:<line> <reason>"`` when a location is known.
    """

    def __init__(self, reason: str, label: str | None = None, line: int | None = None) -> None:
        self.reason = reason
        self.label = label
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.label is None:
            return self.reason
        if self.line is None:
            return f"{self.label} {self.reason}"
        return f"{self.label}:{self.line} {self.reason}"


class ScanError(ZoneError):
    """Malformed character stream: unterminated or line-spanning quotes."""


class ZoneSyntaxError(ZoneError):
    """Unexpected token, missing field or invalid field value."""


class SemanticError(ZoneError):
    """Well-formed input that contradicts itself (repeats, duplicates)."""


class DuplicateZoneError(SemanticError):
    """Two zones declare the same authority domain."""


class InvalidNameError(ValueError):
    """Raised by the name constructors when text is not a valid name."""
