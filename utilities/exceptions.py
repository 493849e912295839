"""Errors raised while decoding SP3 orbit files and link event records."""

from __future__ import annotations

from typing import Optional


class Sp3CzmlError(Exception):
    """Base class for all input decoding errors."""


class StructuralParseError(Sp3CzmlError, ValueError):
    """Input text or record does not have the expected structure.

    ``line_index`` is the zero based line (or record) index where decoding
    failed and ``raw_text`` the offending content, when known.
    """

    def __init__(
        self,
        message: str,
        line_index: Optional[int] = None,
        raw_text: Optional[str] = None,
    ):
        self.line_index = line_index
        self.raw_text = raw_text
        details = []
        if line_index is not None:
            details.append(f"line {line_index}")
        if raw_text is not None:
            details.append(f"text {raw_text!r}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class MissingHeaderError(StructuralParseError):
    """No epoch line was found before the end marker or the scan limit."""


class MalformedEpochError(StructuralParseError):
    """An epoch line has missing or invalid date fields."""


class InvalidInstantError(Sp3CzmlError, ValueError):
    """A date string cannot be converted to a UTC instant."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        self.raw_text = raw_text
        if raw_text is not None:
            message = f"{message}: {raw_text!r}"
        super().__init__(message)
