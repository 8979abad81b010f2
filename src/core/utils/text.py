"""Text normalisation helpers for report descriptions."""

import re

_SINGLE_NEWLINE = re.compile(r"(?<=[^\n])\n(?=[^\n])")
_PARAGRAPH_BREAK = re.compile(r"\s*\n\n\s*")
_SPACES = re.compile(r"[ \t]+")
_NEWLINES = re.compile(r"\n+")


def trim_whitespace(s: str) -> str:
    """Remove unnecessary whitespace but keep paragraph breaks.

    Single newlines become spaces, two or more newlines become exactly one
    blank line, and runs of spaces and tabs collapse to a single space.
    Applying it to its own output changes nothing.
    """
    s = s.strip()
    s = _SINGLE_NEWLINE.sub(" ", s)
    s = _PARAGRAPH_BREAK.sub("\n\n", s)
    return _SPACES.sub(" ", s)


def remove_newlines(s: str) -> str:
    """Strip surrounding space and replace inner newlines with spaces."""
    return _NEWLINES.sub(" ", s.strip())
