"""Find ``ctx.Tr("<key>")`` lookups in raw document text.

The match is purely lexical: the pattern is recognised anywhere in the text,
including comments and string literals.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# a key is any run of characters without a double quote or line break
CALL_PATTERN = re.compile(r'ctx\.Tr\("(?P<key>[^"\r\n]+)"\)')


@dataclass(frozen=True)
class Reference:
    """One lookup call site; ``start``/``end`` span only the key characters."""

    key: str
    start: int
    end: int


def scan(text: str) -> list[Reference]:
    """Return every lookup in ``text`` from left to right."""
    return [
        Reference(match["key"], match.start("key"), match.end("key"))
        for match in CALL_PATTERN.finditer(text)
    ]


__all__ = ["CALL_PATTERN", "Reference", "scan"]
