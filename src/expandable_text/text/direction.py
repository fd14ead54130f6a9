from __future__ import annotations

import unicodedata
from enum import StrEnum

FIRST_STRONG_ISOLATE = "\u2068"
POP_DIRECTIONAL_ISOLATE = "\u2069"

HARD_LINE_BREAKS = frozenset("\n\r\u2028\u2029")

_RTL_CLASSES = frozenset({"R", "AL"})


class ResolvedTextDirection(StrEnum):
    LTR = "ltr"
    RTL = "rtl"


def is_hard_line_break(ch: str) -> bool:
    return ch in HARD_LINE_BREAKS


def first_strong_direction(text: str) -> ResolvedTextDirection | None:
    """Return the direction of the first strongly typed character, if any."""

    for ch in text:
        bidi = unicodedata.bidirectional(ch)
        if bidi == "L":
            return ResolvedTextDirection.LTR
        if bidi in _RTL_CLASSES:
            return ResolvedTextDirection.RTL
    return None


def paragraph_direction(text: str) -> ResolvedTextDirection:
    """Resolve a paragraph's base direction (UAX #9 rules P2/P3, LTR default)."""

    return first_strong_direction(text) or ResolvedTextDirection.LTR


def isolate(text: str, direction: ResolvedTextDirection) -> str:
    """Wrap ``text`` in first-strong isolates when it trails right-to-left content."""

    if not text or direction is not ResolvedTextDirection.RTL:
        return text
    return f"{FIRST_STRONG_ISOLATE}{text}{POP_DIRECTIONAL_ISOLATE}"
