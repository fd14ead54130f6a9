"""Safe cut points inside a string.

Two primitives back everything here: extended grapheme cluster boundaries
(``\\X``) and UAX #29 default word boundaries (``\\b`` under ``regex.WORD``).
Both come from the ``regex`` package. The default segmentation rules are
locale independent, so ``locale`` is accepted for API parity with hosts that
tailor segmentation but does not change the result.
"""

from __future__ import annotations

import bisect
from functools import lru_cache

import regex

_GRAPHEME_RE = regex.compile(r"\X")
_WORD_BOUNDARY_RE = regex.compile(r"\b", flags=regex.WORD)

WORD_SEPARATORS = frozenset("-.,/\\")
_BOUNDARY_CACHE_SIZE = 32


@lru_cache(maxsize=_BOUNDARY_CACHE_SIZE)
def grapheme_boundaries(text: str) -> tuple[int, ...]:
    """Every cluster boundary in ``text``, including 0 and ``len(text)``."""

    starts = [match.start() for match in _GRAPHEME_RE.finditer(text)]
    return tuple(starts) + (len(text),) if starts else (0,)


@lru_cache(maxsize=_BOUNDARY_CACHE_SIZE)
def word_boundaries(text: str) -> tuple[int, ...]:
    """Every default word boundary in ``text``, including 0 and ``len(text)``."""

    found = {0, len(text)}
    found.update(match.start() for match in _WORD_BOUNDARY_RE.finditer(text))
    return tuple(sorted(found))


def _at_or_before(boundaries: tuple[int, ...], index: int) -> int:
    position = bisect.bisect_right(boundaries, index) - 1
    return boundaries[position] if position >= 0 else 0


def grapheme_boundary(text: str, index: int, locale: str | None = None) -> int:
    """Return the cluster boundary at or before ``index``."""

    if index <= 0:
        return 0
    if index >= len(text):
        return len(text)
    return _at_or_before(grapheme_boundaries(text), index)


def word_boundary(text: str, index: int, locale: str | None = None) -> int:
    """Return the word boundary at or before ``index``."""

    if index <= 0:
        return 0
    if index >= len(text):
        return len(text)
    return _at_or_before(word_boundaries(text), index)


def count_word_tokens(text: str, locale: str | None = None, max_to_count: int = 2) -> int:
    """Count word segments holding a letter or digit, stopping at ``max_to_count``."""

    count = 0
    boundaries = word_boundaries(text)
    for start, end in zip(boundaries, boundaries[1:]):
        if any(ch.isalnum() for ch in text[start:end]):
            count += 1
            if count >= max_to_count:
                break
    return count


def has_word_separators(text: str) -> bool:
    return any(ch.isspace() or ch in WORD_SEPARATORS for ch in text)


def should_use_word_boundaries(text: str, locale: str | None = None) -> bool:
    """Whether ``text`` looks word-like enough to cut at word boundaries.

    Needs a separator character and at least two word tokens. Scripts written
    without separators (CJK, Thai) fall through to grapheme cuts.
    """

    if not has_word_separators(text):
        return False
    return count_word_tokens(text, locale, max_to_count=2) >= 2


def choose_boundary_before(text: str, index: int, locale: str | None = None) -> int:
    if index <= 0:
        return 0
    if index >= len(text):
        return len(text)

    if should_use_word_boundaries(text, locale):
        # Word boundaries never split clusters; the grapheme snap keeps that true
        # even for text the word rules were not written for.
        boundary = grapheme_boundary(text, word_boundary(text, index, locale), locale)
    else:
        boundary = grapheme_boundary(text, index, locale)

    if boundary <= 0:
        return grapheme_boundary(text, index, locale)
    return min(boundary, index)


def preceding_safe_boundary(
    text: str,
    index: int,
    locale: str | None = None,
    *,
    line_start: int = 0,
) -> int:
    """Return the nearest safe cut at or before ``index`` but not before ``line_start``.

    A word cut that would drop the whole segment after ``line_start`` is
    replaced by a grapheme cut so the segment keeps some content.
    """

    if index <= 0:
        return 0
    line_start = max(0, min(line_start, index))

    boundary = min(max(choose_boundary_before(text, index, locale), line_start), index)
    if boundary <= line_start:
        boundary = min(max(grapheme_boundary(text, index, locale), line_start), index)
    return boundary
