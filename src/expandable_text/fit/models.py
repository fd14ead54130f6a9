from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from expandable_text.layout.models import UNLIMITED
from expandable_text.text.direction import ResolvedTextDirection


class FitBoundary(StrEnum):
    """How the final cut index was chosen."""

    UNCHANGED = "unchanged"
    NATURAL = "natural"
    WORD = "word"
    GRAPHEME = "grapheme"
    ELLIPSIS_ONLY = "ellipsis_only"


@dataclass(frozen=True)
class FitRequest:
    max_lines: int
    available_width: float
    min_lines: int = 1
    reserved_width: float = 0.0
    locale: str | None = None

    def __post_init__(self) -> None:
        if self.min_lines <= 0:
            raise ValueError("min_lines must be greater than 0")
        if self.max_lines < 0:
            raise ValueError("max_lines must not be negative")
        if 0 < self.max_lines < self.min_lines:
            raise ValueError("min_lines must be less than or equal to max_lines")
        if self.reserved_width < 0:
            raise ValueError("reserved_width must not be negative")

    @property
    def unlimited(self) -> bool:
        return self.max_lines == UNLIMITED

    def resolved_max_lines(self, line_count: int) -> int:
        if self.unlimited:
            return max(line_count, 1)
        return self.max_lines


@dataclass(frozen=True)
class FitResult:
    """Where to cut the original text.

    ``cut_index`` is a cluster boundary in ``[0, len(text)]``. Zero means only
    the ellipsis (or trailing content) is shown.
    """

    cut_index: int
    truncated: bool
    boundary: FitBoundary
    direction: ResolvedTextDirection = ResolvedTextDirection.LTR

    @classmethod
    def untouched(cls, text: str, direction: ResolvedTextDirection) -> "FitResult":
        return cls(
            cut_index=len(text),
            truncated=False,
            boundary=FitBoundary.UNCHANGED,
            direction=direction,
        )

    @classmethod
    def showing_ellipsis_only(cls, direction: ResolvedTextDirection) -> "FitResult":
        return cls(
            cut_index=0,
            truncated=True,
            boundary=FitBoundary.ELLIPSIS_ONLY,
            direction=direction,
        )

    @property
    def ellipsis_only(self) -> bool:
        return self.boundary is FitBoundary.ELLIPSIS_ONLY

    @property
    def used_word_boundary(self) -> bool:
        return self.boundary is FitBoundary.WORD
