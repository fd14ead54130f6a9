from __future__ import annotations

import bisect
import math
import sys
from dataclasses import dataclass
from functools import cached_property
from typing import Final

from expandable_text.text.direction import ResolvedTextDirection

UNLIMITED: Final[int] = sys.maxsize
"""Line-count sentinel meaning "as many lines as the text needs"."""

INFINITY: Final[float] = math.inf


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


EMPTY_RECT: Final[Rect] = Rect(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class LineMetrics:
    """One laid-out line.

    ``end`` includes hanging whitespace and the hard break that closed the
    line; ``visible_end`` stops before both.
    """

    start: int
    end: int
    visible_end: int
    top: float
    bottom: float
    left: float
    width: float
    direction: ResolvedTextDirection = ResolvedTextDirection.LTR


@dataclass(frozen=True, eq=False)
class TextLayoutInfo:
    """Read-only result of measuring one string under one set of constraints."""

    text: str
    lines: tuple[LineMetrics, ...]
    boxes: tuple[Rect, ...]
    size: Size
    max_width: float
    has_visual_overflow: bool = False
    did_exceed_max_lines: bool = False

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @cached_property
    def _line_starts(self) -> tuple[int, ...]:
        return tuple(line.start for line in self.lines)

    def get_line_start(self, line: int) -> int:
        return self.lines[line].start

    def get_line_end(self, line: int, visible_end: bool = False) -> int:
        metrics = self.lines[line]
        return metrics.visible_end if visible_end else metrics.end

    def get_line_top(self, line: int) -> float:
        return self.lines[line].top

    def get_line_bottom(self, line: int) -> float:
        return self.lines[line].bottom

    def get_line_for_offset(self, offset: int) -> int:
        if not self.lines:
            return 0
        position = bisect.bisect_right(self._line_starts, max(offset, 0)) - 1
        return max(0, min(position, len(self.lines) - 1))

    def get_bounding_box(self, offset: int) -> Rect:
        if not self.boxes:
            return EMPTY_RECT
        return self.boxes[max(0, min(offset, len(self.boxes) - 1))]

    def get_paragraph_direction(self, offset: int) -> ResolvedTextDirection:
        if not self.lines:
            return ResolvedTextDirection.LTR
        return self.lines[self.get_line_for_offset(offset)].direction
