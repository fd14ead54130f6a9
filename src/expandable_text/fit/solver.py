from __future__ import annotations

from expandable_text.fit.models import FitBoundary, FitRequest, FitResult
from expandable_text.layout.models import TextLayoutInfo
from expandable_text.text.direction import (ResolvedTextDirection,
                                            is_hard_line_break)
from expandable_text.text.segmentation import (preceding_safe_boundary,
                                               should_use_word_boundaries,
                                               word_boundary)
from expandable_text.utilities.logging import get_logger

logger = get_logger(__name__)


class FitSolver:
    """Finds how much of a laid-out text fits in ``max_lines`` next to a reserved suffix.

    The solver only reads the layout. It never re-measures, so the same
    layout and request always give the same result.
    """

    def solve(self, layout: TextLayoutInfo, request: FitRequest) -> FitResult:
        text = layout.text
        line_count = layout.line_count
        max_lines = request.resolved_max_lines(line_count)
        base_direction = layout.get_paragraph_direction(0)

        if not text or line_count == 0:
            return FitResult.untouched(text, base_direction)
        if max_lines >= line_count and not layout.has_visual_overflow:
            return FitResult.untouched(text, base_direction)
        if max_lines <= 0:
            return self._ellipsis_only(base_direction, "no lines requested")

        last_line = min(max_lines, line_count) - 1
        line_start = layout.get_line_start(last_line)
        cut = layout.get_line_end(last_line, visible_end=True)
        while cut > line_start and is_hard_line_break(text[cut - 1]):
            cut -= 1

        if cut <= 0:
            return self._ellipsis_only(base_direction, "empty first line")
        if request.available_width <= 0:
            return self._ellipsis_only(base_direction, "no available width")

        direction = layout.get_paragraph_direction(cut - 1)
        walked = self._make_room(layout, request, cut, line_start, direction)

        if walked < cut:
            word_like = should_use_word_boundaries(text, request.locale)
            cut = preceding_safe_boundary(text, walked, request.locale, line_start=line_start)
            if word_like and cut > line_start and cut == word_boundary(text, walked, request.locale):
                boundary = FitBoundary.WORD
            else:
                boundary = FitBoundary.GRAPHEME
        else:
            boundary = FitBoundary.NATURAL

        while cut > line_start and text[cut - 1].isspace():
            cut -= 1
        if cut <= 0:
            return self._ellipsis_only(direction, "nothing left after trimming")
        if cut >= len(text):
            return FitResult.untouched(text, base_direction)

        result = FitResult(
            cut_index=cut,
            truncated=True,
            boundary=boundary,
            direction=layout.get_paragraph_direction(cut - 1),
        )
        logger.debug(
            "Fitted %d/%d chars on line %d (%s, %s)",
            cut,
            len(text),
            last_line,
            boundary,
            result.direction,
        )
        return result

    @staticmethod
    def _make_room(
        layout: TextLayoutInfo,
        request: FitRequest,
        cut: int,
        line_start: int,
        direction: ResolvedTextDirection,
    ) -> int:
        """Walk back from ``cut`` until the kept glyphs clear the reserved width."""

        width = request.available_width
        reserved = request.reserved_width
        walked = cut
        if direction is ResolvedTextDirection.RTL:
            limit = min(reserved, width)
            while walked > line_start and layout.get_bounding_box(walked - 1).left < limit:
                walked -= 1
        else:
            limit = max(width - reserved, 0.0)
            while walked > line_start and layout.get_bounding_box(walked - 1).right > limit:
                walked -= 1
        return walked

    @staticmethod
    def _ellipsis_only(direction: ResolvedTextDirection, reason: str) -> FitResult:
        logger.debug("Showing ellipsis only: %s", reason)
        return FitResult.showing_ellipsis_only(direction)
