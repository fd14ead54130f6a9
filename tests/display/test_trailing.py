from __future__ import annotations

import pygame

from expandable_text.display.trailing import TextTrailingContent
from expandable_text.layout.measurer import MonospaceTextMeasurer
from expandable_text.layout.models import Rect, Size


class TestTextTrailingContent:
    """Group trailing label tests so the label fits the slot it is given."""

    def test_measure_caps_height_to_line(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify the label's height is capped to the allowed line height."""
        trailing = TextTrailingContent(" more", measurer=measurer)

        assert trailing.measure(max_width=500, max_height=10) == Size(width=40, height=10)

    def test_measure_caps_width(self, measurer: MonospaceTextMeasurer) -> None:
        """Confirm a narrow container caps the label width."""
        trailing = TextTrailingContent(" more", measurer=measurer)

        assert trailing.measure(max_width=24, max_height=16).width == 24

    def test_draw_renders_inside_rect(self, measurer: MonospaceTextMeasurer) -> None:
        """Check drawing paints pixels only within the given rect."""
        surface = pygame.Surface((100, 40), pygame.SRCALPHA)
        trailing = TextTrailingContent("more", measurer=measurer)

        trailing.draw(surface, Rect(10, 10, 60, 26))

        painted = [
            (x, y)
            for x in range(100)
            for y in range(40)
            if surface.get_at((x, y)).a > 0
        ]
        assert painted
        assert all(10 <= x < 60 and 10 <= y < 26 for x, y in painted)
