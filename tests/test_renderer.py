from __future__ import annotations

import pygame
import pytest

from expandable_text.display.trailing import TextTrailingContent
from expandable_text.expandable import ExpandableText
from expandable_text.layout.measurer import (MonospaceTextMeasurer,
                                             PygameTextMeasurer)
from expandable_text.layout.models import UNLIMITED
from expandable_text.renderer import ExpandableTextRenderer
from expandable_text.text.annotated import AnnotatedText
from expandable_text.text.style import Color, SpanStyle, TextStyle

TEXT = (
    "The quick brown fox jumps over the lazy dog while the cat watches "
    "from the windowsill and the bird sings."
)


@pytest.fixture
def pygame_measurer() -> PygameTextMeasurer:
    return PygameTextMeasurer(default_font="freesansbold.ttf", default_font_size=16)


class TestExpandableTextRenderer:
    """Group renderer tests so drawing stays inside the animated height."""

    def test_requires_pygame_measurer(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify the renderer refuses metrics it cannot draw with."""
        with pytest.raises(ValueError):
            ExpandableTextRenderer(ExpandableText(TEXT, measurer=measurer))

    def test_draws_within_reported_height(
        self, pygame_measurer: PygameTextMeasurer, stub_clock_factory
    ) -> None:
        """Confirm pixels are drawn only inside the reported size of a collapsed paragraph."""
        window = pygame.Surface((200, 300), pygame.SRCALPHA)
        expandable = ExpandableText(
            AnnotatedText(TEXT).with_style(SpanStyle(bold=True, color=Color(200, 0, 0)), 0, 9),
            max_lines=2,
            style=TextStyle(color=Color.black()),
            measurer=pygame_measurer,
        )
        renderer = ExpandableTextRenderer(expandable, pygame_measurer)

        frame = renderer.process(window, stub_clock_factory(16))

        assert frame.showing_truncation
        height = int(frame.size.height)
        painted_rows = {
            y for x in range(200) for y in range(300) if window.get_at((x, y)).a > 0
        }
        assert painted_rows
        assert max(painted_rows) < height

    def test_animates_over_frames(
        self, pygame_measurer: PygameTextMeasurer, stub_clock_factory
    ) -> None:
        """Check repeated processing advances the height toward the expanded size."""
        window = pygame.Surface((200, 300), pygame.SRCALPHA)
        more = TextTrailingContent(" more", measurer=pygame_measurer)
        expandable = ExpandableText(
            TEXT, max_lines=1, trailing_content=more, measurer=pygame_measurer
        )
        renderer = ExpandableTextRenderer(expandable)
        clock = stub_clock_factory(16)

        collapsed = renderer.process(window, clock)
        expandable.update(max_lines=UNLIMITED)
        heights = [renderer.process(window, clock).size.height for _ in range(60)]

        assert heights[0] >= collapsed.size.height
        assert heights[-1] == pytest.approx(collapsed.full_layout.size.height)
        assert renderer.last_frame is not None
