from __future__ import annotations

import logging
import math
import time

import pygame

from expandable_text.expandable import ExpandableText, ExpandableTextFrame
from expandable_text.layout.measurer import (PLACEHOLDER_CHAR,
                                             PygameTextMeasurer, is_zero_width)
from expandable_text.text.direction import is_hard_line_break
from expandable_text.text.segmentation import grapheme_boundaries
from expandable_text.text.style import Color, TextStyle
from expandable_text.utilities.logging import get_logger
from expandable_text.utilities.logging_control import get_logging_controller

logger = get_logger(__name__)
log_controller = get_logging_controller()


class ExpandableTextRenderer:
    def __init__(
        self,
        expandable: ExpandableText,
        measurer: PygameTextMeasurer | None = None,
        position: tuple[int, int] = (0, 0),
    ) -> None:
        measurer = measurer or expandable.measurer
        if not isinstance(measurer, PygameTextMeasurer):
            raise ValueError("ExpandableTextRenderer requires a PygameTextMeasurer")
        self.expandable = expandable
        self.measurer = measurer
        self.position = position
        self.last_frame: ExpandableTextFrame | None = None
        self._glyph_cache: dict[tuple[str, TextStyle], pygame.Surface] = {}

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def process(self, window: pygame.Surface, clock: pygame.time.Clock) -> ExpandableTextFrame:
        start_ns = time.perf_counter_ns()
        self.expandable.advance(clock.get_time())
        width = window.get_width() - self.position[0]
        frame = self.expandable.measure(width)

        content = pygame.Surface(
            (max(width, 1), max(int(math.ceil(frame.content_layout.size.height)), 1)),
            pygame.SRCALPHA,
        )
        self._draw_content(content, frame)
        state = self.expandable.state
        assert state is not None
        window.blit(state.container.compose(content, frame.size), self.position)
        self.last_frame = frame

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        log_controller.log(
            key="expandable_text.render",
            logger=logger,
            level=logging.INFO,
            msg="render renderer=%s duration_ms=%.2f height=%.2f truncated=%s",
            args=(self.name, duration_ms, frame.size.height, frame.showing_truncation),
            fallback_level=logging.DEBUG,
        )
        return frame

    def _glyph(self, cluster: str, style: TextStyle) -> pygame.Surface:
        key = (cluster, style)
        glyph = self._glyph_cache.get(key)
        if glyph is None:
            font = self.measurer.font_for(style)
            underline = font.get_underline()
            font.set_underline(bool(style.underline))
            color = style.color or Color.black()
            glyph = font.render(cluster, True, color.tuple())
            font.set_underline(underline)
            self._glyph_cache[key] = glyph
        return glyph

    def _draw_content(self, surface: pygame.Surface, frame: ExpandableTextFrame) -> None:
        layout = frame.content_layout
        payload = frame.payload
        text = payload.text
        if not layout.lines:
            return
        visible_limit = layout.lines[-1].end
        base_style = self.expandable.params.style
        trailing = self.expandable.params.trailing_content

        bounds = grapheme_boundaries(text.text)
        for start, end in zip(bounds, bounds[1:]):
            if start >= visible_limit:
                break
            cluster = text.text[start:end]
            box = layout.get_bounding_box(start)
            if cluster == PLACEHOLDER_CHAR:
                if trailing is not None and payload.placeholder is not None:
                    trailing.draw(surface, box)
                continue
            if cluster.isspace() or is_zero_width(cluster):
                continue
            if any(is_hard_line_break(ch) for ch in cluster):
                continue
            style = base_style.with_span(text.style_at(start))
            surface.blit(self._glyph(cluster, style), (int(box.left), int(box.top)))
