from __future__ import annotations

from typing import Protocol

import pygame

from expandable_text.layout.measurer import PygameTextMeasurer, TextMeasurer
from expandable_text.layout.models import Rect, Size
from expandable_text.text.style import Color, TextStyle

DEFAULT_MORE_LABEL = " more"


class TrailingContent(Protocol):
    """Content drawn inline after the (possibly truncated) text."""

    def measure(self, max_width: float, max_height: float) -> Size: ...

    def draw(self, surface: pygame.Surface, rect: Rect) -> None: ...


class TextTrailingContent:
    """A short styled label such as " more"."""

    def __init__(
        self,
        text: str = DEFAULT_MORE_LABEL,
        style: TextStyle | None = None,
        measurer: TextMeasurer | None = None,
    ) -> None:
        self.text = text
        self.style = style or TextStyle(color=Color.link())
        self._measurer = measurer or PygameTextMeasurer()
        self._rendered: pygame.Surface | None = None

    def measure(self, max_width: float, max_height: float) -> Size:
        layout = self._measurer.measure(self.text, self.style, soft_wrap=False)
        return Size(
            width=min(layout.size.width, max(max_width, 0.0)),
            height=min(layout.size.height, max(max_height, 0.0)),
        )

    def _font(self) -> pygame.font.Font:
        if isinstance(self._measurer, PygameTextMeasurer):
            return self._measurer.font_for(self.style)
        return pygame.font.Font(None, self.style.font_size or 16)

    def draw(self, surface: pygame.Surface, rect: Rect) -> None:
        if self._rendered is None:
            font = self._font()
            underline = font.get_underline()
            font.set_underline(bool(self.style.underline))
            color = self.style.color or Color.link()
            self._rendered = font.render(self.text, True, color.tuple())
            font.set_underline(underline)
        area = pygame.Rect(0, 0, int(rect.width), int(rect.height))
        surface.blit(self._rendered, (int(rect.left), int(rect.top)), area)
