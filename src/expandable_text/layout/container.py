from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

import pygame

from expandable_text.layout.models import INFINITY, Size


@dataclass(frozen=True)
class Constraints:
    min_width: float = 0.0
    max_width: float = INFINITY
    min_height: float = 0.0
    max_height: float = INFINITY

    def __post_init__(self) -> None:
        if self.min_width < 0 or self.min_height < 0:
            raise ValueError("Constraint minimums must be non-negative")
        if self.max_width < self.min_width or self.max_height < self.min_height:
            raise ValueError(
                f"Invalid constraints: width {self.min_width}..{self.max_width}, "
                f"height {self.min_height}..{self.max_height}"
            )

    @classmethod
    def fixed_width(cls, width: float) -> "Constraints":
        return cls(min_width=width, max_width=width)

    @property
    def has_bounded_width(self) -> bool:
        return math.isfinite(self.max_width)

    def constrain_width(self, width: float) -> float:
        return min(max(width, self.min_width), self.max_width)

    def constrain_height(self, height: float) -> float:
        return min(max(height, self.min_height), self.max_height)


class HeightSource(Protocol):
    @property
    def value(self) -> float: ...


class StableHeightContainer:
    """Lays out content at its natural size but reports the source's height.

    ``height_source.value`` is read on every measure, so the reported height
    follows whatever drives it (usually a :class:`HeightAnimator`). Content
    taller than the reported height is clipped when composed.
    """

    def __init__(self, height_source: HeightSource) -> None:
        self._height_source = height_source

    def measure(self, constraints: Constraints, content_size: Size | None) -> Size:
        height = constraints.constrain_height(max(self._height_source.value, 0.0))
        if content_size is None:
            return Size(width=constraints.constrain_width(0.0), height=height)
        return Size(width=constraints.constrain_width(content_size.width), height=height)

    def compose(self, content: pygame.Surface, size: Size) -> pygame.Surface:
        """Place ``content`` at the top-left of a ``size`` surface, clipping the rest."""

        surface = pygame.Surface(
            (max(int(math.ceil(size.width)), 0), max(int(math.ceil(size.height)), 0)),
            pygame.SRCALPHA,
        )
        surface.blit(content, (0, 0))
        return surface
