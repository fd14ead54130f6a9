from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import StrEnum
from typing import Iterator


@dataclass(slots=True, frozen=True)
class Color:
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for variant in self.tuple():
            assert 0 <= variant <= 255, (
                f"Expected all color values to be between 0 and 255. Found {self.tuple()}"
            )

    @staticmethod
    def black() -> "Color":
        return Color(r=0, g=0, b=0)

    @staticmethod
    def link() -> "Color":
        return Color(r=103, g=80, b=164)

    def tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def __iter__(self) -> Iterator[int]:
        return iter(self.tuple())


class TextAlign(StrEnum):
    START = "start"
    END = "end"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFY = "justify"


@dataclass(frozen=True)
class SpanStyle:
    """Character-level overrides carried by a span of rich text."""

    color: Color | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    font_size: int | None = None


@dataclass(frozen=True)
class TextStyle:
    """Paragraph-level style. ``None`` fields are unspecified and lose to any merge."""

    font_name: str | None = None
    font_size: int | None = None
    color: Color | None = None
    line_height: float | None = None
    letter_spacing: float | None = None
    text_align: TextAlign | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None

    def merge(self, other: "TextStyle | None") -> "TextStyle":
        """Return a style where every field set on ``other`` wins over ``self``."""

        if other is None:
            return self
        overrides = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **overrides)

    def resolved_align(self) -> TextAlign:
        return self.text_align or TextAlign.START

    def with_span(self, span: SpanStyle | None) -> "TextStyle":
        if span is None:
            return self
        return self.merge(
            TextStyle(
                color=span.color,
                bold=span.bold,
                italic=span.italic,
                underline=span.underline,
                font_size=span.font_size,
            )
        )
