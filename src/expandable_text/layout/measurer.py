"""Host text layout.

Python UI hosts do not hand out per-character geometry, so this module is the
layout engine the rest of the package measures against: a greedy line
breaker over grapheme clusters with two metric backends. The monospace one is
deterministic and needs no fonts, the pygame one measures real glyphs.
"""

from __future__ import annotations

import math
import unicodedata
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass

import pygame

from expandable_text.layout.models import (INFINITY, UNLIMITED, LineMetrics,
                                           Rect, Size, TextLayoutInfo)
from expandable_text.text.annotated import AnnotatedText
from expandable_text.text.direction import (ResolvedTextDirection,
                                            is_hard_line_break,
                                            paragraph_direction)
from expandable_text.text.segmentation import grapheme_boundaries
from expandable_text.text.style import TextAlign, TextStyle
from expandable_text.utilities.env import Configuration
from expandable_text.utilities.logging import get_logger

logger = get_logger(__name__)

PLACEHOLDER_CHAR = "\ufffc"
TAB_STOP_SPACES = 4
_ZERO_WIDTH_CATEGORIES = frozenset({"Mn", "Me", "Cf", "Cc"})
_HYPHENS = frozenset("-\u2010\u2012\u2013")


@dataclass(frozen=True)
class _Cluster:
    start: int
    end: int
    advance: float
    is_space: bool
    is_break: bool
    is_wide: bool
    ends_with_hyphen: bool


def is_zero_width(cluster: str) -> bool:
    return all(unicodedata.category(ch) in _ZERO_WIDTH_CATEGORIES for ch in cluster)


def is_wide(cluster: str) -> bool:
    return unicodedata.east_asian_width(cluster[0]) in ("W", "F")


class TextMeasurer(ABC):
    """Measures text into a :class:`TextLayoutInfo`.

    Results are cached per instance, so repeated frames with identical inputs
    reuse the same layout object.
    """

    def __init__(self, *, cache_size: int | None = None) -> None:
        self._cache_size = (
            Configuration.measure_cache_size() if cache_size is None else cache_size
        )
        self._cache: OrderedDict[tuple[object, ...], TextLayoutInfo] = OrderedDict()

    @abstractmethod
    def line_height(self, style: TextStyle) -> float:
        """Natural height of one line in ``style``."""

    @abstractmethod
    def advance(self, cluster: str, style: TextStyle) -> float:
        """Horizontal advance of one printable grapheme cluster."""

    def measure(
        self,
        text: str | AnnotatedText,
        style: TextStyle,
        max_width: float = INFINITY,
        max_lines: int = UNLIMITED,
        soft_wrap: bool = True,
        placeholder: Size | None = None,
    ) -> TextLayoutInfo:
        annotated = AnnotatedText.of(text)
        key = (annotated, style, max_width, max_lines, soft_wrap, placeholder)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            return cached

        layout = self._layout(annotated, style, max_width, max_lines, soft_wrap, placeholder)
        if self._cache_size > 0:
            self._cache[key] = layout
            while len(self._cache) > self._cache_size:
                self._cache.popitem(last=False)
        return layout

    def _clusters(
        self,
        annotated: AnnotatedText,
        style: TextStyle,
        placeholder: Size | None,
    ) -> list[_Cluster]:
        text = annotated.text
        bounds = grapheme_boundaries(text)
        spacing = style.letter_spacing or 0.0
        clusters: list[_Cluster] = []
        for start, end in zip(bounds, bounds[1:]):
            cluster = text[start:end]
            hard_break = any(is_hard_line_break(ch) for ch in cluster)
            if hard_break:
                advance = 0.0
            elif cluster == PLACEHOLDER_CHAR:
                advance = placeholder.width if placeholder is not None else 0.0
            elif cluster == "\t":
                advance = self.advance(" ", style) * TAB_STOP_SPACES
            elif is_zero_width(cluster):
                advance = 0.0
            else:
                advance = self.advance(cluster, style.with_span(annotated.style_at(start)))
                advance += spacing
            clusters.append(
                _Cluster(
                    start=start,
                    end=end,
                    advance=advance,
                    is_space=not hard_break and cluster.isspace(),
                    is_break=hard_break,
                    is_wide=is_wide(cluster),
                    ends_with_hyphen=cluster[-1] in _HYPHENS,
                )
            )
        return clusters

    @staticmethod
    def _can_break_before(clusters: list[_Cluster], index: int) -> bool:
        current = clusters[index]
        previous = clusters[index - 1]
        if current.is_space:
            return False
        return (
            previous.is_space
            or previous.ends_with_hyphen
            or previous.is_wide
            or current.is_wide
        )

    def _break_paragraph(
        self,
        clusters: list[_Cluster],
        first: int,
        last: int,
        max_width: float,
        soft_wrap: bool,
    ) -> list[tuple[int, int]]:
        """Greedy-fill clusters ``first..last`` into ``(start, end)`` cluster ranges."""

        ranges: list[tuple[int, int]] = []
        line_start = first
        x = 0.0
        opportunity: int | None = None
        k = first
        while k < last:
            cluster = clusters[k]
            if k > line_start and self._can_break_before(clusters, k):
                opportunity = k
            if (
                soft_wrap
                and not cluster.is_space
                and k > line_start
                and x + cluster.advance > max_width
            ):
                end = opportunity if opportunity is not None and opportunity > line_start else k
                ranges.append((line_start, end))
                line_start = end
                x = sum(c.advance for c in clusters[line_start:k])
                opportunity = None
                continue
            x += cluster.advance
            k += 1
        ranges.append((line_start, last))
        return ranges

    def _layout(
        self,
        annotated: AnnotatedText,
        style: TextStyle,
        max_width: float,
        max_lines: int,
        soft_wrap: bool,
        placeholder: Size | None,
    ) -> TextLayoutInfo:
        text = annotated.text
        clusters = self._clusters(annotated, style, placeholder)
        line_height = style.line_height or self.line_height(style)
        wrap_width = max(max_width, 0.0)

        # (first cluster, end cluster, break cluster or None, direction)
        raw_lines: list[tuple[int, int, int | None, ResolvedTextDirection]] = []
        paragraph_first = 0
        for index in range(len(clusters) + 1):
            at_end = index == len(clusters)
            if not at_end and not clusters[index].is_break:
                continue
            start_offset = clusters[paragraph_first].start if paragraph_first < len(clusters) else len(text)
            end_offset = clusters[index].start if not at_end else len(text)
            direction = paragraph_direction(text[start_offset:end_offset])
            ranges = self._break_paragraph(clusters, paragraph_first, index, wrap_width, soft_wrap)
            for position, (first, end) in enumerate(ranges):
                closing = index if (not at_end and position == len(ranges) - 1) else None
                raw_lines.append((first, end, closing, direction))
            paragraph_first = index + 1

        widths: list[float] = []
        visible_ends: list[int] = []
        for first, end, _, _ in raw_lines:
            visible = end
            while visible > first and clusters[visible - 1].is_space:
                visible -= 1
            visible_ends.append(visible)
            widths.append(sum(c.advance for c in clusters[first:visible]))

        widest = max(widths, default=0.0)
        container_width = max_width if math.isfinite(max_width) else widest
        align = style.resolved_align()

        boxes: list[Rect] = [Rect(0.0, 0.0, 0.0, 0.0)] * len(text)
        lines: list[LineMetrics] = []
        for number, ((first, end, closing, direction), visible, width) in enumerate(
            zip(raw_lines, visible_ends, widths)
        ):
            top = number * line_height
            bottom = top + line_height
            left = _line_left(align, direction, container_width, width)

            x = 0.0
            last = closing + 1 if closing is not None else end
            for cluster in clusters[first:last]:
                if direction is ResolvedTextDirection.RTL:
                    box = Rect(left + width - x - cluster.advance, top, left + width - x, bottom)
                else:
                    box = Rect(left + x, top, left + x + cluster.advance, bottom)
                for offset in range(cluster.start, cluster.end):
                    boxes[offset] = box
                x += cluster.advance

            start_offset = clusters[first].start if first < len(clusters) else len(text)
            end_offset = clusters[last - 1].end if last > first else start_offset
            visible_offset = clusters[visible - 1].end if visible > first else start_offset
            lines.append(
                LineMetrics(
                    start=start_offset,
                    end=end_offset,
                    visible_end=visible_offset,
                    top=top,
                    bottom=bottom,
                    left=left,
                    width=width,
                    direction=direction,
                )
            )

        did_exceed_max_lines = len(lines) > max_lines
        if did_exceed_max_lines:
            lines = lines[:max(max_lines, 0)]

        overflow_width = any(line.width > max_width for line in lines)

        height = lines[-1].bottom if lines else 0.0
        kept_widest = max((line.width for line in lines), default=0.0)
        return TextLayoutInfo(
            text=text,
            lines=tuple(lines),
            boxes=tuple(boxes),
            size=Size(
                width=min(kept_widest, max_width) if math.isfinite(max_width) else kept_widest,
                height=height,
            ),
            max_width=max_width,
            has_visual_overflow=overflow_width or did_exceed_max_lines,
            did_exceed_max_lines=did_exceed_max_lines,
        )


def _line_left(
    align: TextAlign,
    direction: ResolvedTextDirection,
    container_width: float,
    width: float,
) -> float:
    slack = container_width - width
    if align is TextAlign.CENTER:
        return slack / 2
    if align is TextAlign.LEFT:
        return 0.0
    if align is TextAlign.RIGHT:
        return slack
    at_end = align is TextAlign.END
    rtl = direction is ResolvedTextDirection.RTL
    # START and JUSTIFY hug the paragraph's start edge; END hugs the other one.
    return slack if at_end != rtl else 0.0


class MonospaceTextMeasurer(TextMeasurer):
    """Fixed-advance metrics: every cluster is one cell, wide clusters two."""

    REFERENCE_FONT_SIZE = 16

    def __init__(
        self,
        *,
        advance: float = 8.0,
        line_height: float = 16.0,
        cache_size: int | None = None,
    ) -> None:
        super().__init__(cache_size=cache_size)
        self._advance = advance
        self._line_height = line_height

    def _scale(self, style: TextStyle) -> float:
        if style.font_size is None:
            return 1.0
        return style.font_size / self.REFERENCE_FONT_SIZE

    def line_height(self, style: TextStyle) -> float:
        return self._line_height * self._scale(style)

    def advance(self, cluster: str, style: TextStyle) -> float:
        cells = 2 if is_wide(cluster) else 1
        return self._advance * cells * self._scale(style)


class PygameTextMeasurer(TextMeasurer):
    """Glyph metrics from ``pygame.font``. Requires ``pygame.font.init()``."""

    def __init__(
        self,
        *,
        default_font: str | None = None,
        default_font_size: int | None = None,
        cache_size: int | None = None,
    ) -> None:
        super().__init__(cache_size=cache_size)
        self._default_font = default_font or Configuration.font()
        self._default_font_size = default_font_size or Configuration.font_size()
        self._fonts: dict[tuple[str, int, bool, bool], pygame.font.Font] = {}

    def font_for(self, style: TextStyle) -> pygame.font.Font:
        key = (
            style.font_name or self._default_font,
            style.font_size or self._default_font_size,
            bool(style.bold),
            bool(style.italic),
        )
        font = self._fonts.get(key)
        if font is None:
            font = self._load_font(*key)
            self._fonts[key] = font
        return font

    @staticmethod
    def _load_font(name: str, size: int, bold: bool, italic: bool) -> pygame.font.Font:
        if not pygame.font.get_init():
            pygame.font.init()
        if name.lower().endswith((".ttf", ".otf")):
            font = pygame.font.Font(name if name != "freesansbold.ttf" else None, size)
            font.set_bold(bold)
            font.set_italic(italic)
        else:
            font = pygame.font.SysFont(name, size, bold=bold, italic=italic)
        logger.debug("Loaded font %s size=%d bold=%s italic=%s", name, size, bold, italic)
        return font

    def line_height(self, style: TextStyle) -> float:
        return float(self.font_for(style).get_linesize())

    def advance(self, cluster: str, style: TextStyle) -> float:
        width, _ = self.font_for(style).size(cluster)
        return float(width)
