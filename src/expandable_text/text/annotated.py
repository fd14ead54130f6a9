from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from expandable_text.text.style import SpanStyle


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    style: SpanStyle


@dataclass(frozen=True)
class AnnotatedText:
    """Plain text plus styled ranges over it.

    Spans belong to the original text: slicing keeps the ones that intersect
    the kept range (clipped and rebased) and never recomputes them.
    """

    text: str
    spans: tuple[Span, ...] = ()

    def __post_init__(self) -> None:
        length = len(self.text)
        for span in self.spans:
            if not 0 <= span.start <= span.end <= length:
                raise ValueError(
                    f"Span {span.start}..{span.end} is outside text of length {length}"
                )

    @classmethod
    def of(cls, value: "str | AnnotatedText") -> "AnnotatedText":
        if isinstance(value, AnnotatedText):
            return value
        return cls(value)

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def __add__(self, other: "str | AnnotatedText") -> "AnnotatedText":
        right = AnnotatedText.of(other)
        offset = len(self.text)
        shifted = tuple(
            Span(span.start + offset, span.end + offset, span.style)
            for span in right.spans
        )
        return AnnotatedText(self.text + right.text, self.spans + shifted)

    def subsequence(self, start: int, end: int) -> "AnnotatedText":
        start = max(0, min(start, len(self.text)))
        end = max(start, min(end, len(self.text)))
        kept: list[Span] = []
        for span in self.spans:
            lo = max(span.start, start)
            hi = min(span.end, end)
            # Zero-length spans survive only when they sit inside the range.
            if lo < hi or (span.start == span.end and start <= span.start < end):
                kept.append(Span(lo - start, hi - start, span.style))
        return AnnotatedText(self.text[start:end], tuple(kept))

    def with_style(self, style: SpanStyle, start: int = 0, end: int | None = None) -> "AnnotatedText":
        stop = len(self.text) if end is None else end
        return AnnotatedText(self.text, self.spans + (Span(start, stop, style),))

    def style_runs(self, start: int, end: int) -> Iterator[tuple[int, int, SpanStyle | None]]:
        """Yield ``(run_start, run_end, style)`` runs covering ``start..end``.

        Overlapping spans fold left to right: later spans win per field.
        """

        cuts = {start, end}
        for span in self.spans:
            if span.start < end and span.end > start:
                cuts.add(max(span.start, start))
                cuts.add(min(span.end, end))
        ordered = sorted(cuts)
        for run_start, run_end in zip(ordered, ordered[1:]):
            yield run_start, run_end, self.style_at(run_start)

    def style_at(self, index: int) -> SpanStyle | None:
        merged: SpanStyle | None = None
        for span in self.spans:
            if span.start <= index < span.end:
                merged = span.style if merged is None else _fold(merged, span.style)
        return merged


def _fold(base: SpanStyle, top: SpanStyle) -> SpanStyle:
    return SpanStyle(
        color=top.color if top.color is not None else base.color,
        bold=top.bold if top.bold is not None else base.bold,
        italic=top.italic if top.italic is not None else base.italic,
        underline=top.underline if top.underline is not None else base.underline,
        font_size=top.font_size if top.font_size is not None else base.font_size,
    )
