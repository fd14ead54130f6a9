"""Assembling the text handed to the renderer."""

from __future__ import annotations

from dataclasses import dataclass

from expandable_text.fit.models import FitResult
from expandable_text.layout.measurer import PLACEHOLDER_CHAR
from expandable_text.layout.models import Size
from expandable_text.text.annotated import AnnotatedText
from expandable_text.text.direction import isolate

DEFAULT_ELLIPSIS = " \u2026"
TRAILING_PLACEHOLDER_ID = "expandable_text_trailing"


@dataclass(frozen=True)
class Placeholder:
    """Inline slot reserved for trailing content, at ``index`` in the display text."""

    id: str
    width: float
    height: float
    index: int

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)


@dataclass(frozen=True)
class DisplayPayload:
    text: AnnotatedText
    fit: FitResult | None = None
    placeholder: Placeholder | None = None

    @property
    def truncated(self) -> bool:
        return self.fit is not None and self.fit.truncated

    @property
    def plain_text(self) -> str:
        return self.text.text


def _kept_prefix(original: AnnotatedText, fit: FitResult, ellipsis: str) -> AnnotatedText:
    return original.subsequence(0, fit.cut_index) + isolate(ellipsis, fit.direction)


def build_plain(
    original: str | AnnotatedText,
    fit: FitResult | None,
    ellipsis: str = DEFAULT_ELLIPSIS,
) -> DisplayPayload:
    source = AnnotatedText.of(original)
    if fit is None or not fit.truncated:
        return DisplayPayload(text=source, fit=fit)
    return DisplayPayload(text=_kept_prefix(source, fit, ellipsis), fit=fit)


def build_with_placeholder(
    original: str | AnnotatedText,
    fit: FitResult | None,
    ellipsis: str,
    width: float,
    height: float,
    placeholder_id: str = TRAILING_PLACEHOLDER_ID,
) -> DisplayPayload:
    """Like :func:`build_plain`, followed by a placeholder marker for trailing content.

    The marker is appended even when nothing is cut, so trailing content
    always has a slot.
    """

    source = AnnotatedText.of(original)
    if fit is None or not fit.truncated:
        body = source
    else:
        body = _kept_prefix(source, fit, ellipsis)
    placeholder = Placeholder(
        id=placeholder_id, width=width, height=height, index=len(body)
    )
    return DisplayPayload(text=body + PLACEHOLDER_CHAR, fit=fit, placeholder=placeholder)


class DisplayTextBuilder:
    """Picks the build mode from whether trailing content is present."""

    def __init__(self, ellipsis: str = DEFAULT_ELLIPSIS) -> None:
        self.ellipsis = ellipsis

    def build(
        self,
        original: str | AnnotatedText,
        fit: FitResult | None,
        trailing: Size | None = None,
    ) -> DisplayPayload:
        if trailing is None:
            return build_plain(original, fit, self.ellipsis)
        return build_with_placeholder(
            original, fit, self.ellipsis, trailing.width, trailing.height
        )
