"""Text that springs between a collapsed and an expanded line count.

:class:`ExpandableText` is recomputed on every frame by its host: call
:meth:`ExpandableText.advance` with the elapsed time, then
:meth:`ExpandableText.measure` with the available width, and draw the
returned frame. While the height animates the full text is drawn and clipped
to the animated height; the truncated text (with its ellipsis or trailing
content) replaces it only once the animation is nearly settled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Callable

import reactivex
from reactivex.abc import DisposableBase
from reactivex.subject import Subject

from expandable_text.animation.animator import HeightAnimator
from expandable_text.animation.spring import SpringSpec
from expandable_text.display.builder import (DEFAULT_ELLIPSIS, DisplayPayload,
                                             DisplayTextBuilder)
from expandable_text.display.trailing import TrailingContent
from expandable_text.fit.models import FitRequest
from expandable_text.fit.solver import FitSolver
from expandable_text.layout.container import (Constraints,
                                              StableHeightContainer)
from expandable_text.layout.measurer import PygameTextMeasurer, TextMeasurer
from expandable_text.layout.models import (INFINITY, UNLIMITED, Size,
                                           TextLayoutInfo)
from expandable_text.text.annotated import AnnotatedText
from expandable_text.text.direction import isolate, paragraph_direction
from expandable_text.text.style import Color, TextAlign, TextStyle
from expandable_text.utilities.env import Configuration
from expandable_text.utilities.logging import get_logger
from expandable_text.utilities.logging_control import get_logging_controller

logger = get_logger(__name__)
log_controller = get_logging_controller()


class TextOverflow(StrEnum):
    CLIP = "clip"
    ELLIPSIS = "ellipsis"
    VISIBLE = "visible"
    START_ELLIPSIS = "start_ellipsis"
    MIDDLE_ELLIPSIS = "middle_ellipsis"


SUPPORTED_OVERFLOWS = frozenset({TextOverflow.CLIP, TextOverflow.ELLIPSIS})


@dataclass(frozen=True)
class ExpandableTextParams:
    text: AnnotatedText
    min_lines: int = 1
    max_lines: int = UNLIMITED
    style: TextStyle = field(default_factory=TextStyle)
    soft_wrap: bool = True
    overflow: TextOverflow = TextOverflow.ELLIPSIS
    on_text_layout: Callable[[TextLayoutInfo], Any] | None = None
    animation_spec: SpringSpec | None = None
    trailing_content: TrailingContent | None = None
    locale: str | None = None
    ellipsis: str = DEFAULT_ELLIPSIS

    def __post_init__(self) -> None:
        if self.min_lines <= 0:
            raise ValueError("min_lines must be greater than 0")
        if self.max_lines <= 0:
            raise ValueError("max_lines must be greater than 0 or UNLIMITED")
        if self.max_lines != UNLIMITED and self.min_lines > self.max_lines:
            raise ValueError("min_lines must be less than or equal to max_lines")

    @property
    def effective_ellipsis(self) -> str:
        return "" if self.overflow is TextOverflow.CLIP else self.ellipsis


@dataclass(frozen=True)
class ExpandableTextFrame:
    """Everything the host needs to draw one frame."""

    size: Size
    content_size: Size
    animated_height: float
    target_height: float
    line_height: float
    showing_truncation: bool
    payload: DisplayPayload
    full_layout: TextLayoutInfo
    content_layout: TextLayoutInfo


@dataclass
class ExpandableTextState:
    """Retained state for one ``(text, style, width)`` key."""

    key: tuple[AnnotatedText, TextStyle, float]
    animator: HeightAnimator
    container: StableHeightContainer
    showing_truncation: bool = False
    presentation_key: tuple[Any, ...] | None = None
    payload: DisplayPayload | None = None
    content_layout: TextLayoutInfo | None = None

    @classmethod
    def create(
        cls,
        key: tuple[AnnotatedText, TextStyle, float],
        height: float,
        spec: SpringSpec | None,
        snap_epsilon: float,
    ) -> "ExpandableTextState":
        animator = HeightAnimator(initial=height, spec=spec, snap_epsilon=snap_epsilon)
        return cls(key=key, animator=animator, container=StableHeightContainer(animator))


STYLE_OVERRIDES = (
    "color",
    "font_size",
    "font_name",
    "bold",
    "italic",
    "underline",
    "letter_spacing",
    "text_align",
    "line_height",
)
TUNING_OPTIONS = ("snap_epsilon", "near_end_tolerance_dp", "density")


def _style_overrides(
    *,
    color: Color | None = None,
    font_size: int | None = None,
    font_name: str | None = None,
    bold: bool | None = None,
    italic: bool | None = None,
    underline: bool | None = None,
    letter_spacing: float | None = None,
    text_align: TextAlign | None = None,
    line_height: float | None = None,
) -> TextStyle:
    return TextStyle(
        font_name=font_name,
        font_size=font_size,
        color=color,
        line_height=line_height,
        letter_spacing=letter_spacing,
        text_align=text_align,
        bold=bold,
        italic=italic,
        underline=underline,
    )


def _resolve_snap_epsilon(snap_epsilon: float | None) -> float:
    value = Configuration.snap_epsilon() if snap_epsilon is None else snap_epsilon
    if value < 0:
        raise ValueError("snap_epsilon must not be negative")
    return value


def _resolve_near_end_tolerance(tolerance_dp: float | None, density: float | None) -> float:
    if tolerance_dp is None and density is None:
        return Configuration.near_end_tolerance_px()
    if tolerance_dp is None:
        tolerance_dp = Configuration.near_end_tolerance_dp()
    if density is None:
        density = Configuration.density()
    if tolerance_dp < 0 or density <= 0:
        raise ValueError("near_end_tolerance_dp must not be negative and density must be positive")
    return tolerance_dp * density


class ExpandableText:
    """Animated multi-line text with boundary-aware truncation.

    Raises ``ValueError`` for invalid line counts before any layout work.
    Unsupported overflow modes are logged and treated as ``ELLIPSIS``.
    """

    def __init__(
        self,
        text: str | AnnotatedText,
        *,
        min_lines: int = 1,
        max_lines: int = UNLIMITED,
        style: TextStyle | None = None,
        color: Color | None = None,
        font_size: int | None = None,
        font_name: str | None = None,
        bold: bool | None = None,
        italic: bool | None = None,
        underline: bool | None = None,
        letter_spacing: float | None = None,
        text_align: TextAlign | None = None,
        line_height: float | None = None,
        soft_wrap: bool = True,
        overflow: TextOverflow = TextOverflow.ELLIPSIS,
        on_text_layout: Callable[[TextLayoutInfo], Any] | None = None,
        animation_spec: SpringSpec | None = None,
        trailing_content: TrailingContent | None = None,
        measurer: TextMeasurer | None = None,
        locale: str | None = None,
        ellipsis: str | None = None,
        snap_epsilon: float | None = None,
        near_end_tolerance_dp: float | None = None,
        density: float | None = None,
    ) -> None:
        overrides = _style_overrides(
            color=color,
            font_size=font_size,
            font_name=font_name,
            bold=bold,
            italic=italic,
            underline=underline,
            letter_spacing=letter_spacing,
            text_align=text_align,
            line_height=line_height,
        )
        params = ExpandableTextParams(
            text=AnnotatedText.of(text),
            min_lines=min_lines,
            max_lines=max_lines,
            style=(style or TextStyle()).merge(overrides),
            soft_wrap=soft_wrap,
            overflow=overflow,
            on_text_layout=on_text_layout,
            animation_spec=animation_spec,
            trailing_content=trailing_content,
            locale=locale if locale is not None else Configuration.locale(),
            ellipsis=DEFAULT_ELLIPSIS if ellipsis is None else ellipsis,
        )
        self.snap_epsilon = _resolve_snap_epsilon(snap_epsilon)
        self._near_end_tolerance_dp = near_end_tolerance_dp
        self._density = density
        self.near_end_tolerance = _resolve_near_end_tolerance(near_end_tolerance_dp, density)
        self.measurer = measurer or PygameTextMeasurer()
        self.layouts: Subject[TextLayoutInfo] = Subject()
        self._solver = FitSolver()
        self._state: ExpandableTextState | None = None
        self.params = self._coerce(params)

    @staticmethod
    def _coerce(params: ExpandableTextParams) -> ExpandableTextParams:
        if params.overflow in SUPPORTED_OVERFLOWS:
            return params
        logger.warning(
            "Unsupported overflow %s; falling back to %s",
            params.overflow,
            TextOverflow.ELLIPSIS,
        )
        return replace(params, overflow=TextOverflow.ELLIPSIS)

    def update(self, **changes: Any) -> None:
        """Replace parameters, e.g. ``update(max_lines=UNLIMITED)`` to expand.

        Accepts the same keywords as the constructor except ``measurer``.
        Style overrides such as ``color`` or ``bold`` are merged over ``style``.
        """

        tuning = {name: changes.pop(name) for name in TUNING_OPTIONS if name in changes}
        overrides = {name: changes.pop(name) for name in STYLE_OVERRIDES if name in changes}
        if "text" in changes:
            changes["text"] = AnnotatedText.of(changes["text"])
        if "style" in changes and changes["style"] is None:
            changes["style"] = TextStyle()
        if "ellipsis" in changes and changes["ellipsis"] is None:
            changes["ellipsis"] = DEFAULT_ELLIPSIS
        if "locale" in changes and changes["locale"] is None:
            changes["locale"] = Configuration.locale()
        if overrides:
            base = changes.get("style", self.params.style)
            changes["style"] = base.merge(_style_overrides(**overrides))
        params = self._coerce(replace(self.params, **changes))

        snap_epsilon = self.snap_epsilon
        if "snap_epsilon" in tuning:
            snap_epsilon = _resolve_snap_epsilon(tuning["snap_epsilon"])
        tolerance_dp = tuning.get("near_end_tolerance_dp", self._near_end_tolerance_dp)
        density = tuning.get("density", self._density)
        near_end_tolerance = _resolve_near_end_tolerance(tolerance_dp, density)

        self.params = params
        self.snap_epsilon = snap_epsilon
        self._near_end_tolerance_dp = tolerance_dp
        self._density = density
        self.near_end_tolerance = near_end_tolerance
        if self._state is not None:
            self._state.animator.snap_epsilon = snap_epsilon

    @property
    def state(self) -> ExpandableTextState | None:
        return self._state

    @property
    def animator(self) -> HeightAnimator | None:
        return self._state.animator if self._state is not None else None

    @property
    def line_height(self) -> float:
        style = self.params.style
        return style.line_height or self.measurer.line_height(style)

    def advance(self, elapsed_ms: float) -> None:
        if self._state is not None:
            self._state.animator.advance(elapsed_ms)

    def bind(self, ticks: reactivex.Observable[float]) -> DisposableBase:
        return ticks.subscribe(on_next=self.advance)

    def target_height(self, layout: TextLayoutInfo) -> float:
        params = self.params
        if params.max_lines >= layout.line_count:
            requested = layout.size.height
        else:
            requested = layout.get_line_bottom(params.max_lines - 1)
        return max(requested, params.min_lines * self.line_height)

    def measure(self, max_width: float = INFINITY) -> ExpandableTextFrame:
        params = self.params
        style = params.style
        full = self.measurer.measure(
            params.text, style, max_width, UNLIMITED, params.soft_wrap
        )
        self._publish_layout(full)

        target = self.target_height(full)
        state = self._state_for((params.text, style, max_width), target)
        animator = state.animator

        wants_truncation = (
            params.max_lines != UNLIMITED
            and (full.line_count > params.max_lines or full.has_visual_overflow)
            and params.overflow in SUPPORTED_OVERFLOWS
        )
        near_end = animator.at_rest or animator.distance_to_target() <= self.near_end_tolerance
        showing = wants_truncation and near_end
        if showing != state.showing_truncation:
            logger.debug(
                "Truncated presentation %s at height %.2f (target %.2f)",
                "on" if showing else "off",
                animator.value,
                target,
            )
            state.showing_truncation = showing

        self._refresh_presentation(state, full, max_width)
        assert state.payload is not None and state.content_layout is not None

        content_size = state.content_layout.size
        size = state.container.measure(Constraints(max_width=max_width), content_size)
        log_controller.log(
            key="expandable_text.frame",
            logger=logger,
            level=logging.DEBUG,
            msg="frame height=%.2f target=%.2f lines=%d truncated=%s",
            args=(size.height, target, full.line_count, showing),
        )
        return ExpandableTextFrame(
            size=size,
            content_size=content_size,
            animated_height=animator.value,
            target_height=target,
            line_height=self.line_height,
            showing_truncation=showing,
            payload=state.payload,
            full_layout=full,
            content_layout=state.content_layout,
        )

    def _publish_layout(self, layout: TextLayoutInfo) -> None:
        self.layouts.on_next(layout)
        if self.params.on_text_layout is not None:
            self.params.on_text_layout(layout)

    def _state_for(
        self, key: tuple[AnnotatedText, TextStyle, float], target: float
    ) -> ExpandableTextState:
        state = self._state
        if state is None or state.key != key:
            if state is not None:
                logger.debug("Input changed; recreating state at height %.2f", target)
            state = ExpandableTextState.create(
                key, target, self.params.animation_spec, self.snap_epsilon
            )
            self._state = state
            return state

        if self.params.animation_spec is not None:
            state.animator.update_spec(self.params.animation_spec)
        state.animator.animate_to(target)
        return state

    def _trailing_size(self, max_width: float) -> Size | None:
        trailing = self.params.trailing_content
        if trailing is None:
            return None
        return trailing.measure(max_width, self.line_height)

    def _ellipsis_width(self, ellipsis: str, direction_source: str) -> float:
        if not ellipsis:
            return 0.0
        shown = isolate(ellipsis, paragraph_direction(direction_source))
        return self.measurer.measure(shown, self.params.style, soft_wrap=False).size.width

    def _refresh_presentation(
        self, state: ExpandableTextState, full: TextLayoutInfo, max_width: float
    ) -> None:
        params = self.params
        presentation_key = (
            state.showing_truncation,
            params.max_lines,
            params.soft_wrap,
            params.overflow,
            params.ellipsis,
            params.trailing_content,
            params.locale,
        )
        if presentation_key == state.presentation_key:
            return

        trailing_size = self._trailing_size(max_width)
        builder = DisplayTextBuilder(params.effective_ellipsis)
        if state.showing_truncation:
            ellipsis_width = self._ellipsis_width(params.effective_ellipsis, full.text)
            request = FitRequest(
                max_lines=params.max_lines,
                min_lines=params.min_lines,
                available_width=max_width,
                reserved_width=ellipsis_width + (trailing_size.width if trailing_size else 0.0),
                locale=params.locale,
            )
            payload = builder.build(params.text, self._solver.solve(full, request), trailing_size)
            max_lines = params.max_lines
        else:
            payload = builder.build(params.text, None, trailing_size)
            max_lines = UNLIMITED

        state.payload = payload
        state.content_layout = self.measurer.measure(
            payload.text, params.style, max_width, max_lines, params.soft_wrap, trailing_size
        )
        state.presentation_key = presentation_key
