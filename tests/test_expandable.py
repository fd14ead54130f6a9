"""End-to-end tests for the expandable text state machine."""

from __future__ import annotations

import logging

import pytest
from reactivex.subject import Subject

import expandable_text.expandable as expandable_module
from expandable_text.animation.spring import SpringSpec
from expandable_text.display.builder import DEFAULT_ELLIPSIS
from expandable_text.display.trailing import TextTrailingContent
from expandable_text.expandable import ExpandableText, TextOverflow
from expandable_text.layout.measurer import (PLACEHOLDER_CHAR,
                                             MonospaceTextMeasurer)
from expandable_text.layout.models import UNLIMITED, TextLayoutInfo
from expandable_text.text.style import Color, TextStyle

WORDS = "Word1 Word2 Word3 Word4 Word5"
WIDTH = 100.0
LINE_HEIGHT = 16.0
FRAME_MS = 16.0


def _make(measurer: MonospaceTextMeasurer, **kwargs) -> ExpandableText:
    kwargs.setdefault("snap_epsilon", 0.5)
    kwargs.setdefault("near_end_tolerance_dp", 3.0)
    kwargs.setdefault("density", 1.0)
    kwargs.setdefault("animation_spec", SpringSpec())
    text = kwargs.pop("text", WORDS)
    return ExpandableText(text, measurer=measurer, **kwargs)


def _run(expandable: ExpandableText, frames: int, width: float = WIDTH):
    samples = []
    for _ in range(frames):
        expandable.advance(FRAME_MS)
        samples.append(expandable.measure(width))
    return samples


class RecordingMeasurer(MonospaceTextMeasurer):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def measure(self, *args, **kwargs) -> TextLayoutInfo:
        self.calls += 1
        return super().measure(*args, **kwargs)


class TestValidation:
    """Group configuration tests so invalid line counts fail before any layout work."""

    @pytest.mark.parametrize(
        ("min_lines", "max_lines", "message"),
        [
            (0, 3, "min_lines must be greater than 0"),
            (1, 0, "max_lines must be greater than 0 or UNLIMITED"),
            (3, 2, "min_lines must be less than or equal to max_lines"),
        ],
    )
    def test_invalid_line_counts_raise(self, min_lines: int, max_lines: int, message: str) -> None:
        """Verify each precondition violation raises its descriptive error without measuring."""
        measurer = RecordingMeasurer()

        with pytest.raises(ValueError, match=message):
            ExpandableText(WORDS, min_lines=min_lines, max_lines=max_lines, measurer=measurer)

        assert measurer.calls == 0

    def test_update_revalidates(self, measurer: MonospaceTextMeasurer) -> None:
        """Confirm updates are validated like construction."""
        expandable = _make(measurer, min_lines=2, max_lines=3)

        with pytest.raises(ValueError):
            expandable.update(max_lines=1)

    def test_unlimited_allows_any_min_lines(self, measurer: MonospaceTextMeasurer) -> None:
        """Check min_lines is unconstrained when max_lines is unlimited."""
        expandable = _make(measurer, min_lines=40, max_lines=UNLIMITED)

        assert expandable.params.min_lines == 40

    @pytest.mark.parametrize(
        "overflow",
        [TextOverflow.VISIBLE, TextOverflow.START_ELLIPSIS, TextOverflow.MIDDLE_ELLIPSIS],
    )
    def test_unsupported_overflow_is_logged_and_coerced(
        self,
        monkeypatch: pytest.MonkeyPatch,
        measurer: MonospaceTextMeasurer,
        stub_logger,
        overflow: TextOverflow,
    ) -> None:
        """Verify unsupported overflow modes warn and fall back to ellipsis instead of failing."""
        monkeypatch.setattr(expandable_module, "logger", stub_logger)

        expandable = _make(measurer, overflow=overflow)

        assert expandable.params.overflow is TextOverflow.ELLIPSIS
        assert [record[0] for record in stub_logger.records] == [logging.WARNING]

    def test_style_overrides_merge_over_style(self, measurer: MonospaceTextMeasurer) -> None:
        """Ensure explicit parameters win over the base style."""
        expandable = _make(measurer, style=TextStyle(font_size=16, bold=False), bold=True)

        assert expandable.params.style == TextStyle(font_size=16, bold=True)

    def test_update_merges_style_overrides(self, measurer: MonospaceTextMeasurer) -> None:
        """Confirm update accepts the same style overrides as the constructor."""
        expandable = _make(measurer, style=TextStyle(font_size=16, bold=False))

        expandable.update(color=Color.black(), bold=True)

        assert expandable.params.style == TextStyle(font_size=16, bold=True, color=Color.black())

    def test_update_overrides_win_over_new_style(self, measurer: MonospaceTextMeasurer) -> None:
        """Check overrides passed alongside a new style are merged over that style."""
        expandable = _make(measurer, style=TextStyle(font_size=16))

        expandable.update(style=TextStyle(font_size=20, italic=False), italic=True)

        assert expandable.params.style == TextStyle(font_size=20, italic=True)

    def test_update_applies_animation_tuning(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify snap epsilon and near-end tolerance can be changed on a live instance."""
        expandable = _make(measurer, max_lines=1)
        expandable.measure(WIDTH)

        expandable.update(snap_epsilon=2.0, near_end_tolerance_dp=4.0, density=2.0)

        assert expandable.snap_epsilon == 2.0
        assert expandable.animator is not None
        assert expandable.animator.snap_epsilon == 2.0
        assert expandable.near_end_tolerance == 8.0

    def test_near_end_tolerance_defaults_to_environment(
        self, measurer: MonospaceTextMeasurer, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Verify the near-end tolerance comes from the configured dp and density when not given."""
        monkeypatch.setenv("EXPANDABLE_TEXT_NEAR_END_TOLERANCE_DP", "4")
        monkeypatch.setenv("EXPANDABLE_TEXT_DENSITY", "2.5")

        expandable = ExpandableText(WORDS, measurer=measurer)

        assert expandable.near_end_tolerance == 10.0

    def test_update_rejects_negative_snap_epsilon(self, measurer: MonospaceTextMeasurer) -> None:
        """Ensure a bad tuning value fails without changing the instance."""
        expandable = _make(measurer, max_lines=1)

        with pytest.raises(ValueError, match="snap_epsilon must not be negative"):
            expandable.update(max_lines=2, snap_epsilon=-1.0)

        assert expandable.snap_epsilon == 0.5
        assert expandable.params.max_lines == 1


class TestHeights:
    """Group height tests so the reported size follows the line-count policy."""

    def test_min_lines_pad_short_text(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify min_lines=3 gives one-line text three lines of height."""
        expandable = _make(measurer, text="Hello", min_lines=3, max_lines=3)

        frame = expandable.measure(200)

        assert frame.size.height == 3 * LINE_HEIGHT
        assert frame.content_size.height == LINE_HEIGHT
        assert not frame.showing_truncation

    def test_collapsed_start_shows_truncation_immediately(self, measurer: MonospaceTextMeasurer) -> None:
        """Confirm the first frame starts at rest on the collapsed height with the ellipsis."""
        expandable = _make(measurer, max_lines=1)

        frame = expandable.measure(WIDTH)

        assert frame.size.height == LINE_HEIGHT
        assert frame.showing_truncation
        assert frame.payload.plain_text == "Word1" + DEFAULT_ELLIPSIS
        assert frame.content_layout.line_count == 1

    def test_expanding_animates_to_full_height(self, measurer: MonospaceTextMeasurer) -> None:
        """Check expanding shows the full text at once and grows the height smoothly."""
        expandable = _make(measurer, max_lines=1)
        expandable.measure(WIDTH)

        expandable.update(max_lines=UNLIMITED)
        first = expandable.measure(WIDTH)
        frames = _run(expandable, 120)

        assert first.size.height == LINE_HEIGHT
        assert first.payload.plain_text == WORDS
        assert LINE_HEIGHT < frames[0].size.height < 3 * LINE_HEIGHT
        assert frames[-1].size.height == 3 * LINE_HEIGHT
        assert not any(frame.showing_truncation for frame in frames)

    def test_collapse_swaps_text_only_near_the_end(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify the ellipsis appears only within the near-end tolerance of the collapsed height."""
        expandable = _make(measurer, max_lines=UNLIMITED)
        expandable.measure(WIDTH)

        expandable.update(max_lines=1)
        frames = _run(expandable, 120)

        assert any(not frame.showing_truncation and frame.size.height < 3 * LINE_HEIGHT for frame in frames)
        for frame in frames:
            if frame.showing_truncation:
                assert abs(frame.size.height - LINE_HEIGHT) <= 3.0
                assert frame.payload.truncated
            else:
                assert frame.payload.plain_text == WORDS
        assert frames[-1].showing_truncation
        assert frames[-1].size.height == LINE_HEIGHT

    def test_rapid_toggles_converge_continuously(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify ten toggles 50ms apart never jump and settle on the last request."""
        expandable = _make(measurer, max_lines=2)
        expandable.measure(WIDTH)
        heights = [2 * LINE_HEIGHT]
        elapsed = 0.0
        next_toggle = 50.0
        toggles = 0
        expanded = False
        while elapsed < 3000.0:
            expandable.advance(FRAME_MS)
            elapsed += FRAME_MS
            if toggles < 10 and elapsed >= next_toggle:
                expanded = not expanded
                expandable.update(max_lines=UNLIMITED if expanded else 2)
                toggles += 1
                next_toggle += 50.0
            heights.append(expandable.measure(WIDTH).size.height)

        final = expandable.measure(WIDTH)
        jumps = [abs(b - a) for a, b in zip(heights, heights[1:])]
        assert toggles == 10
        assert max(jumps) < LINE_HEIGHT
        assert final.size.height == 2 * LINE_HEIGHT
        assert final.showing_truncation
        assert expandable.animator is not None and expandable.animator.at_rest

    def test_width_change_recreates_state_without_animating(self, measurer: MonospaceTextMeasurer) -> None:
        """Check a new width starts fresh at the new target instead of animating."""
        expandable = _make(measurer, max_lines=UNLIMITED)
        expandable.measure(WIDTH)
        state = expandable.state

        frame = expandable.measure(60)

        assert expandable.state is not state
        assert expandable.animator is not None and expandable.animator.at_rest
        assert frame.size.height == frame.full_layout.size.height


class TestPresentation:
    """Group presentation tests so overflow modes and trailing content render as asked."""

    def test_clip_mode_has_no_ellipsis(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify clip mode cuts at the natural line end without an ellipsis."""
        expandable = _make(measurer, max_lines=1, overflow=TextOverflow.CLIP)

        frame = expandable.measure(WIDTH)

        assert frame.payload.plain_text == "Word1 Word2"

    def test_unlimited_lines_never_show_truncation(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify expanded text stays whole even when an unwrapped line overflows the width."""
        text = "aaaaaaaaaaaa\nb"
        expandable = _make(measurer, text=text, max_lines=UNLIMITED, soft_wrap=False)

        frame = expandable.measure(40)

        assert frame.full_layout.has_visual_overflow
        assert not frame.showing_truncation
        assert not frame.payload.truncated
        assert frame.payload.plain_text == text

    def test_trailing_content_reserves_space(self, measurer: MonospaceTextMeasurer) -> None:
        """Confirm trailing content width is reserved next to the ellipsis on the last line."""
        trailing = TextTrailingContent(" more", measurer=measurer)
        expandable = _make(measurer, max_lines=1, trailing_content=trailing)

        frame = expandable.measure(WIDTH)

        assert frame.payload.plain_text == "Word1" + DEFAULT_ELLIPSIS + PLACEHOLDER_CHAR
        assert frame.payload.placeholder is not None
        assert frame.payload.placeholder.width == 40
        assert frame.content_layout.line_count == 1
        assert frame.content_layout.size.width <= WIDTH

    def test_expanded_text_keeps_trailing_slot(self, measurer: MonospaceTextMeasurer) -> None:
        """Check the trailing slot follows the full text when nothing is cut."""
        trailing = TextTrailingContent(" less", measurer=measurer)
        expandable = _make(measurer, max_lines=UNLIMITED, trailing_content=trailing)

        frame = expandable.measure(WIDTH)

        assert frame.payload.plain_text == WORDS + PLACEHOLDER_CHAR

    def test_layout_observers_see_full_layout(self, measurer: MonospaceTextMeasurer) -> None:
        """Verify callbacks and subscribers get the unclipped layout even while truncated."""
        received: list[TextLayoutInfo] = []
        published: list[TextLayoutInfo] = []
        expandable = _make(measurer, max_lines=1, on_text_layout=received.append)
        expandable.layouts.subscribe(published.append)

        frame = expandable.measure(WIDTH)

        assert received == published == [frame.full_layout]
        assert frame.full_layout.line_count == 3

    def test_bind_drives_animation(self, measurer: MonospaceTextMeasurer) -> None:
        """Ensure frame ticks from an observable advance the height."""
        expandable = _make(measurer, max_lines=1)
        expandable.measure(WIDTH)
        ticks: Subject[float] = Subject()
        subscription = expandable.bind(ticks)

        expandable.update(max_lines=UNLIMITED)
        expandable.measure(WIDTH)
        ticks.on_next(FRAME_MS)
        subscription.dispose()

        assert expandable.measure(WIDTH).size.height > LINE_HEIGHT
