from typing import Annotated

import typer

from expandable_text.expandable import ExpandableText
from expandable_text.layout.measurer import MonospaceTextMeasurer
from expandable_text.layout.models import UNLIMITED
from expandable_text.utilities.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TEXT = (
    "Word1 Word2 Word3 Word4 Word5 Word6 Word7 Word8 Word9 Word10 "
    "Word11 Word12 Word13 Word14 Word15"
)
DEFAULT_WIDTH = 120.0
DEFAULT_COLLAPSED_LINES = 2
DEFAULT_TOGGLES = 10
DEFAULT_TOGGLE_EVERY_MS = 50.0
DEFAULT_FRAME_MS = 16.0
DEFAULT_SETTLE_MS = 1000.0


def trace_command(
    text: Annotated[str, typer.Option("--text")] = DEFAULT_TEXT,
    width: Annotated[float, typer.Option("--width", help="Available width in px")] = DEFAULT_WIDTH,
    collapsed_lines: Annotated[
        int, typer.Option("--collapsed-lines", help="max_lines while collapsed")
    ] = DEFAULT_COLLAPSED_LINES,
    toggles: Annotated[int, typer.Option("--toggles")] = DEFAULT_TOGGLES,
    toggle_every_ms: Annotated[float, typer.Option("--toggle-every-ms")] = DEFAULT_TOGGLE_EVERY_MS,
    frame_ms: Annotated[float, typer.Option("--frame-ms")] = DEFAULT_FRAME_MS,
    settle_ms: Annotated[
        float, typer.Option("--settle-ms", help="Time to keep stepping after the last toggle")
    ] = DEFAULT_SETTLE_MS,
) -> None:
    """Print the animated height frame by frame while max_lines toggles."""

    if collapsed_lines <= 0 or frame_ms <= 0:
        logger.error("--collapsed-lines and --frame-ms must be positive")
        raise typer.Exit(code=1)

    expandable = ExpandableText(
        text, max_lines=collapsed_lines, measurer=MonospaceTextMeasurer()
    )
    frame = expandable.measure(width)
    typer.echo(
        f"{0.0:8.1f}ms height={frame.size.height:7.2f} "
        f"target={frame.target_height:7.2f} truncated={frame.showing_truncation} "
        f"text={frame.payload.plain_text!r}"
    )

    expanded = False
    toggles_done = 0
    next_toggle = toggle_every_ms
    elapsed = 0.0
    total = toggles * toggle_every_ms + settle_ms
    while elapsed < total:
        expandable.advance(frame_ms)
        elapsed += frame_ms
        while toggles_done < toggles and elapsed >= next_toggle:
            expanded = not expanded
            expandable.update(max_lines=UNLIMITED if expanded else collapsed_lines)
            toggles_done += 1
            next_toggle += toggle_every_ms
        frame = expandable.measure(width)
        typer.echo(
            f"{elapsed:8.1f}ms height={frame.size.height:7.2f} "
            f"target={frame.target_height:7.2f} truncated={frame.showing_truncation} "
            f"text={frame.payload.plain_text!r}"
        )
