import time
from typing import Annotated

import numpy as np
import typer

from expandable_text.expandable import ExpandableText
from expandable_text.layout.measurer import MonospaceTextMeasurer
from expandable_text.layout.models import UNLIMITED
from expandable_text.utilities.logging import get_logger

logger = get_logger(__name__)

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. "
)
DEFAULT_ITEMS = 50
DEFAULT_CYCLES = 5
DEFAULT_FRAMES_PER_CYCLE = 30
DEFAULT_WIDTH = 320.0
DEFAULT_COLLAPSED_LINES = 3
FRAME_MS = 16.0


def bench_command(
    items: Annotated[int, typer.Option("--items")] = DEFAULT_ITEMS,
    cycles: Annotated[int, typer.Option("--cycles")] = DEFAULT_CYCLES,
    frames_per_cycle: Annotated[int, typer.Option("--frames-per-cycle")] = DEFAULT_FRAMES_PER_CYCLE,
    width: Annotated[float, typer.Option("--width")] = DEFAULT_WIDTH,
    collapsed_lines: Annotated[int, typer.Option("--collapsed-lines")] = DEFAULT_COLLAPSED_LINES,
) -> None:
    """Toggle many instances and report per-frame cost."""

    if items <= 0 or cycles <= 0 or frames_per_cycle <= 0:
        logger.error("--items, --cycles and --frames-per-cycle must be positive")
        raise typer.Exit(code=1)

    measurer = MonospaceTextMeasurer(cache_size=items * 4)
    instances = [
        ExpandableText(
            LOREM * (1 + index % 4),
            max_lines=collapsed_lines,
            measurer=measurer,
        )
        for index in range(items)
    ]
    for instance in instances:
        instance.measure(width)

    durations_ms: list[float] = []
    expanded = False
    for _ in range(cycles):
        expanded = not expanded
        for instance in instances:
            instance.update(max_lines=UNLIMITED if expanded else collapsed_lines)
        for _ in range(frames_per_cycle):
            start_ns = time.perf_counter_ns()
            for instance in instances:
                instance.advance(FRAME_MS)
                instance.measure(width)
            durations_ms.append((time.perf_counter_ns() - start_ns) / 1_000_000)

    samples = np.asarray(durations_ms)
    p50, p90, p99 = np.percentile(samples, [50, 90, 99])
    logger.info("Benchmarked %d frames across %d instances", samples.size, items)
    typer.echo(
        f"frames={samples.size} items={items} mean={samples.mean():.3f}ms "
        f"p50={p50:.3f}ms p90={p90:.3f}ms p99={p99:.3f}ms max={samples.max():.3f}ms"
    )
