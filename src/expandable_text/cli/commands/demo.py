from typing import Annotated

import pygame
import typer

from expandable_text.display.trailing import TextTrailingContent
from expandable_text.expandable import ExpandableText
from expandable_text.layout.measurer import PygameTextMeasurer
from expandable_text.layout.models import UNLIMITED
from expandable_text.renderer import ExpandableTextRenderer
from expandable_text.text.annotated import AnnotatedText
from expandable_text.text.style import Color, SpanStyle, TextStyle
from expandable_text.utilities.env import Configuration
from expandable_text.utilities.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WIDTH = 480
DEFAULT_HEIGHT = 640
DEFAULT_COLLAPSED_LINES = 2
DEFAULT_FPS = 60
MARGIN = 16
GAP = 24
BACKGROUND = (250, 250, 250)
MORE_LABEL = " more"
LESS_LABEL = " less"

PARAGRAPHS = (
    AnnotatedText(
        "Tap any paragraph to expand it. The height springs open while the "
        "full text is clipped, and the ellipsis only comes back once the "
        "collapse has nearly settled."
    ).with_style(SpanStyle(bold=True), 0, 25),
    AnnotatedText(
        "Supercalifragilisticexpialidocious is a single unbreakable token, so "
        "narrow widths fall back to cutting between characters."
    ),
    AnnotatedText(
        "مرحبا بالعالم. هذا نص طويل من اليمين إلى اليسار يوضح كيف تبقى "
        "علامة الحذف معزولة عن النص المحيط بها عند الاقتطاع."
    ),
    AnnotatedText(
        "短い行と長い行が混在する日本語のテキストは単語の区切りがないため、"
        "書記素の境界で切り詰められます。"
    ),
)


def demo_command(
    width: Annotated[int, typer.Option("--width")] = DEFAULT_WIDTH,
    height: Annotated[int, typer.Option("--height")] = DEFAULT_HEIGHT,
    collapsed_lines: Annotated[int, typer.Option("--collapsed-lines")] = DEFAULT_COLLAPSED_LINES,
    fps: Annotated[int, typer.Option("--fps")] = DEFAULT_FPS,
    frames: Annotated[
        int | None, typer.Option("--frames", help="Stop after this many frames")
    ] = None,
) -> None:
    """Open a window with expandable paragraphs; click one to toggle it."""

    if collapsed_lines <= 0:
        logger.error("--collapsed-lines must be positive")
        raise typer.Exit(code=1)

    pygame.init()
    window = pygame.display.set_mode((width, height))
    pygame.display.set_caption("expandable-text")
    clock = pygame.time.Clock()

    measurer = PygameTextMeasurer()
    style = TextStyle(
        font_name=Configuration.font(),
        font_size=Configuration.font_size(),
        color=Color.black(),
    )
    more = TextTrailingContent(MORE_LABEL, TextStyle(color=Color.link()), measurer)
    less = TextTrailingContent(LESS_LABEL, TextStyle(color=Color.link()), measurer)
    renderers = [
        ExpandableTextRenderer(
            ExpandableText(
                paragraph,
                max_lines=collapsed_lines,
                style=style,
                trailing_content=more,
                measurer=measurer,
            ),
            measurer,
        )
        for paragraph in PARAGRAPHS
    ]
    logger.info("Demo started with %d paragraphs", len(renderers))

    frame_count = 0
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEBUTTONDOWN:
                _toggle_at(renderers, event.pos, collapsed_lines, more, less)

        window.fill(BACKGROUND)
        y = MARGIN
        for renderer in renderers:
            renderer.position = (MARGIN, y)
            frame = renderer.process(window, clock)
            y += int(frame.size.height) + GAP
        pygame.display.flip()
        clock.tick(fps)

        frame_count += 1
        if frames is not None and frame_count >= frames:
            running = False

    pygame.quit()


def _toggle_at(
    renderers: list[ExpandableTextRenderer],
    pos: tuple[int, int],
    collapsed_lines: int,
    more: TextTrailingContent,
    less: TextTrailingContent,
) -> None:
    for renderer in renderers:
        frame = renderer.last_frame
        if frame is None:
            continue
        left, top = renderer.position
        if not (top <= pos[1] < top + frame.size.height and left <= pos[0]):
            continue
        expandable = renderer.expandable
        if expandable.params.max_lines == UNLIMITED:
            expandable.update(max_lines=collapsed_lines, trailing_content=more)
        else:
            expandable.update(max_lines=UNLIMITED, trailing_content=less)
        return
