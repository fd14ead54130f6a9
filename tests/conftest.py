import os
import tempfile
from collections import deque

import pygame
import pytest
from hypothesis import HealthCheck, settings

os.environ.setdefault("EXPANDABLE_TEXT_LOG_DIR", tempfile.mkdtemp(prefix="expandable-text-logs-"))

from expandable_text.layout.measurer import MonospaceTextMeasurer  # noqa: E402
from expandable_text.utilities import logging_control  # noqa: E402

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("default")

ADVANCE = 8.0
LINE_HEIGHT = 16.0


class StubClock:
    def __init__(self, *times: int, default: int = 16) -> None:
        self._times: deque[int] = deque(times)
        self._default = default

    def get_time(self) -> int:
        if self._times:
            return self._times.popleft()
        return self._default


class StubLogger:
    def __init__(self) -> None:
        self.records: list[tuple[int, str, tuple[object, ...]]] = []

    def log(self, level: int, msg: str, *args: object) -> None:
        self.records.append((level, msg, tuple(args)))

    def debug(self, msg: str, *args: object) -> None:
        self.log(10, msg, *args)

    def info(self, msg: str, *args: object) -> None:
        self.log(20, msg, *args)

    def warning(self, msg: str, *args: object) -> None:
        self.log(30, msg, *args)

    def error(self, msg: str, *args: object) -> None:
        self.log(40, msg, *args)


@pytest.fixture(autouse=True, scope="session")
def configure_sdl_video_driver() -> None:
    """Force pygame to use the dummy SDL driver so headless tests remain stable."""

    patcher = pytest.MonkeyPatch()
    patcher.setenv("SDL_VIDEODRIVER", "dummy")
    patcher.setenv("SDL_AUDIODRIVER", "dummy")
    try:
        yield
    finally:
        patcher.undo()


@pytest.fixture(autouse=True)
def reset_logging_controller_cache() -> None:
    logging_control.get_logging_controller.cache_clear()
    yield
    logging_control.get_logging_controller.cache_clear()


@pytest.fixture(autouse=True)
def init_pygame() -> None:
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def measurer() -> MonospaceTextMeasurer:
    return MonospaceTextMeasurer(advance=ADVANCE, line_height=LINE_HEIGHT)


@pytest.fixture
def stub_logger() -> StubLogger:
    return StubLogger()


@pytest.fixture
def stub_clock_factory():
    def _factory(*times: int, **kwargs) -> StubClock:
        return StubClock(*times, **kwargs)

    return _factory
