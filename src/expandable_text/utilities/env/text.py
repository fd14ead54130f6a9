import os

from expandable_text.utilities.env.parsing import _env_int, _env_optional_str

DEFAULT_MEASURE_CACHE_SIZE = 64
DEFAULT_FONT = "freesansbold.ttf"
DEFAULT_FONT_SIZE = 16


class TextConfiguration:
    @classmethod
    def locale(cls) -> str | None:
        return _env_optional_str("EXPANDABLE_TEXT_LOCALE")

    @classmethod
    def measure_cache_size(cls) -> int:
        return _env_int(
            "EXPANDABLE_TEXT_MEASURE_CACHE_SIZE",
            default=DEFAULT_MEASURE_CACHE_SIZE,
            minimum=0,
        )

    @classmethod
    def font(cls) -> str:
        return os.environ.get("EXPANDABLE_TEXT_FONT", DEFAULT_FONT).strip() or DEFAULT_FONT

    @classmethod
    def font_size(cls) -> int:
        return _env_int(
            "EXPANDABLE_TEXT_FONT_SIZE", default=DEFAULT_FONT_SIZE, minimum=1
        )
