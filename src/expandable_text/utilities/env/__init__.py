"""Environment configuration helpers."""

from expandable_text.utilities.env.animation import AnimationConfiguration
from expandable_text.utilities.env.text import TextConfiguration


class Configuration(
    AnimationConfiguration,
    TextConfiguration,
):
    """Aggregate environment configuration helpers."""
