from expandable_text.layout.models import (INFINITY, UNLIMITED,  # noqa: F401
                                           Size, TextLayoutInfo)
