from expandable_text.animation.spring import SpringSpec  # noqa: F401
from expandable_text.expandable import (ExpandableText,  # noqa: F401
                                        ExpandableTextFrame, TextOverflow)
from expandable_text.layout.models import UNLIMITED  # noqa: F401
from expandable_text.text.annotated import AnnotatedText  # noqa: F401
from expandable_text.text.style import TextStyle  # noqa: F401
