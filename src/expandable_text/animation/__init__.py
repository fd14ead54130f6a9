from expandable_text.animation.animator import (AnimationPhase,  # noqa: F401
                                                AnimationState, HeightAnimator)
from expandable_text.animation.spring import SpringSpec  # noqa: F401
