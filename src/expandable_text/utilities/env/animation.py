from expandable_text.utilities.env.parsing import _env_float

DEFAULT_SNAP_EPSILON_PX = 0.5
DEFAULT_NEAR_END_TOLERANCE_DP = 3.0
DEFAULT_DENSITY = 1.0
DEFAULT_SPRING_STIFFNESS = 400.0
DEFAULT_SPRING_DAMPING_RATIO = 1.0


class AnimationConfiguration:
    @classmethod
    def snap_epsilon(cls) -> float:
        return _env_float(
            "EXPANDABLE_TEXT_SNAP_EPSILON",
            default=DEFAULT_SNAP_EPSILON_PX,
            minimum=0.0,
        )

    @classmethod
    def near_end_tolerance_dp(cls) -> float:
        return _env_float(
            "EXPANDABLE_TEXT_NEAR_END_TOLERANCE_DP",
            default=DEFAULT_NEAR_END_TOLERANCE_DP,
            minimum=0.0,
        )

    @classmethod
    def density(cls) -> float:
        return _env_float(
            "EXPANDABLE_TEXT_DENSITY",
            default=DEFAULT_DENSITY,
            minimum=0.0,
            exclusive_minimum=True,
        )

    @classmethod
    def near_end_tolerance_px(cls) -> float:
        return cls.near_end_tolerance_dp() * cls.density()

    @classmethod
    def spring_stiffness(cls) -> float:
        return _env_float(
            "EXPANDABLE_TEXT_SPRING_STIFFNESS",
            default=DEFAULT_SPRING_STIFFNESS,
            minimum=0.0,
            exclusive_minimum=True,
        )

    @classmethod
    def spring_damping_ratio(cls) -> float:
        return _env_float(
            "EXPANDABLE_TEXT_SPRING_DAMPING_RATIO",
            default=DEFAULT_SPRING_DAMPING_RATIO,
            minimum=0.0,
        )
