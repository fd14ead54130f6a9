"""Damped spring physics for the animated height.

The spring is a unit-mass damped harmonic oscillator pulled toward a target.
``step`` uses the closed-form solution, so a single large step lands exactly
where many small ones would.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from expandable_text.utilities.env import Configuration

STIFFNESS_HIGH = 10_000.0
STIFFNESS_MEDIUM = 1_500.0
STIFFNESS_MEDIUM_LOW = 400.0
STIFFNESS_LOW = 200.0
STIFFNESS_VERY_LOW = 50.0

DAMPING_RATIO_HIGH_BOUNCY = 0.2
DAMPING_RATIO_MEDIUM_BOUNCY = 0.5
DAMPING_RATIO_LOW_BOUNCY = 0.75
DAMPING_RATIO_NO_BOUNCY = 1.0


@dataclass(frozen=True)
class SpringSpec:
    stiffness: float = STIFFNESS_MEDIUM_LOW
    damping_ratio: float = DAMPING_RATIO_NO_BOUNCY

    def __post_init__(self) -> None:
        if self.stiffness <= 0:
            raise ValueError("Spring stiffness must be greater than 0")
        if self.damping_ratio < 0:
            raise ValueError("Spring damping ratio must not be negative")

    @classmethod
    def from_environment(cls) -> "SpringSpec":
        return cls(
            stiffness=Configuration.spring_stiffness(),
            damping_ratio=Configuration.spring_damping_ratio(),
        )


class SpringSimulation:
    def __init__(self, spec: SpringSpec) -> None:
        self.spec = spec
        self._natural_frequency = math.sqrt(spec.stiffness)

    def step(
        self, value: float, velocity: float, target: float, elapsed_s: float
    ) -> tuple[float, float]:
        """Advance ``elapsed_s`` seconds and return the new ``(value, velocity)``."""

        if elapsed_s <= 0:
            return value, velocity

        omega = self._natural_frequency
        zeta = self.spec.damping_ratio
        x0 = value - target
        v0 = velocity
        t = elapsed_s

        if zeta == 1.0:
            c1 = x0
            c2 = v0 + omega * x0
            decay = math.exp(-omega * t)
            x = (c1 + c2 * t) * decay
            v = (c2 - omega * (c1 + c2 * t)) * decay
        elif zeta < 1.0:
            damped = omega * math.sqrt(1.0 - zeta * zeta)
            c1 = x0
            c2 = (v0 + zeta * omega * x0) / damped
            decay = math.exp(-zeta * omega * t)
            cos = math.cos(damped * t)
            sin = math.sin(damped * t)
            x = decay * (c1 * cos + c2 * sin)
            v = decay * (
                (c2 * damped - zeta * omega * c1) * cos
                - (c1 * damped + zeta * omega * c2) * sin
            )
        else:
            root = omega * math.sqrt(zeta * zeta - 1.0)
            r_plus = -zeta * omega + root
            r_minus = -zeta * omega - root
            c2 = (v0 - r_minus * x0) / (r_plus - r_minus)
            c1 = x0 - c2
            x = c1 * math.exp(r_minus * t) + c2 * math.exp(r_plus * t)
            v = c1 * r_minus * math.exp(r_minus * t) + c2 * r_plus * math.exp(r_plus * t)

        return target + x, v
