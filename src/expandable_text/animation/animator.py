from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

import reactivex
from reactivex.abc import DisposableBase
from reactivex.subject import BehaviorSubject

from expandable_text.animation.spring import SpringSimulation, SpringSpec
from expandable_text.utilities.env import Configuration
from expandable_text.utilities.logging import get_logger

logger = get_logger(__name__)

MS_PER_SECOND = 1000.0


class AnimationPhase(StrEnum):
    AT_REST = "at_rest"
    ANIMATING = "animating"


@dataclass(frozen=True)
class AnimationState:
    value: float
    target: float
    velocity: float = 0.0
    phase: AnimationPhase = AnimationPhase.AT_REST

    @property
    def at_rest(self) -> bool:
        return self.phase is AnimationPhase.AT_REST


class HeightAnimator:
    """Owns one animated height and springs it toward the latest target.

    A new target never restarts the motion: the spring continues from the
    live value and velocity. Targets closer than ``snap_epsilon`` to the
    current value are adopted immediately.
    """

    def __init__(
        self,
        initial: float = 0.0,
        spec: SpringSpec | None = None,
        snap_epsilon: float | None = None,
    ) -> None:
        self.snap_epsilon = (
            Configuration.snap_epsilon() if snap_epsilon is None else snap_epsilon
        )
        if self.snap_epsilon < 0:
            raise ValueError("snap_epsilon must not be negative")
        self.spec = spec or SpringSpec.from_environment()
        self._simulation = SpringSimulation(self.spec)
        self._state = BehaviorSubject(AnimationState(value=initial, target=initial))
        self.heights = BehaviorSubject(max(initial, 0.0))

    @property
    def state(self) -> AnimationState:
        return self._state.value

    @property
    def value(self) -> float:
        return max(self._state.value.value, 0.0)

    @property
    def target(self) -> float:
        return self._state.value.target

    @property
    def velocity(self) -> float:
        return self._state.value.velocity

    @property
    def at_rest(self) -> bool:
        return self._state.value.at_rest

    def distance_to_target(self) -> float:
        state = self._state.value
        return abs(state.value - state.target)

    def animate_to(self, target: float) -> None:
        state = self._state.value
        if abs(state.value - target) < self.snap_epsilon:
            self.snap_to(target)
            return
        if state.target == target and not state.at_rest:
            return
        logger.debug(
            "Animating height %.2f -> %.2f (velocity %.2f)",
            state.value,
            target,
            state.velocity,
        )
        self._publish(replace(state, target=target, phase=AnimationPhase.ANIMATING))

    def snap_to(self, value: float) -> None:
        self._publish(AnimationState(value=value, target=value))

    def update_spec(self, spec: SpringSpec) -> None:
        if spec != self.spec:
            self.spec = spec
            self._simulation = SpringSimulation(spec)

    def advance(self, elapsed_ms: float) -> None:
        state = self._state.value
        if state.at_rest or elapsed_ms <= 0:
            return
        value, velocity = self._simulation.step(
            state.value, state.velocity, state.target, elapsed_ms / MS_PER_SECOND
        )
        if abs(value - state.target) < self.snap_epsilon:
            self.snap_to(state.target)
            return
        self._publish(replace(state, value=value, velocity=velocity))

    def bind(self, ticks: reactivex.Observable[float]) -> DisposableBase:
        """Advance on every elapsed-milliseconds value ``ticks`` emits."""

        return ticks.subscribe(on_next=self.advance)

    def _publish(self, state: AnimationState) -> None:
        self._state.on_next(state)
        self.heights.on_next(max(state.value, 0.0))
