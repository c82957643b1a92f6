"""Scene renderer: keyed enter/update/exit reconciliation with timed transitions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from radarcard.core.radar_clock import Clock, ensure_clock
from radarcard.core.radar_reconcile import SceneDiff, reconcile
from radarcard.core.radar_scene import SceneDescription, ScenePrimitive
from radarcard.core.radar_transitions import Easing, Transition, ease_cubic_out

logger = logging.getLogger(__name__)

ORIGIN_GEOMETRY = {"x": 0.0, "y": 0.0, "size": 0.0, "opacity": 0.0}

CompletionListener = Callable[[int], None]


@dataclass
class DrawnPrimitive:
    target: ScenePrimitive
    geometry: dict[str, float]
    transition: Transition | None = None

    def sample(self, now: float) -> dict[str, float]:
        if self.transition is None:
            return dict(self.geometry)
        return self.transition.sample(now)

    def settle(self, now: float) -> bool:
        if self.transition is not None and self.transition.done(now):
            self.geometry = dict(self.transition.end)
            self.transition = None
            return True
        return False

    def state(self, now: float) -> ScenePrimitive:
        g = self.sample(now)
        return replace(self.target, x=g["x"], y=g["y"], size=g["size"], opacity=g["opacity"])


@dataclass(frozen=True)
class RenderPass:
    generation: int
    diff: SceneDiff
    started_ts: float
    ends_ts: float
    animated_enter: bool = False
    forced: bool = False
    entered_from_origin: tuple[str, ...] = ()
    transitioned: tuple[str, ...] = ()

    @property
    def entered_points(self) -> tuple[str, ...]:
        return tuple(k for k in self.entered_from_origin if k.startswith("point:"))


@dataclass(frozen=True)
class RenderedFrame:
    ts: float
    scene: SceneDescription
    primitives: tuple[ScenePrimitive, ...] = ()
    animating: bool = False

    def get(self, key: str) -> ScenePrimitive | None:
        for primitive in self.primitives:
            if primitive.key == key:
                return primitive
        return None


@dataclass
class _PendingCompletion:
    generation: int
    ends_ts: float
    fired: bool = field(default=False)


class RadarSceneRenderer:
    """Keeps the drawn scene and applies each new description as a delta.

    The first animated pass that brings in at least one point sets a latch;
    later passes only animate geometry changes. `force_animation()` makes the
    next pass grow every primitive from the center once more.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        animation_enabled: bool = True,
        duration_ms: float = 750.0,
        easing: Easing = ease_cubic_out,
    ) -> None:
        self._clock = ensure_clock(clock)
        self.animation_enabled = bool(animation_enabled)
        self.duration_ms = max(0.0, float(duration_ms))
        self.easing = easing
        self._drawn: dict[str, DrawnPrimitive] = {}
        self._scene: SceneDescription | None = None
        self._generation = 0
        self._has_animated = False
        self._force_next = False
        self._pending: list[_PendingCompletion] = []
        self._listeners: list[CompletionListener] = []

    @property
    def has_animated(self) -> bool:
        return self._has_animated

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def scene(self) -> SceneDescription | None:
        return self._scene

    def configure(self, *, animation_enabled: bool, duration_ms: float) -> None:
        self.animation_enabled = bool(animation_enabled)
        self.duration_ms = max(0.0, float(duration_ms))

    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    def force_animation(self) -> None:
        self._force_next = True

    def reset(self) -> None:
        """Forget the drawn scene and clear the first-render latch."""

        self._drawn.clear()
        self._scene = None
        self._pending.clear()
        self._has_animated = False
        self._force_next = False

    def render(self, scene: SceneDescription, *, now: float | None = None) -> RenderPass:
        ts = self._clock.now() if now is None else float(now)
        self._settle(ts)
        self._generation += 1
        generation = self._generation

        diff = reconcile(self._drawn, scene.primitives)
        forced = self._force_next
        self._force_next = False
        can_animate = self.animation_enabled and self.duration_ms > 0
        animate_enter = can_animate and (forced or not self._has_animated)
        duration_s = self.duration_ms / 1000.0

        for key in diff.exit:
            del self._drawn[key]

        from_origin: list[str] = []
        transitioned: list[str] = []
        entering = set(diff.enter)
        for primitive in scene.primitives:
            key = primitive.key
            target = primitive.geometry()
            if key in entering:
                if animate_enter:
                    self._drawn[key] = DrawnPrimitive(
                        target=primitive,
                        geometry=dict(ORIGIN_GEOMETRY),
                        transition=self._transition(ts, duration_s, ORIGIN_GEOMETRY, target, generation),
                    )
                    from_origin.append(key)
                    transitioned.append(key)
                else:
                    self._drawn[key] = DrawnPrimitive(target=primitive, geometry=target)
                continue

            drawn = self._drawn[key]
            current = drawn.sample(ts)
            drawn.target = primitive
            if forced and can_animate:
                drawn.geometry = dict(ORIGIN_GEOMETRY)
                drawn.transition = self._transition(ts, duration_s, ORIGIN_GEOMETRY, target, generation)
                from_origin.append(key)
                transitioned.append(key)
            elif not can_animate:
                drawn.geometry = target
                drawn.transition = None
            elif drawn.transition is not None and dict(drawn.transition.end) == target:
                # Already heading to the same target; let it finish.
                continue
            elif current != target:
                drawn.geometry = current
                drawn.transition = self._transition(ts, duration_s, current, target, generation)
                transitioned.append(key)
            else:
                drawn.geometry = target
                drawn.transition = None

        self._scene = scene
        # A pass is complete only once transitions carried over from earlier passes are done too.
        ends_ts = max(
            (d.transition.end_ts for d in self._drawn.values() if d.transition is not None and not d.transition.done(ts)),
            default=ts,
        )
        render_pass = RenderPass(
            generation=generation,
            diff=diff,
            started_ts=ts,
            ends_ts=ends_ts,
            animated_enter=animate_enter,
            forced=forced,
            entered_from_origin=tuple(from_origin),
            transitioned=tuple(transitioned),
        )
        if render_pass.entered_points and not self._has_animated:
            self._has_animated = True
            logger.debug("first animated render done (generation %s)", generation)
        self._pending.append(_PendingCompletion(generation=generation, ends_ts=render_pass.ends_ts))
        return render_pass

    def frame(self, now: float | None = None) -> RenderedFrame | None:
        if self._scene is None:
            return None
        ts = self._clock.now() if now is None else float(now)
        primitives: list[ScenePrimitive] = []
        animating = False
        for primitive in self._scene.primitives:
            drawn = self._drawn.get(primitive.key)
            if drawn is None:
                continue
            if drawn.transition is not None and not drawn.transition.done(ts):
                animating = True
            primitives.append(drawn.state(ts))
        return RenderedFrame(ts=ts, scene=self._scene, primitives=tuple(primitives), animating=animating)

    def tick(self, now: float | None = None) -> list[int]:
        """Settle finished transitions and notify listeners of completed passes."""

        ts = self._clock.now() if now is None else float(now)
        self._settle(ts)
        completed: list[int] = []
        for pending in self._pending:
            if not pending.fired and ts >= pending.ends_ts:
                pending.fired = True
                completed.append(pending.generation)
        self._pending = [p for p in self._pending if not p.fired]
        for generation in completed:
            for listener in list(self._listeners):
                listener(generation)
        return completed

    def is_animating(self, now: float | None = None) -> bool:
        ts = self._clock.now() if now is None else float(now)
        return any(d.transition is not None and not d.transition.done(ts) for d in self._drawn.values())

    def drawn_keys(self) -> list[str]:
        return list(self._drawn)

    def _settle(self, ts: float) -> None:
        for drawn in self._drawn.values():
            drawn.settle(ts)

    def _transition(
        self,
        ts: float,
        duration_s: float,
        start: dict[str, float],
        end: dict[str, float],
        generation: int,
    ) -> Transition:
        return Transition(
            start_ts=ts,
            duration_s=duration_s,
            start=dict(start),
            end=dict(end),
            generation=generation,
            easing=self.easing,
        )
