"""One radar card instance: config, host state, markers, renderer and input."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from radarcard.core.broadcast import MARKERS_UPDATED, OUTSIDE_CLICK, Broadcaster, Subscription, default_broadcaster
from radarcard.core.center import CenterConfigError, CenterErrorCode, ResolvedCenter, resolve_center
from radarcard.core.events import TEST_ANIMATION_REQUESTED, EventSink, fire_event
from radarcard.core.hass_state import HassSnapshot
from radarcard.core.interaction import RadarInteractionController, RadarPointerEvent
from radarcard.core.marker_store import LocalStorage, MarkerStore, default_storage
from radarcard.core.point_builder import ActivityMatch, PointKind, RadarPoint, build_points
from radarcard.core.radar_clock import Clock, ensure_clock
from radarcard.core.radar_scene import SceneDescription, SceneOptions, build_scene
from radarcard.core.radar_view_state import RadarViewState
from radarcard.core.radial_scale import RadialScale, chart_radius, format_distance, resolve_max_distance
from radarcard.core.scene_renderer import RadarSceneRenderer, RenderedFrame, RenderPass
from radarcard.shared.models.card_config import RadarCardConfig, RadarCardConfigError, parse_card_config
from radarcard.shared.models.marker import Marker
from radarcard.ui.i18n import I18n, parse_language

logger = logging.getLogger(__name__)

CARD_SIZE = 3


@dataclass(frozen=True)
class LegendItem:
    point_id: str
    label: str
    color: str
    kind: PointKind
    distance_text: str | None = None
    pulsing: bool = False


@dataclass(frozen=True)
class CardView:
    title: str | None = None
    error: str | None = None
    error_code: str | None = None
    empty_message: str | None = None
    render_pass: RenderPass | None = None
    frame: RenderedFrame | None = None
    legend: tuple[LegendItem, ...] = ()
    show_legend: bool = True
    legend_position: str = "bottom"
    can_add_marker: bool = False
    state: RadarViewState = field(default_factory=RadarViewState)

    @property
    def ok(self) -> bool:
        return self.error is None and self.empty_message is None


class RadarCard:
    """Card instance driven by config/state updates and user gestures.

    Nothing renders until both `set_config` and `set_hass` have been called.
    """

    def __init__(
        self,
        *,
        storage: LocalStorage | None = None,
        broadcaster: Broadcaster | None = None,
        clock: Clock | None = None,
        emit: EventSink | None = None,
        i18n: I18n | None = None,
    ) -> None:
        self.card_id = f"radar-card-{uuid.uuid4().hex[:8]}"
        self._broadcaster = broadcaster or default_broadcaster()
        self._store = MarkerStore(storage if storage is not None else default_storage(), broadcaster=self._broadcaster)
        self._clock = ensure_clock(clock)
        self._emit = emit
        self._i18n = i18n
        self._renderer = RadarSceneRenderer(clock=self._clock)
        self._renderer.add_completion_listener(self._on_pass_complete)
        self._controller = RadarInteractionController(emit=emit)
        self._config: RadarCardConfig | None = None
        self._hass: HassSnapshot | None = None
        self._markers: list[Marker] | None = None
        self._subscriptions: list[Subscription] = []
        self._center: ResolvedCenter | None = None
        self._state = RadarViewState()
        self._test_generation: int | None = None

    # --- host lifecycle -------------------------------------------------

    @property
    def config(self) -> RadarCardConfig | None:
        return self._config

    @property
    def state(self) -> RadarViewState:
        return self._state

    @property
    def renderer(self) -> RadarSceneRenderer:
        return self._renderer

    @property
    def store(self) -> MarkerStore:
        return self._store

    @property
    def connected(self) -> bool:
        return bool(self._subscriptions)

    @property
    def center(self) -> ResolvedCenter | None:
        return self._center

    @property
    def scene(self) -> SceneDescription | None:
        return self._renderer.scene

    def set_config(self, raw: Mapping[str, Any] | RadarCardConfig) -> RadarCardConfig:
        config = parse_card_config(dict(raw) if isinstance(raw, Mapping) else raw)
        self._config = config
        self._renderer.configure(
            animation_enabled=config.animation_enabled,
            duration_ms=config.animation_duration,
        )
        return config

    def set_hass(self, hass: HassSnapshot) -> None:
        self._hass = hass

    def connect(self) -> None:
        if self._subscriptions:
            return
        self._subscriptions = [
            self._broadcaster.subscribe(MARKERS_UPDATED, self._on_markers_updated),
            self._broadcaster.subscribe(OUTSIDE_CLICK, self._on_outside_click),
        ]
        self._markers = self._store.load()
        logger.debug("%s connected with %s markers", self.card_id, len(self._markers))

    def disconnect(self) -> None:
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions = []
        self._renderer.reset()
        self._state = replace(self._state, dialog=None, test_animation_running=False)
        self._test_generation = None
        logger.debug("%s disconnected", self.card_id)

    def get_card_size(self) -> int:
        return CARD_SIZE

    # --- rendering ------------------------------------------------------

    @property
    def markers(self) -> list[Marker]:
        if self._markers is None:
            self._markers = self._store.load()
        return list(self._markers)

    def refresh(self, now: float | None = None) -> CardView:
        config = self._require_config()
        i18n = self._translator()
        title = config.title
        if self._hass is None:
            return CardView(title=title, empty_message=i18n.get("card.no_entities"), state=self._state)

        try:
            center = resolve_center(config, self._hass)
        except CenterConfigError as exc:
            logger.warning("%s cannot render: %s", self.card_id, exc)
            self._center = None
            return CardView(
                title=title,
                error=i18n.get(f"error.{exc.code.value}"),
                error_code=exc.code.value,
                state=self._state,
            )
        self._center = center

        unit = self._hass.unit
        points = build_points(
            config.entities,
            self._hass,
            center.coordinate,
            unit=unit,
            markers=self.markers if config.enable_markers else (),
            activity=ActivityMatch(attribute=config.activity_attribute, moving_values=config.moving_activity_set),
        )
        if self._state.pulsing_id is not None and all(p.id != self._state.pulsing_id for p in points):
            self._state = replace(self._state, pulsing_id=None)

        scale = RadialScale(
            max_distance=resolve_max_distance(
                (p.distance for p in points),
                auto=config.auto_radar_max_distance,
                configured=config.radar_max_distance,
            ),
            chart_radius=chart_radius(config.width, config.height, config.margin),
        )
        options = SceneOptions.from_config(config, unit=unit)
        scene = build_scene(points, scale, options, pulsing_id=self._state.pulsing_id)
        render_pass = self._renderer.render(scene, now=now)
        self._renderer.tick(render_pass.started_ts)
        return CardView(
            title=title,
            empty_message=None if points else i18n.get("card.no_entities"),
            render_pass=render_pass,
            frame=self._renderer.frame(render_pass.started_ts),
            legend=self._legend(points, options, unit) if config.show_legend else (),
            show_legend=config.show_legend,
            legend_position=config.legend_position,
            can_add_marker=config.markers_addable,
            state=self._state,
        )

    def frame(self, now: float | None = None) -> RenderedFrame | None:
        return self._renderer.frame(now)

    def tick(self, now: float | None = None) -> list[int]:
        return self._renderer.tick(now)

    def request_test_animation(self, now: float | None = None) -> CardView | None:
        """Replay the entry animation once; emits `radar-card-test-animation`."""

        self._renderer.force_animation()
        self._test_generation = self._renderer.generation + 1
        self._state = replace(self._state, test_animation_running=True)
        fire_event(self._emit, TEST_ANIMATION_REQUESTED, {"cardId": self.card_id})
        if self._config is None or self._hass is None:
            return None
        return self.refresh(now)

    # --- gestures -------------------------------------------------------

    def hover(self, point_id: str | None = None, *, x: float | None = None, y: float | None = None) -> RadarViewState:
        return self._gesture(RadarPointerEvent(kind="enter", point_id=point_id, x=x, y=y))

    def focus(self, point_id: str) -> RadarViewState:
        return self._gesture(RadarPointerEvent(kind="focus", point_id=point_id))

    def leave(self) -> RadarViewState:
        return self._gesture(RadarPointerEvent(kind="leave"))

    def click(self, point_id: str | None = None, *, x: float | None = None, y: float | None = None) -> RadarViewState:
        return self._gesture(RadarPointerEvent(kind="click", point_id=point_id, x=x, y=y))

    def legend_click(self, point_id: str) -> RadarViewState:
        state = self._gesture(RadarPointerEvent(kind="legend_click", point_id=point_id))
        if self._config is not None and self._hass is not None:
            self.refresh()
        return state

    def open_add_marker(self) -> RadarViewState:
        return self._gesture(RadarPointerEvent(kind="add_marker"))

    def close_dialog(self) -> RadarViewState:
        return self._gesture(RadarPointerEvent(kind="outside_click"))

    def tooltip_lines(self) -> list[str]:
        tooltip = self._state.tooltip
        if not tooltip.visible:
            return []
        i18n = self._translator()
        return [
            tooltip.label,
            f"{i18n.get('tooltip.distance')}: {tooltip.distance_text}",
            f"{i18n.get('tooltip.azimuth')}: {tooltip.azimuth_text}",
        ]

    # --- markers --------------------------------------------------------

    def save_marker(
        self,
        *,
        name: str | None = None,
        color: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> Marker:
        """Persist the open dialog; an add dialog stores at the current center."""

        dialog = self._state.dialog
        if dialog is None:
            raise RuntimeError("no marker dialog is open")
        if dialog.mode == "edit" and dialog.marker_id:
            changes: dict[str, Any] = {
                "name": name if name is not None else dialog.name,
                "color": color if color is not None else dialog.color,
                "latitude": latitude if latitude is not None else dialog.latitude,
                "longitude": longitude if longitude is not None else dialog.longitude,
            }
            marker = self._store.update(dialog.marker_id, **changes)
        else:
            center = self._current_center()
            marker = self._store.add(
                name=name if name is not None else dialog.name,
                latitude=center.coordinate.latitude,
                longitude=center.coordinate.longitude,
                color=color,
            )
        self._state = replace(self._state, dialog=None)
        return marker

    def delete_marker(self, marker_id: str | None = None) -> bool:
        target = marker_id
        if target is None and self._state.dialog is not None:
            target = self._state.dialog.marker_id
        if not target:
            return False
        removed = self._store.delete(target)
        if self._state.dialog is not None and self._state.dialog.marker_id == target:
            self._state = replace(self._state, dialog=None)
        return removed

    def clear_markers(self) -> None:
        self._store.clear()
        self._state = replace(self._state, dialog=None)

    # --- internals ------------------------------------------------------

    def _require_config(self) -> RadarCardConfig:
        if self._config is None:
            raise RadarCardConfigError("card is not configured")
        return self._config

    def _translator(self) -> I18n:
        if self._i18n is not None:
            return self._i18n
        language = self._hass.language if self._hass is not None else None
        return I18n(parse_language(language))

    def _current_center(self) -> ResolvedCenter:
        config = self._require_config()
        if self._hass is None:
            raise CenterConfigError(CenterErrorCode.UNRESOLVED, "host state is not available yet")
        return resolve_center(config, self._hass)

    def _gesture(self, event: RadarPointerEvent) -> RadarViewState:
        config = self._require_config()
        scene = self._renderer.scene
        action = self._controller.handle_pointer(event, scene=scene, config=config)
        center = None
        if action.kind == "OPEN_ADD_DIALOG" and self._hass is not None:
            try:
                center = resolve_center(config, self._hass).coordinate
            except CenterConfigError as exc:
                logger.warning("add marker unavailable: %s", exc)
                return self._state
        self._state = self._controller.apply_action(
            self._state,
            action,
            scene=scene,
            config=config,
            markers={m.id: m for m in self.markers},
            center=center,
        )
        return self._state

    def _legend(self, points: list[RadarPoint], options: SceneOptions, unit: str) -> tuple[LegendItem, ...]:
        show_distance = self._config.legend_show_distance if self._config is not None else True
        return tuple(
            LegendItem(
                point_id=p.id,
                label=p.label,
                color=p.color or options.entity_color,
                kind=p.kind,
                distance_text=format_distance(p.distance, unit) if show_distance else None,
                pulsing=p.id == self._state.pulsing_id,
            )
            for p in points
        )

    def _on_markers_updated(self, detail: dict[str, Any]) -> None:
        if detail.get("key", self._store.key) != self._store.key:
            return
        self._markers = self._store.load()
        logger.debug("%s reloaded %s markers", self.card_id, len(self._markers))
        if self._state.dialog is not None and self._state.dialog.marker_id:
            if all(m.id != self._state.dialog.marker_id for m in self._markers):
                self._state = replace(self._state, dialog=None)
        if self._config is not None and self._hass is not None:
            self.refresh()

    def _on_outside_click(self, detail: dict[str, Any]) -> None:
        if detail.get("card_id") == self.card_id:
            return
        if self._state.dialog is not None:
            self._state = replace(self._state, dialog=None)

    def _on_pass_complete(self, generation: int) -> None:
        if self._test_generation is None or generation < self._test_generation:
            return
        self._test_generation = None
        self._state = replace(self._state, test_animation_running=False)
        logger.debug("%s test animation finished (generation %s)", self.card_id, generation)
