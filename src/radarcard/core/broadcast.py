"""Process-wide event broadcast shared by all card instances."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

MARKERS_UPDATED = "radar-card-markers-updated"
OUTSIDE_CLICK = "pointerdown"

Listener = Callable[[dict[str, Any]], None]


@dataclass(eq=False)
class Subscription:
    broadcaster: "Broadcaster"
    event_type: str
    listener: Listener
    active: bool = field(default=True)

    def cancel(self) -> None:
        if self.active:
            self.broadcaster.unsubscribe(self)


class Broadcaster:
    """Synchronous fan-out of named events to registered listeners.

    Listeners are called in subscription order. A listener that raises is
    logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, event_type: str, listener: Listener) -> Subscription:
        sub = Subscription(broadcaster=self, event_type=event_type, listener=listener)
        self._listeners[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        subs = self._listeners.get(subscription.event_type, [])
        if subscription in subs:
            subs.remove(subscription)
        subscription.active = False

    def dispatch(self, event_type: str, detail: dict[str, Any] | None = None) -> int:
        delivered = 0
        payload = dict(detail or {})
        for sub in list(self._listeners.get(event_type, ())):
            if not sub.active:
                continue
            try:
                sub.listener(payload)
            except Exception:  # noqa: BLE001
                logger.exception("listener for %s failed", event_type)
            delivered += 1
        return delivered

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, ()))


_default = Broadcaster()


def default_broadcaster() -> Broadcaster:
    return _default
