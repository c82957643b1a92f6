"""Outbound events consumed by the card shell."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

INSPECT_ENTITY = "hass-more-info"
TEST_ANIMATION_REQUESTED = "radar-card-test-animation"


@dataclass(frozen=True)
class CardEvent:
    type: str
    detail: dict[str, Any] = field(default_factory=dict)
    bubbles: bool = True
    composed: bool = True


EventSink = Callable[[CardEvent], None]


def fire_event(sink: EventSink | None, event_type: str, detail: dict[str, Any] | None = None) -> CardEvent:
    event = CardEvent(type=event_type, detail=dict(detail or {}))
    if sink is None:
        logger.debug("event %s dropped: no sink attached", event_type)
        return event
    sink(event)
    return event
