from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console

from radarcard.backends import BACKENDS, get_backend
from radarcard.core.broadcast import Broadcaster
from radarcard.core.card import RadarCard
from radarcard.core.hass_state import HassSnapshot
from radarcard.core.marker_store import JsonFileStorage, MarkerNotFoundError, MarkerStore
from radarcard.core.radar_clock import ManualClock
from radarcard.shared.logging_setup import setup_logging
from radarcard.shared.models.card_config import load_card_config

logger = logging.getLogger("radarcard.cli")


def _parse_home(raw: str) -> tuple[float, float]:
    try:
        lat_s, lon_s = raw.split(",", 1)
        return float(lat_s), float(lon_s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected LAT,LON, got {raw!r}") from None


def _storage(args: argparse.Namespace) -> JsonFileStorage:
    if args.storage:
        return JsonFileStorage(args.storage)
    return JsonFileStorage.from_env()


def _load_snapshot(args: argparse.Namespace) -> HassSnapshot:
    with open(args.states, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    snapshot = HassSnapshot.from_dict(data)
    if args.home is not None:
        snapshot = replace(snapshot, latitude=args.home[0], longitude=args.home[1])
    if args.unit:
        snapshot = replace(snapshot, length_unit=args.unit)
    return snapshot


def cmd_render(args: argparse.Namespace) -> int:
    config = load_card_config(args.config)
    clock = ManualClock()
    card = RadarCard(storage=_storage(args), broadcaster=Broadcaster(), clock=clock)
    card.set_config(config)
    card.set_hass(_load_snapshot(args))
    card.connect()
    try:
        view = card.refresh(now=0.0)
        if view.render_pass is not None:
            # Static output shows the settled scene, not the first animation frame.
            clock.set(view.render_pass.ends_ts)
            card.tick()
            view = replace(view, frame=card.frame())
    finally:
        card.disconnect()

    backend = get_backend(args.format)
    output = backend.render(view, width=config.width, height=config.height)
    if args.out:
        path = Path(args.out)
        if isinstance(output.content, bytes):
            path.write_bytes(output.content)
        else:
            path.write_text(output.content, encoding="utf-8")
        logger.info("wrote %s (%s)", path, output.media_type)
    elif isinstance(output.content, bytes):
        sys.stdout.buffer.write(output.content)
    elif output.renderable is not None:
        Console().print(output.renderable)
    else:
        sys.stdout.write(output.content + "\n")
    return 1 if view.error else 0


def cmd_markers(args: argparse.Namespace) -> int:
    store = MarkerStore(_storage(args), broadcaster=Broadcaster())
    if args.action == "list":
        for marker in store.load():
            print(f"{marker.id}\t{marker.name}\t{marker.latitude}\t{marker.longitude}\t{marker.color or ''}")
        return 0
    if args.action == "add":
        marker = store.add(name=args.name, latitude=args.lat, longitude=args.lon, color=args.color)
        print(marker.id)
        return 0
    if args.action == "delete":
        if not store.delete(args.marker_id):
            raise MarkerNotFoundError(args.marker_id)
        return 0
    store.clear()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="radarcard", description="Radar card renderer and marker tools.")
    parser.add_argument("--log-config", default=None, help="Path to a logging YAML file.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a card from a config and a states snapshot.")
    render.add_argument("--config", required=True, help="Card config YAML.")
    render.add_argument("--states", required=True, help="Home Assistant style states JSON.")
    render.add_argument("--home", type=_parse_home, default=None, help="Override home coordinate as LAT,LON.")
    render.add_argument("--unit", choices=("km", "mi"), default=None)
    render.add_argument("--format", choices=sorted(BACKENDS), default="svg")
    render.add_argument("--out", default=None)
    render.add_argument("--storage", default=None, help="Marker storage JSON file.")
    render.set_defaults(func=cmd_render)

    markers = sub.add_parser("markers", help="Manage stored markers.")
    markers.add_argument("--storage", default=None, help="Marker storage JSON file.")
    actions = markers.add_subparsers(dest="action", required=True)
    actions.add_parser("list")
    add = actions.add_parser("add")
    add.add_argument("--name", required=True)
    add.add_argument("--lat", type=float, required=True)
    add.add_argument("--lon", type=float, required=True)
    add.add_argument("--color", default=None)
    delete = actions.add_parser("delete")
    delete.add_argument("marker_id")
    actions.add_parser("clear")
    markers.set_defaults(func=cmd_markers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.log_config:
        setup_logging(default_path=args.log_config)
    else:
        setup_logging(default_level=logging.WARNING)
    try:
        return args.func(args)
    except (ValueError, FileNotFoundError, MarkerNotFoundError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
