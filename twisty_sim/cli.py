"""CLI entrypoint for the cube simulator."""

from __future__ import annotations

import argparse
import json
from datetime import datetime

from .config import COLOR_THEMES, CubeConfig, load_config
from .facade import CubeFacade
from .geometry import FACE_INDEX, FACE_ORDER
from .moves import InvalidMoveError
from .server import CubeHTTPServer
from .state import CubeState


def _log(message: str) -> None:
    ts = datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {message}", flush=True)


def _load_state(state_json: str | None, state_file: str | None):
    if state_json and state_file:
        raise ValueError("Use only one of --state-json or --state-file")
    if state_json:
        return json.loads(state_json)
    if state_file:
        with open(state_file, "r", encoding="utf-8") as f:
            return json.load(f)
    return None


def _build_config(args: argparse.Namespace) -> CubeConfig:
    base = load_config(args.config) if args.config else CubeConfig()
    overrides = {}
    if args.size is not None:
        overrides["size"] = args.size
    if getattr(args, "scramble_moves", None) is not None:
        overrides["scramble_moves"] = args.scramble_moves
    if getattr(args, "theme", None) is not None:
        overrides["color_theme"] = args.theme
    return CubeConfig.from_dict({**base.to_dict(), **overrides})


def format_net(state: CubeState) -> str:
    """Unfolded cross net; each cell shows the face identity of its token."""
    n = state.size

    def rows(label: str) -> list[str]:
        grid = state.grids[FACE_INDEX[label]]
        return [" ".join(FACE_ORDER[int(token)] for token in row) for row in grid]

    pad = " " * (2 * n)
    lines = [pad + row for row in rows("U")]
    for parts in zip(rows("L"), rows("F"), rows("R"), rows("B")):
        lines.append(" ".join(parts))
    lines.extend(pad + row for row in rows("D"))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="NxNxN cube simulator")
    sub = parser.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=None, help="YAML file with CubeConfig fields")
    common.add_argument("--size", type=int, default=None)
    common.add_argument("--state-json", type=str, default=None)
    common.add_argument("--state-file", type=str, default=None)

    headless = sub.add_parser("headless", parents=[common], help="Run headless HTTP simulator")
    headless.add_argument("--host", default="127.0.0.1")
    headless.add_argument("--port", type=int, default=8000)
    headless.add_argument("--scramble-moves", type=int, default=None)

    apply = sub.add_parser("apply", parents=[common], help="Apply a move sequence and print the net")
    apply.add_argument("moves", type=str, help="Space-separated moves, e.g. \"R U R' U'\"")
    apply.add_argument("--theme", choices=sorted(COLOR_THEMES), default=None)
    apply.add_argument("--json", action="store_true", help="Print the persisted state instead of the net")

    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _build_config(args)
        initial_state = _load_state(args.state_json, args.state_file)
        facade = CubeFacade(config)
        if initial_state is not None:
            facade.load_state(initial_state)
            if getattr(args, "theme", None) is not None:
                facade.set_color_theme(args.theme)
    except (ValueError, OSError) as exc:
        parser.error(str(exc))

    if args.mode == "headless":
        server = CubeHTTPServer(facade=facade, host=args.host, port=args.port)
        if config.scramble_moves > 0 and initial_state is None:
            facade.scramble()
        _log(f"Cube {config.size}x{config.size} headless server listening on http://{server.host}:{server.port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            server.shutdown()
            _log("server stopped")
        return

    if args.mode == "apply":
        try:
            facade.apply_sequence(args.moves)
        except InvalidMoveError as exc:
            parser.error(str(exc))
        if args.json:
            print(json.dumps(facade.save_state()))
        else:
            print(format_net(facade.get_state()))
            print(" ".join(f"{label}={facade.label_color(label)}" for label in FACE_ORDER))
            print(f"solved={facade.is_solved()} moves={facade.move_count}")
        return

    parser.error(f"Unsupported mode: {args.mode}")


if __name__ == "__main__":
    main()
