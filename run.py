"""Delver command line.

``generate`` builds one level and prints an ASCII preview (or JSON) so seeds
and options can be inspected without a game client. ``server`` runs the JSON
level API. Generation options come from flags, then DELVER_* environment
variables, then the built-in defaults; ``--env-file`` loads a .env first.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from pathlib import Path
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()


def _stdout_is_tty() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):  # pragma: no cover - environment dependent
        return False


# No ANSI codes when piped or captured (e.g. under pytest)
_COLOR_ENABLED = _stdout_is_tty()


def _load_version() -> str:
    try:
        return Path(__file__).with_name("VERSION").read_text(encoding="utf-8").strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

# Preview glyphs; spawn is drawn over its floor tile
GLYPHS = {"W": "#", "F": ".", "H": ",", "E": ">"}
SPAWN_GLYPH = "@"
GLYPH_COLORS = {
    "W": Fore.BLUE,
    "F": Fore.WHITE,
    "H": Fore.YELLOW,
    "E": Fore.GREEN + Style.BRIGHT,
}

OPTION_FLAGS = (
    ("min_room_size", int),
    ("room_margin", int),
    ("dummy_room_probability", float),
    ("extra_connectivity_probability", float),
    ("merge_probability", float),
    ("hallway_buffer", int),
    ("standard_room_count", int),
    ("workers", int),
)


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delver level generator

    Generate a sector dungeon and preview it in the terminal, or run the JSON
    API that serves levels to game clients. Configuration can be provided via
    CLI flags or DELVER_* environment variables. If both are present, CLI
    flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                 Bind address for the web server (default: 0.0.0.0)
          PORT                 Port for the web server (default: 5000)
          DELVER_<OPTION>      Default for any generation option, e.g. DELVER_MERGE_PROBABILITY=0.3
          DELVER_LOG_LEVEL     debug | info | warn | error
          DELVER_DEBUG_CHECKS  1 to verify level invariants after every generation

        Examples:
          # Preview a level for a fixed seed
          python run.py generate --seed 42

          # Four by three sectors, no dummy rooms, dump JSON
          python run.py generate --columns 4 --rows 3 --dummy-room-probability 0 --json

          # Run the server on a custom port
          python run.py server --port 8080

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delver",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delver Level Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a level and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one level and print an ASCII preview (or JSON)",
    )
    gen_parser.add_argument("--seed", default=None, help="Integer or string seed (default: random)")
    gen_parser.add_argument("--width", type=int, default=None, help="Map width in tiles")
    gen_parser.add_argument("--height", type=int, default=None, help="Map height in tiles")
    gen_parser.add_argument("--columns", type=int, default=None, help="Sector columns (M)")
    gen_parser.add_argument("--rows", type=int, default=None, help="Sector rows (N)")
    for name, kind in OPTION_FLAGS:
        gen_parser.add_argument("--" + name.replace("_", "-"), dest=name, type=kind, default=None)
    gen_parser.add_argument("--debug-checks", action="store_true", help="Verify level invariants")
    gen_parser.add_argument("--json", action="store_true", help="Print the level as JSON")
    gen_parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    gen_parser.set_defaults(command="generate")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the level generation API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask level generation API",
    )
    server_parser.add_argument("--host", default=None, help="Bind address (default: $HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Listen port (default: $PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Flask debug mode (reloader, tracebacks)")
    server_parser.set_defaults(command="server")

    # No subcommand means a preview; global flags like --env-file still apply
    argv = list(argv)
    if not any(arg in subparsers.choices for arg in argv):
        i = _global_prefix_len(argv)
        argv = argv[:i] + ["generate"] + argv[i:]

    return parser.parse_args(argv)


def _global_prefix_len(argv) -> int:
    """Count the leading arguments that belong to the top-level parser."""
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--env-file":
            i += 2
        elif arg.startswith("--env-file=") or arg in ("--version", "-h", "--help"):
            i += 1
        else:
            break
    return min(i, len(argv))


def render_ascii(tilemap, color: bool = False) -> str:
    lines = []
    for y in range(tilemap.height):
        row = []
        for x in range(tilemap.width):
            tile = tilemap.grid[x][y]
            glyph = SPAWN_GLYPH if (x, y) == tilemap.spawn else GLYPHS.get(tile, "?")
            if color:
                tint = Fore.CYAN + Style.BRIGHT if glyph == SPAWN_GLYPH else GLYPH_COLORS.get(tile, "")
                glyph = f"{tint}{glyph}{Style.RESET_ALL}"
            row.append(glyph)
        lines.append("".join(row))
    return "\n".join(lines)


def _generate(args) -> int:
    from delver.dungeon import ConfigError, Dungeon, GenerationConfig, coerce_seed

    # Keep stdout to the map itself unless the user asked for chatter
    os.environ.setdefault("DELVER_LOG_LEVEL", "warn")
    values = {name: getattr(args, name) for name, _ in OPTION_FLAGS}
    for name in ("width", "height", "columns", "rows"):
        values[name] = getattr(args, name)
    try:
        config = GenerationConfig.from_env().with_overrides(values)
        if args.seed is not None or config.seed is None:
            config.seed = coerce_seed(args.seed)
        if args.debug_checks:
            config.debug_checks = True
        dungeon = Dungeon(config)
    except ConfigError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    if args.json:
        data = dungeon.level.to_dict()
        data["tiles"] = dungeon.tilemap.rows()
        print(json.dumps(data, indent=2))
        return 0
    color = _COLOR_ENABLED and not args.no_color
    print(render_ascii(dungeon.tilemap, color=color))
    m = dungeon.metrics
    print(
        f"seed={dungeon.seed} sectors={m['sectors']} rooms={len(dungeon.rooms)} "
        f"(standard={m['rooms_standard']} dummy={m['rooms_dummy']} merged={m['rooms_merged']}) "
        f"hallways={m['hallways_routed']} exit={dungeon.exit} spawn={dungeon.spawn}"
    )
    return 0


def _paint(text, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else str(text)


def _banner(title: str, rows) -> str:
    rule = _paint("=" * 40, Fore.MAGENTA)
    lines = [rule, "  " + _paint(title, Fore.CYAN + Style.BRIGHT), rule]
    for key, val in rows:
        lines.append(f"  {_paint(key + ':', Fore.YELLOW):12} {_paint(val, Fore.GREEN)}")
    lines += [rule, ""]
    return "\n".join(lines)


def _serve(args) -> int:
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = args.port or int(os.getenv("PORT", "5000"))

    def _stop(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, _stop)

    # Late imports: the app factory must see variables loaded from --env-file
    from delver.logging_utils import log
    from delver.server import start_server

    print(_banner("Delver Level Server", [("Host", host), ("Port", port), ("Debug", "YES" if args.debug else "NO")]))
    log.info(event="startup", mode="server", host=host, port=port)
    start_server(host=host, port=port, debug=args.debug)
    return 0


COMMANDS = {"generate": _generate, "server": _serve}


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if args.env_file:
        load_dotenv(args.env_file)
    else:
        load_dotenv()  # a missing default .env is fine
    return COMMANDS[args.command or "generate"](args)


def cli():  # console script entry
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
