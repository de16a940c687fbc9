# main.py
from __future__ import annotations

import argparse, json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from debug import COMPONENTS, Debug
from errors import UnigmaError
from unigma import Unigma
from utilities import DEFAULT_POSITIONS, interactive_config

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()

USAGE_EXAMPLES = """\
examples:
  %(prog)s -p AAA                    start at position AAA
  %(prog)s -p XYZ -b "AB CD"         custom position and plugboard
  echo "HELLO" | %(prog)s -p QWE     encrypt with position QWE

rotors: I, II, III | reflector: B
"""


@dataclass(slots=True)
class Config:
    """Settings for one run of the machine."""

    positions: str = DEFAULT_POSITIONS      # left-middle-right window letters
    plugboard: str = ""                     # "AB CD EF"
    debug: List[str] = field(default_factory=list)
    log_file: str | None = None


def load_config(path: str | Path) -> dict:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must hold a JSON object")
    required = {"positions", "plugboard"}
    missing = required - data.keys()
    if missing:
        raise ValueError(f"Missing keys in config: {', '.join(sorted(missing))}")
    if not isinstance(data["positions"], str):
        raise ValueError("positions must be a string such as \"AAA\"")
    if data["plugboard"] is not None and not isinstance(data["plugboard"], str):
        raise ValueError("plugboard must be a string such as \"AB CD\" or null")
    return data


def build_config(args: argparse.Namespace) -> Config:
    """Merge a --config file with the flags; flags win."""
    cfg = Config(debug=list(args.debug or []), log_file=args.log_file)
    if args.config:
        data = load_config(args.config)
        cfg.positions = data["positions"]
        cfg.plugboard = data["plugboard"] or ""
    if args.positions is not None:
        cfg.positions = args.positions
    if args.plugboard is not None:
        cfg.plugboard = args.plugboard
    return cfg


# ────────────────────────────────────────────────────────────────────────
#  1. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="unigma",
        description="Unigma: the little UNIVAC Enigma simulator. Reads stdin, writes stdout.",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-p", "--positions", metavar="POSITIONS", help="Rotor start positions, 3 letters A-Z left to right (default: AAA)")
    p.add_argument("-b", "--plugboard", metavar="PLUGBOARD", help='Plugboard pairs, space separated, e.g. "AB CD EF"')
    p.add_argument("-s", "--show", action="store_true", help="Show the configuration and exit")
    p.add_argument("--config", metavar="FILE", help="Load positions and plugboard from JSON; flags override it.")
    p.add_argument("-i", "--interactive", action="store_true", help="Prompt for positions and plugboard before reading text.")
    p.add_argument("--debug", nargs="+", metavar="COMPONENT", choices=COMPONENTS, help=f"Enable debug logging for: {', '.join(COMPONENTS)}")
    p.add_argument("--log-file", metavar="FILE", help="Also write debug log lines to FILE.")
    args = p.parse_args(argv)
    if args.log_file and not args.debug:
        p.error("--log-file needs --debug COMPONENT ...")
    return args


def wants_prompts(args: argparse.Namespace, stdin) -> bool:
    """Prompt when asked to, or when nothing was configured on a terminal."""
    if args.interactive:
        return True
    configured = any(
        v is not None for v in (args.positions, args.plugboard, args.config)
    ) or args.show
    return not configured and stdin.isatty()


# ────────────────────────────────────────────────────────────────────────
#  2. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        cfg = build_config(args)
    except (OSError, ValueError) as e:
        sys.exit(f"Error: failed to load configuration: {e}")

    if cfg.debug:
        dbg = Debug(log_to=cfg.log_file)
        dbg.enable(*cfg.debug)

    try:
        machine = Unigma(cfg.positions, cfg.plugboard)
    except UnigmaError as e:
        sys.exit(f"Error: {e}")

    if args.show:
        print(machine.format_config(), file=sys.stderr)
        return 0

    if wants_prompts(args, sys.stdin):
        interactive_config(machine)

    debug.log("encipher", f"start {machine!r}")
    count = machine.encipher_stream(sys.stdin, sys.stdout)
    debug.log("encipher", f"done, {count} letters, end at {machine.positions}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
