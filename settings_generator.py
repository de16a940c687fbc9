# settings_generator.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List, Sequence

from keyboard_and_plugboard import ALPHABET, Plugboard
from utilities import ROTOR_ORDER, parse_positions

DEFAULT_PAIRS = 10
MAX_PAIRS = len(ALPHABET) // 2

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    k = max(0, min(k, len(alpha) // 2))
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def choose_positions(alpha: str, rng: Random | SystemRandom) -> str:
    return "".join(rng.choices(alpha, k=len(ROTOR_ORDER)))


def make_settings(seed: int | None = None, pairs: int = DEFAULT_PAIRS) -> dict:
    """One day's key: start positions plus plugboard, in load_config() shape."""
    rng = build_rng(seed)
    positions = choose_positions(ALPHABET, rng)
    plugboard = " ".join(choose_pairs(ALPHABET, pairs, rng))

    # same checks the machine applies
    parse_positions(positions)
    Plugboard.parse(plugboard)

    return {"positions": positions, "plugboard": plugboard}


def parse_cli(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a Unigma daily key sheet")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument(
        "--pairs",
        type=int,
        default=DEFAULT_PAIRS,
        help=f"Number of plugboard pairs, 0-{MAX_PAIRS} (default: {DEFAULT_PAIRS})",
    )
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("unigma_config.json"),
        help="Destination JSON file (default: unigma_config.json)",
    )
    args = p.parse_args(argv)
    if not 0 <= args.pairs <= MAX_PAIRS:
        p.error(f"--pairs must be between 0 and {MAX_PAIRS}")
    return args


# ── main ─────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_cli(argv)
    cfg = make_settings(args.seed, args.pairs)

    args.outfile.write_text(json.dumps(cfg, indent=2), encoding="utf-8")
    print(f"✅  Wrote {args.outfile}\n"
        f"   positions   : {cfg['positions']}\n"
        f"   plug pairs  : {len(cfg['plugboard'].split())}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
