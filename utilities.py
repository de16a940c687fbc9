# utilities.py
from __future__ import annotations

from typing import Callable, List, TextIO

from errors import BadPositions, UnigmaError
from keyboard_and_plugboard import ALPHABET, Keyboard
from rotor_and_reflector import Rotor, Reflector

# ────────────────────────────────────────────────────────────────────────
#  0. Wheel database
# ────────────────────────────────────────────────────────────────────────

I   = Rotor("I",   "EKMFLGDQVZNTOWYHXUSPAIBRCJ", notch="Q", alphabet=ALPHABET)
II  = Rotor("II",  "AJDKSIRUXBLHWTMCQGZNPYFVOE", notch="E", alphabet=ALPHABET)
III = Rotor("III", "BDFHJLCPRTXVZNYEIWGAKMUSQO", notch="V", alphabet=ALPHABET)

B = Reflector("B", "YRUHQSLDPXNGOKMIEBFZCWVJAT", alphabet=ALPHABET)

# wheel order as seen through the windows: left, middle, right
ROTOR_ORDER: List[Rotor] = [I, II, III]
REFLECTOR = B

SLOT_NAMES = ("Left", "Middle", "Right")
DEFAULT_POSITIONS = "AAA"

# ────────────────────────────────────────────────────────────────────────
#  1. Position strings
# ────────────────────────────────────────────────────────────────────────


def parse_positions(text: str | None) -> List[int]:
    """Turn a window string ``"LMR"`` into ``[left, middle, right]`` offsets."""
    if text is None or len(text) != len(ROTOR_ORDER):
        raise BadPositions(
            f"Rotor positions must be exactly {len(ROTOR_ORDER)} letters (A-Z), got {text!r}"
        )
    kb = Keyboard()
    for ch in text:
        if not kb.is_letter(ch):
            raise BadPositions(f"Invalid rotor position {ch!r}. Must be A-Z.")
    return [kb.forward(ch) for ch in text]


def format_positions(positions: List[int]) -> str:
    """Inverse of :func:`parse_positions`, always left-middle-right."""
    return "".join(ALPHABET[p] for p in positions)


# ────────────────────────────────────────────────────────────────────────
#  2. Interactive question helpers
# ────────────────────────────────────────────────────────────────────────

Ask = Callable[[str], str]


def ask(prompt: str) -> str:
    """Read & normalise an operator’s response (uppercase, trimmed)."""
    return input(prompt).strip().upper()


def _answer(prompt_fn: Ask, prompt: str) -> str:
    """End of input at a prompt counts as Enter: keep the default."""
    try:
        return prompt_fn(prompt)
    except EOFError:
        return ""


def get_positions(machine, prompt_fn: Ask = ask, out: TextIO | None = None) -> None:
    """Prompt until a valid start position (or Enter for the default) is given."""
    while True:
        raw = _answer(prompt_fn, f"ROTOR POSITIONS (3 LETTERS A-Z, PRESS ENTER FOR {DEFAULT_POSITIONS}): ")
        if not raw:
            machine.set_positions(DEFAULT_POSITIONS)
            print(f"USING DEFAULT: {DEFAULT_POSITIONS}", file=out)
            return
        try:
            machine.set_positions(raw)
        except UnigmaError as exc:
            print(f"❌  {exc}", file=out)
            continue
        print(f"POSITIONS SET TO: {machine.positions}", file=out)
        return


def get_plugboard(machine, prompt_fn: Ask = ask, out: TextIO | None = None) -> None:
    """Prompt until a valid plugboard (or Enter for none) is given."""
    while True:
        raw = _answer(prompt_fn, "PLUGBOARD PAIRS (E.G. 'AB CD EF', PRESS ENTER FOR NONE): ")
        if not raw:
            machine.set_plugboard("")
            print("NO PLUGBOARD", file=out)
            return
        try:
            machine.set_plugboard(raw)
        except UnigmaError as exc:
            print(f"❌  {exc}", file=out)
            continue
        print(f"PLUGBOARD SET TO: {machine.plugboard}", file=out)
        return


def interactive_config(machine, prompt_fn: Ask = ask, out: TextIO | None = None) -> None:
    """Collect the run settings from the operator, the teletype way."""
    print("UNIGMA: THE LITTLE UNIVAC ENIGMA SIMULATOR", file=out)
    print(f"ROTORS: {', '.join(r.name for r in ROTOR_ORDER)} | REFLECTOR: {REFLECTOR.name}", file=out)
    print("\n--- CONFIGURATION ---\n", file=out)

    get_positions(machine, prompt_fn, out)
    print(file=out)
    get_plugboard(machine, prompt_fn, out)

    print("\n--- READY TO ENCRYPT/DECRYPT ---", file=out)
    print("ENTER TEXT (CTRL+Z OR CTRL+D TO END):\n", file=out)


__all__ = [
    "ROTOR_ORDER",
    "REFLECTOR",
    "SLOT_NAMES",
    "DEFAULT_POSITIONS",
    "parse_positions",
    "format_positions",
    "interactive_config",
]
