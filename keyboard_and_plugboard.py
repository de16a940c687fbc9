# keyboard_and_plugboard.py
from __future__ import annotations

import string
from collections.abc import Iterable

from debug import Debug
from errors import BadPlugboard

debug = Debug()

ALPHABET = string.ascii_uppercase
MAX_PLUGBOARD_LEN = 255


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    """ASCII-only letter handling: no locale, no Unicode case rules."""

    def __init__(self, alphabet: str = ALPHABET) -> None:
        self.alphabet: str = alphabet
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(alphabet)
        }

    @staticmethod
    def fold(ch: str) -> str:
        """Upper-case an ASCII a-z letter; anything else is returned as is."""
        if "a" <= ch <= "z":
            return chr(ord(ch) - 32)
        return ch

    def is_letter(self, ch: str) -> bool:
        return self.fold(ch) in self.alpha_to_index

    # letter → integer signal
    def forward(self, letter: str) -> int:
        try:
            signal = self.alpha_to_index[self.fold(letter)]
        except KeyError:
            raise ValueError(
                f"Invalid character {letter!r} for current alphabet."
            )
        debug.log("keyboard", f"{letter!r}->{signal}")
        return signal

    # integer signal → letter
    def backward(self, signal: int) -> str:
        if not (0 <= signal < len(self.alphabet)):
            hi = len(self.alphabet) - 1
            raise ValueError(f"Signal {signal} out of range 0–{hi}")
        return self.alphabet[signal]


# ── Plugboard ─────────────────────────────────────────────────────
class Plugboard:
    def __init__(
        self,
        pairs: Iterable[str] = (),
        alphabet: str = ALPHABET,
    ) -> None:
        self.alphabet: str = alphabet
        self._map: list[int] = list(range(len(alphabet)))
        self.pairs: list[str] = []
        used: set[str] = set()

        for raw in pairs:
            pair = "".join(Keyboard.fold(ch) for ch in raw)
            if len(pair) != 2:
                raise BadPlugboard(f"Pair {raw!r} must be exactly 2 letters")
            a, b = pair

            if a not in alphabet or b not in alphabet:
                bad = raw[0] if a not in alphabet else raw[1]
                raise BadPlugboard(f"Symbol {bad!r} in pair {raw!r} is not a letter A-Z")
            if a == b:
                raise BadPlugboard(f"Plugboard cannot map a letter to itself: {a}")
            if a in used or b in used:
                dup = a if a in used else b
                raise BadPlugboard(f"Letter {dup!r} already used in plugboard")

            # passed validation → commit swap
            ia, ib = alphabet.index(a), alphabet.index(b)
            self._map[ia], self._map[ib] = ib, ia
            used.update((a, b))
            self.pairs.append(pair)

    @classmethod
    def parse(cls, config: str | None, alphabet: str = ALPHABET) -> "Plugboard":
        """Build a plugboard from a string such as ``"AB cd  EF"``."""
        if config is None:
            return cls((), alphabet)
        if len(config) > MAX_PLUGBOARD_LEN:
            raise BadPlugboard(
                f"Plugboard configuration too long (max {MAX_PLUGBOARD_LEN} characters)"
            )
        return cls(config.split(), alphabet)

    # one private helper does the job for both directions
    def _swap(self, signal: int) -> int:
        mapped = self._map[signal]
        debug.log("plugboard", f"{signal}->{mapped}")
        return mapped

    forward = _swap        # alias: signal in
    backward = _swap       # alias: signal out

    def __str__(self) -> str:
        return " ".join(self.pairs)

    # nicety for debugging
    def __repr__(self) -> str:
        return f"<Plugboard {self}>"
