# unigma.py  ─────────────────────────────────────────────────────────
from __future__ import annotations

from typing import Iterable, List, TextIO

from debug import Debug
from keyboard_and_plugboard import Keyboard, Plugboard
from rotor_and_reflector import Rotor, Reflector
from utilities import (
    DEFAULT_POSITIONS,
    REFLECTOR,
    ROTOR_ORDER,
    SLOT_NAMES,
    format_positions,
    parse_positions,
)

debug = Debug()

# slot indices into Unigma.rotors / Unigma._pos
LEFT, MIDDLE, RIGHT = 0, 1, 2


class Unigma:
    """Three-rotor machine: rotors I, II, III (left to right) and reflector B.

    Wiring, notches and the plugboard are fixed once configured; only the
    three rotor positions move, once per enciphered letter. An instance
    carries sequence-dependent state, so give every stream its own machine.
    """

    def __init__(
        self,
        positions: str = DEFAULT_POSITIONS,
        plugboard: str = "",
        *,
        rotors: Iterable[Rotor] = ROTOR_ORDER,
        reflector: Reflector = REFLECTOR,
    ) -> None:
        self.rotors: tuple[Rotor, ...] = tuple(rotors)
        if len(self.rotors) != 3:
            raise ValueError("Unigma takes exactly three rotors (left, middle, right)")

        self.reflector = reflector
        self.kb = Keyboard(reflector.alphabet)

        self._start: List[int] = [0, 0, 0]
        self._pos: List[int] = [0, 0, 0]
        self.pb = Plugboard((), reflector.alphabet)

        self.set_positions(positions)
        self.set_plugboard(plugboard)

    # ── key helpers ─────────────────────────────────────────────

    def set_positions(self, positions: str) -> None:
        """Rotate each rotor to its window letter, given left-middle-right."""
        start = parse_positions(positions)
        self._start = start
        self._pos = list(start)

    def set_plugboard(self, config: str | None) -> None:
        self.pb = Plugboard.parse(config, self.reflector.alphabet)

    def rewind(self) -> None:
        """Return to the start position set by the last set_positions()."""
        self._pos = list(self._start)

    @property
    def positions(self) -> str:
        return format_positions(self._pos)

    @property
    def plugboard(self) -> str:
        return str(self.pb)

    # ── stepping logic  ─────────────────────────────────────────

    def step(self) -> None:
        """Advance the rotors for one key-press, double step included."""
        left, middle, right = self.rotors
        pos = self._pos

        # decide on the pre-step positions, then move
        step_L = middle.at_notch(pos[MIDDLE])
        step_M = step_L or right.at_notch(pos[RIGHT])

        if step_L:
            pos[LEFT] = (pos[LEFT] + 1) % left.size
        if step_M:
            pos[MIDDLE] = (pos[MIDDLE] + 1) % middle.size
        pos[RIGHT] = (pos[RIGHT] + 1) % right.size

        debug.log("stepping", f"Rotor pos {self.positions}")

    # ── encipher one symbol  ────────────────────────────────────

    def encipher_letter(self, letter: str) -> str:
        """Step, then send one letter A-Z (either case) through the machine."""
        signal = self.kb.forward(letter)
        self.step()

        pos = self._pos
        signal = self.pb.forward(signal)

        for slot in (RIGHT, MIDDLE, LEFT):
            signal = self.rotors[slot].forward(signal, pos[slot])

        signal = self.reflector.reflect(signal)

        for slot in (LEFT, MIDDLE, RIGHT):
            signal = self.rotors[slot].backward(signal, pos[slot])

        signal = self.pb.backward(signal)
        out_ch = self.kb.backward(signal)
        debug.log("encipher", f"{letter!r}->{out_ch!r} at {self.positions}")
        return out_ch

    def encipher_char(self, ch: str) -> str:
        """Letters are enciphered; everything else passes through unstepped."""
        if self.kb.is_letter(ch):
            return self.encipher_letter(ch)
        return ch

    def encipher_text(self, text: str) -> str:
        return "".join(self.encipher_char(ch) for ch in text)

    def encipher_stream(self, reader: TextIO, writer: TextIO) -> int:
        """Copy *reader* to *writer* one character at a time until EOF.

        Returns the number of letters enciphered. The writer is flushed at
        every newline so a terminal session sees each line as it is typed.
        """
        count = 0
        for ch in iter(lambda: reader.read(1), ""):
            if self.kb.is_letter(ch):
                writer.write(self.encipher_letter(ch))
                count += 1
            else:
                writer.write(ch)
            if ch == "\n":
                writer.flush()
        writer.flush()
        return count

    # ── reporting ───────────────────────────────────────────────

    def format_config(self) -> str:
        pos = self.positions
        slots = ", ".join(f"{name}: {letter}" for name, letter in zip(SLOT_NAMES, pos))
        lines = [
            "=== Enigma Configuration ===",
            f"Rotors:     {', '.join(r.name for r in self.rotors)}",
            f"Reflector:  {self.reflector.name}",
            f"Positions:  {pos} ({slots})",
            f"Plugboard:  {self.plugboard or '(none)'}",
            "===========================",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<Unigma pos={self.positions} plugboard={self.plugboard!r}>"
