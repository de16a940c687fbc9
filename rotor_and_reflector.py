# rotor_and_reflector.py
from __future__ import annotations
from debug import Debug

debug = Debug()


class Rotor:
    """Fixed wiring of one wheel.

    The rotor keeps no position of its own: the machine owns the mutable
    positions by slot and passes the current one into every call.
    """

    __slots__ = ("name", "alphabet", "size", "_fwd", "_rev", "notch")

    def __init__(self, name: str, wiring: str, notch: str, alphabet: str) -> None:
        if sorted(wiring) != sorted(alphabet):
            raise ValueError("wiring must be a permutation of alphabet")
        if len(notch) != 1 or notch not in alphabet:
            raise ValueError("Notch must be a single character of the alphabet")

        self.name = name
        self.alphabet = alphabet
        self.size = len(alphabet)

        # integer lookup tables, inverse materialised once
        self._fwd = tuple(alphabet.index(c) for c in wiring)
        self._rev = tuple(wiring.index(c) for c in alphabet)

        self.notch = alphabet.index(notch)

    @property
    def wiring(self) -> str:
        return "".join(self.alphabet[i] for i in self._fwd)

    def at_notch(self, position: int) -> bool:
        return position == self.notch

    # ── signal paths ---------------------------------------------
    def forward(self, sig: int, position: int) -> int:
        mapped = self._fwd[(sig + position) % self.size]
        out = (mapped - position) % self.size
        debug.log("rotor", f"{self.name} fwd pos={position} {sig}->{out}")
        return out

    def backward(self, sig: int, position: int) -> int:
        mapped = self._rev[(sig + position) % self.size]
        out = (mapped - position) % self.size
        debug.log("rotor", f"{self.name} rev pos={position} {sig}->{out}")
        return out

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor {self.name} notch={self.alphabet[self.notch]}>"


class Reflector:
    __slots__ = ("name", "alphabet", "size", "_map")

    def __init__(self, name: str, wiring: str, alphabet: str) -> None:
        if len(wiring) != len(alphabet) or sorted(wiring) != sorted(alphabet):
            raise ValueError("Reflector wiring must be a permutation of alphabet")

        # ensure involution property (w[i] = j ⇒ w[j] = i) and no self-maps
        for i, c in enumerate(wiring):
            j = alphabet.index(c)
            if wiring[j] != alphabet[i] or i == j:
                raise ValueError("Reflector wiring must be an involution with no fixed points")

        self.name = name
        self.alphabet = alphabet
        self.size = len(alphabet)
        self._map = tuple(alphabet.index(c) for c in wiring)

    @property
    def wiring(self) -> str:
        return "".join(self.alphabet[i] for i in self._map)

    def reflect(self, sig: int) -> int:
        out = self._map[sig]
        debug.log("reflector", f"{self.name} {sig}->{out}")
        return out

    def __repr__(self) -> str:
        return f"<Reflector {self.name}>"
