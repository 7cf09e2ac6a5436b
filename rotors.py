# rotors.py
from __future__ import annotations

import copy
from enum import Enum
from typing import Dict, NamedTuple

from alphabet import Alphabet
from debug import Debug
from permutation import Permutation
from errors import EnigmaError

debug = Debug()


class RotorKind(Enum):
    REFLECTOR = "reflector"
    FIXED = "fixed"
    MOVING = "moving"


class Capabilities(NamedTuple):
    rotates: bool
    reflecting: bool


CAPABILITIES: Dict[RotorKind, Capabilities] = {
    RotorKind.REFLECTOR: Capabilities(rotates=False, reflecting=True),
    RotorKind.FIXED:     Capabilities(rotates=False, reflecting=False),
    RotorKind.MOVING:    Capabilities(rotates=True,  reflecting=False),
}


class Rotor:
    """
    One wheel of the machine: a named wiring seen through a rotational offset.

    The variant is a tag (`kind`), not a subclass. Reflectors sit in slot 0
    and never move, fixed rotors never move, moving rotors advance under a
    pawl and carry notches that trip their left neighbour.

    Wiring, name and notches are shared between a catalog entry and every
    handle mounted from it; `setting` and `ring` belong to the handle.
    """

    def __init__(
        self,
        name: str,
        perm: Permutation,
        kind: RotorKind = RotorKind.FIXED,
        notches: str = "",
    ) -> None:
        if kind is not RotorKind.MOVING and notches:
            raise EnigmaError(f"Rotor {name}: only moving rotors have notches")

        alphabet = perm.alphabet
        self.name = name
        self.kind = kind
        self._perm = perm
        self._notches = frozenset(alphabet.to_int(ch) for ch in notches)

        self.setting = 0
        self.ring = 0

        if kind is RotorKind.REFLECTOR and not perm.derangement():
            debug.warn("rotor", f"Reflector {name} has fixed points: {perm!r}")

    # ── factories ─────────────────────────────────────────────────
    @classmethod
    def reflector(cls, name: str, perm: Permutation) -> "Rotor":
        return cls(name, perm, RotorKind.REFLECTOR)

    @classmethod
    def fixed(cls, name: str, perm: Permutation) -> "Rotor":
        return cls(name, perm, RotorKind.FIXED)

    @classmethod
    def moving(cls, name: str, perm: Permutation, notches: str) -> "Rotor":
        return cls(name, perm, RotorKind.MOVING, notches)

    def mount(self) -> "Rotor":
        """A fresh handle on the same wiring, at setting 0 and ring 0."""
        handle = copy.copy(self)
        handle.setting = 0
        handle.ring = 0
        return handle

    # ── capability flags ─────────────────────────────────────────
    @property
    def rotates(self) -> bool:
        return CAPABILITIES[self.kind].rotates

    @property
    def reflecting(self) -> bool:
        return CAPABILITIES[self.kind].reflecting

    @property
    def permutation(self) -> Permutation:
        return self._perm

    @property
    def alphabet(self) -> Alphabet:
        return self._perm.alphabet

    @property
    def notches(self) -> frozenset[int]:
        return self._notches

    def size(self) -> int:
        return self._perm.size()

    # ── setting & ring ───────────────────────────────────────────
    def _position(self, posn: int | str) -> int:
        if isinstance(posn, str):
            if posn not in self.alphabet:
                raise EnigmaError(f"Rotor {self.name} cannot be set to {posn!r}: not in alphabet")
            return self.alphabet.to_int(posn)
        return posn % self.size()

    def set(self, posn: int | str) -> None:
        self.setting = self._position(posn)

    def set_ring(self, ring: int | str) -> None:
        self.ring = self._position(ring)

    # ── stepping --------------------------------------------------
    def advance(self) -> None:
        if self.rotates:
            self.setting = (self.setting + 1) % self.size()
            debug.log("stepping", f"{self.name} -> {self.setting}")

    def at_notch(self) -> bool:
        return self.rotates and self.setting in self._notches

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int) -> int:
        offset = self.setting - self.ring
        mapped = self._perm.permute(p + offset)
        return (mapped - offset) % self.size()

    def convert_backward(self, e: int) -> int:
        offset = self.setting - self.ring
        mapped = self._perm.invert(e + offset)
        return (mapped - offset) % self.size()

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor {self.name} {self.kind.value} pos={self.setting} ring={self.ring}>"
