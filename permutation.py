# permutation.py
from __future__ import annotations

import re
from collections.abc import Sequence

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError

debug = Debug()

_token_re = re.compile(r"[\s()]+")


class Permutation:
    """
    A permutation of ``0..size-1`` given in cycle notation over an alphabet.

    ``"(AELTPHQXRU) (BKNW)"`` sends A→E, E→L, …, U→A and B→K, …, W→B.
    Symbols that appear in no cycle map to themselves. Whitespace only
    separates cycles, and the empty string is the identity.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        if cycles.count("(") != cycles.count(")"):
            raise EnigmaError(f"Unbalanced parentheses in cycles {cycles!r}")

        self._alphabet = alphabet
        self._cycles: list[tuple[int, ...]] = []
        # index → (cycle number, position in cycle)
        self._where: dict[int, tuple[int, int]] = {}

        for token in _token_re.split(cycles):
            if token:
                self._add_cycle(token)

        debug.log("permutation", f"parsed {self!r}")

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string where ``wiring[i]`` is the image of
        the i-th alphabet symbol."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise EnigmaError("wiring must be a permutation of alphabet")

        image = [alphabet.to_int(c) for c in wiring]
        seen: set[int] = set()
        groups: list[str] = []
        for start in range(alphabet.size()):
            if start in seen:
                continue
            cycle = []
            i = start
            while i not in seen:
                seen.add(i)
                cycle.append(alphabet.to_char(i))
                i = image[i]
            groups.append("(" + "".join(cycle) + ")")
        return cls(" ".join(groups), alphabet)

    def _add_cycle(self, token: str) -> None:
        number = len(self._cycles)
        cycle: list[int] = []
        for pos, ch in enumerate(token):
            index = self._alphabet.to_int(ch)
            if index in self._where:
                raise EnigmaError(f"Symbol {ch!r} appears in more than one place in cycles")
            self._where[index] = (number, pos)
            cycle.append(index)
        self._cycles.append(tuple(cycle))

    # ── helpers ───────────────────────────────────────────────────
    def wrap(self, p: int) -> int:
        """Return P modulo the alphabet size, always non-negative."""
        return p % self.size()

    def size(self) -> int:
        return self._alphabet.size()

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def cycles(self) -> tuple[str, ...]:
        to_char = self._alphabet.to_char
        return tuple("".join(to_char(i) for i in cycle) for cycle in self._cycles)

    # ── index level ───────────────────────────────────────────────
    def permute(self, p: int) -> int:
        p = self.wrap(p)
        hit = self._where.get(p)
        if hit is None:
            return p
        number, pos = hit
        cycle = self._cycles[number]
        return cycle[(pos + 1) % len(cycle)]

    def invert(self, c: int) -> int:
        c = self.wrap(c)
        hit = self._where.get(c)
        if hit is None:
            return c
        number, pos = hit
        cycle = self._cycles[number]
        return cycle[pos - 1]

    # ── symbol level ──────────────────────────────────────────────
    def permute_char(self, ch: str) -> str:
        return self._alphabet.to_char(self.permute(self._alphabet.to_int(ch)))

    def invert_char(self, ch: str) -> str:
        return self._alphabet.to_char(self.invert(self._alphabet.to_int(ch)))

    def derangement(self) -> bool:
        """True iff no explicit cycle is a singleton."""
        return all(len(cycle) > 1 for cycle in self._cycles)

    def __repr__(self) -> str:
        return "<Permutation " + " ".join(f"({c})" for c in self.cycles) + ">"


def plugboard_from_pairs(
    pairs: Sequence[str | tuple[str, str]],
    alphabet: Alphabet,
) -> Permutation:
    """Build a plugboard permutation from swapped pairs, e.g. ``["AB", "CD"]``."""
    used: set[str] = set()
    cycles: list[str] = []

    for raw in pairs:
        if not isinstance(raw, (str, tuple)) or len(raw) != 2:
            raise EnigmaError(f"Pair {raw!r} must be exactly 2 symbols")
        a, b = raw

        if a == b:
            raise EnigmaError(f"Plugboard cannot map a symbol to itself: {a}")
        if a in used or b in used:
            dup = a if a in used else b
            raise EnigmaError(f"Character {dup!r} already used in plugboard")
        if a not in alphabet or b not in alphabet:
            bad = a if a not in alphabet else b
            raise EnigmaError(f"Symbol {bad!r} not in alphabet")

        cycles.append(f"({a}{b})")
        used.update((a, b))

    return Permutation(" ".join(cycles), alphabet)
