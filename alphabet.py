# alphabet.py
from __future__ import annotations

from collections.abc import Iterator

from debug import Debug
from errors import EnigmaError

debug = Debug()

# symbols that carry meaning in cycle notation or in message passthrough
RESERVED = frozenset("(),")

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Alphabet:
    """Ordered set of distinct symbols, numbered 0..size-1."""

    def __init__(self, chars: str = UPPER) -> None:
        if not chars:
            raise EnigmaError("Alphabet must contain at least one symbol")

        seen: set[str] = set()
        for ch in chars:
            if ch.isspace() or ch in RESERVED:
                raise EnigmaError(f"Symbol {ch!r} cannot be used in an alphabet")
            if ch in seen:
                raise EnigmaError(f"Symbol {ch!r} appears twice in alphabet")
            seen.add(ch)

        self._chars: str = chars
        self._index: dict[str, int] = {ch: i for i, ch in enumerate(chars)}
        debug.log("alphabet", f"{len(chars)} symbols: {chars}")

    # symbol → integer signal
    def to_int(self, ch: str) -> int:
        try:
            return self._index[ch]
        except KeyError:
            raise EnigmaError(
                f"Invalid character {ch!r} for current alphabet."
            ) from None

    # integer signal → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self._chars)):
            hi = len(self._chars) - 1
            raise EnigmaError(f"Signal {index} out of range 0–{hi}")
        return self._chars[index]

    def contains(self, ch: str) -> bool:
        return ch in self._index

    def size(self) -> int:
        return len(self._chars)

    @property
    def chars(self) -> str:
        return self._chars

    __contains__ = contains
    __len__ = size

    def __iter__(self) -> Iterator[str]:
        return iter(self._chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._chars == other._chars

    def __hash__(self) -> int:
        return hash(self._chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self._chars!r}>"
