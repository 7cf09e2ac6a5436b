# machine.py  ─────────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError
from permutation import Permutation
from rotors import Rotor

debug = Debug()

# characters copied through untouched, without stepping the rotors
PASSTHROUGH = frozenset(" \t\n,")


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of `Machine.try_convert`.

    On failure `text` holds the converted prefix, `error` the reason and
    `position` the index of the offending character.
    """

    text: str
    error: EnigmaError | None = None
    position: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Machine:
    """
    A rotor machine with `num_rotors` slots and `num_pawls` pawls.

    Slot 0 holds the reflector, the last slot the fastest rotor. The
    catalog passed in is never modified: inserted rotors are mounted
    handles sharing the catalog's wiring, so several machines may share
    one catalog. A single machine is not thread-safe; converting and
    reconfiguring must be serialized by the caller.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        num_pawls: int,
        all_rotors: Iterable[Rotor],
    ) -> None:
        if num_rotors <= 1:
            raise EnigmaError("Number of rotors must be > 1")
        if not (0 <= num_pawls < num_rotors):
            raise EnigmaError(f"Number of pawls must be in 0–{num_rotors - 1}")

        catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in catalog:
                raise EnigmaError(f"Rotor {rotor.name!r} defined twice")
            if rotor.alphabet != alphabet:
                raise EnigmaError(f"Rotor {rotor.name!r} uses a different alphabet")
            catalog[rotor.name] = rotor

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._num_pawls = num_pawls
        self._catalog = MappingProxyType(catalog)
        self._rotors: list[Rotor] = []
        self._plugboard = Permutation("", alphabet)

    # ── read-only attributes ────────────────────────────────────

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._num_pawls

    @property
    def catalog(self):
        return self._catalog

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    @property
    def working_rotors(self) -> tuple[Rotor, ...]:
        return tuple(self._rotors)

    @property
    def rotor_names(self) -> list[str]:
        return [rotor.name for rotor in self._rotors]

    @property
    def settings(self) -> str:
        """Window letters of slots 1.. (the reflector is never shown)."""
        return "".join(self._alphabet.to_char(r.setting) for r in self._rotors[1:])

    def rotor(self, slot: int) -> Rotor:
        return self._rotors[slot]

    # ── assembly ────────────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots with the rotors NAMES (NAMES[0] is the reflector).

        Every check runs before anything changes, so a failed call leaves
        the previous stack in place. New rotors start at setting 0.
        """
        if len(names) != self._num_rotors:
            raise EnigmaError(f"This machine has exactly {self._num_rotors} rotor slots, got {len(names)}")

        missing = [name for name in names if name not in self._catalog]
        if missing:
            raise EnigmaError(f"Rotor(s) not available: {', '.join(missing)}")

        repeated = sorted({name for name in names if list(names).count(name) > 1})
        if repeated:
            raise EnigmaError(f"Rotor(s) used more than once: {', '.join(repeated)}")

        chosen = [self._catalog[name] for name in names]
        if not chosen[0].reflecting:
            raise EnigmaError(f"First rotor must be a reflector, got {names[0]}")

        misplaced = [r.name for r in chosen[1:] if r.reflecting]
        if misplaced:
            raise EnigmaError(f"Reflector(s) outside slot 0: {', '.join(misplaced)}")

        moving = sum(1 for r in chosen[1:] if r.rotates)
        if moving != self._num_pawls:
            raise EnigmaError(f"Must insert {self._num_pawls} moving rotor(s), got {moving}")

        # passed validation → commit
        self._rotors = [rotor.mount() for rotor in chosen]
        debug.log("rotor", f"inserted {self.rotor_names}")

    def _check_slot_string(self, value: str, what: str) -> None:
        if not self._rotors:
            raise EnigmaError("There are no rotors to configure.")
        if len(value) != self._num_rotors - 1:
            raise EnigmaError(f"{what} must be {self._num_rotors - 1} characters, got {value!r}")
        bad = [ch for ch in value if ch not in self._alphabet]
        if bad:
            raise EnigmaError(f"{what} {value!r} has characters outside the alphabet: {''.join(bad)}")

    def set_rotors(self, setting: str) -> None:
        """Rotate slots 1.. to the window letters in SETTING, leftmost first."""
        self._check_slot_string(setting, "Setting")
        for rotor, letter in zip(self._rotors[1:], setting):
            rotor.set(letter)
        debug.log("rotor", f"setting {setting}")

    def set_rings(self, rings: str) -> None:
        """Apply ring offsets to slots 1.., same layout as `set_rotors`."""
        self._check_slot_string(rings, "Ring setting")
        for rotor, letter in zip(self._rotors[1:], rings):
            rotor.set_ring(letter)
        debug.log("rotor", f"rings {rings}")

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self._alphabet:
            raise EnigmaError("Plugboard uses a different alphabet")
        self._plugboard = plugboard
        debug.log("rotor", f"plugboard {plugboard!r}")

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """Advance rotors one key-press, double-step included."""
        rotors = self._rotors
        right = len(rotors) - 1

        # decide from the pre-step state, then move each rotor once
        stepping = {right}
        for i in range(right, 0, -1):
            if rotors[i].at_notch():
                stepping.add(i - 1)
                if rotors[i - 1].rotates:
                    stepping.add(i)

        for i in stepping:
            rotors[i].advance()

        debug.log("stepping", f"slots {sorted(stepping)} -> {self.settings}")

    # ── encipher  ───────────────────────────────────────────────

    def convert(self, c: int) -> int:
        """Step the machine, then send signal C through it and back."""
        if not self._rotors:
            raise EnigmaError("No rotors inserted")

        self._step_rotors()

        signal = self._plugboard.permute(c)

        for rotor in reversed(self._rotors[1:]):
            signal = rotor.convert_forward(signal)

        for rotor in self._rotors:
            signal = rotor.convert_backward(signal)

        signal = self._plugboard.permute(signal)
        debug.log("encipher", f"{c} -> {signal}")
        return signal

    def _convert_char(self, ch: str) -> str:
        return self._alphabet.to_char(self.convert(self._alphabet.to_int(ch)))

    def convert_message(self, msg: str) -> str:
        """Encipher MSG. Blanks, tabs, newlines and commas pass through.

        Any other foreign character raises `EnigmaError`; nothing of the
        partial output is returned.
        """
        out: list[str] = []
        for ch in msg:
            if ch in PASSTHROUGH:
                out.append(ch)
            elif ch in self._alphabet:
                out.append(self._convert_char(ch))
            else:
                raise EnigmaError(f"Invalid character {ch!r} in message")
        return "".join(out)

    def try_convert(self, msg: str) -> ConversionResult:
        """Like `convert_message`, but report failure with the prefix kept."""
        out: list[str] = []
        for pos, ch in enumerate(msg):
            if ch in PASSTHROUGH:
                out.append(ch)
            elif ch in self._alphabet:
                out.append(self._convert_char(ch))
            else:
                error = EnigmaError(f"Invalid character {ch!r} in message")
                return ConversionResult("".join(out), error, pos)
        return ConversionResult("".join(out))

    def __repr__(self) -> str:
        return f"<Machine {self.rotor_names} at {self.settings!r}>"
