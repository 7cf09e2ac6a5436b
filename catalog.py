# catalog.py
from __future__ import annotations

from typing import Dict, List

from alphabet import Alphabet, UPPER
from errors import EnigmaError
from permutation import Permutation
from rotors import Rotor, RotorKind

# ────────────────────────────────────────────────────────────────────────
#  Wheel database: the naval Enigma set in cycle notation
# ────────────────────────────────────────────────────────────────────────

DEFAULT_ALPHABET = UPPER
DEFAULT_NUM_ROTORS = 5
DEFAULT_NUM_PAWLS = 3

STANDARD_ROTORS: Dict[str, Dict[str, str]] = {
    # moving rotors ------------------------------------------------------
    "I":    {"kind": "moving", "notches": "Q",
             "cycles": "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"},
    "II":   {"kind": "moving", "notches": "E",
             "cycles": "(FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)"},
    "III":  {"kind": "moving", "notches": "V",
             "cycles": "(ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)"},
    "IV":   {"kind": "moving", "notches": "J",
             "cycles": "(AEPLIYWCOXMRFZBSTGJQNH) (DV) (KU)"},
    "V":    {"kind": "moving", "notches": "Z",
             "cycles": "(AVOLDRWFIUQ) (BZKSMNHYC) (EGTJPX)"},
    "VI":   {"kind": "moving", "notches": "ZM",
             "cycles": "(AJQDVLEOZWIYTS) (CGMNHFUX) (BPRK)"},
    "VII":  {"kind": "moving", "notches": "ZM",
             "cycles": "(ANOUPFRIMBZTLWKSVEGCJYDHXQ)"},
    "VIII": {"kind": "moving", "notches": "ZM",
             "cycles": "(AFLSETWUNDHOZVICQ) (BKJ) (GXY) (MPR)"},
    # fixed (thin) rotors ------------------------------------------------
    "BETA":  {"kind": "fixed", "cycles": "(ALBEVFCYODJWUGNMQTZSKPR) (HIX)"},
    "GAMMA": {"kind": "fixed", "cycles": "(AFNIRLBSQWVXGUZDKMTPCOYJHE)"},
    # reflectors ---------------------------------------------------------
    "B": {"kind": "reflector",
          "cycles": "(AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP) (RX) (SZ) (TV)"},
    "C": {"kind": "reflector",
          "cycles": "(AR) (BD) (CO) (EJ) (FN) (GT) (HK) (IV) (LM) (PW) (QZ) (SX) (UY)"},
}


def build_rotor(name: str, spec: Dict[str, str], alphabet: Alphabet) -> Rotor:
    """Turn one catalog entry into a Rotor definition."""
    for key in ("kind", "cycles", "wiring", "notches"):
        if key in spec and not isinstance(spec[key], str):
            raise EnigmaError(f"Rotor {name}: '{key}' must be a string")

    try:
        kind = RotorKind(spec["kind"].lower())
    except KeyError:
        raise EnigmaError(f"Rotor {name}: missing 'kind'") from None
    except ValueError:
        kinds = ", ".join(k.value for k in RotorKind)
        raise EnigmaError(f"Rotor {name}: unknown kind {spec['kind']!r} (expected {kinds})") from None

    has_cycles, has_wiring = "cycles" in spec, "wiring" in spec
    if has_cycles == has_wiring:
        raise EnigmaError(f"Rotor {name}: give exactly one of 'cycles' or 'wiring'")
    if has_cycles:
        perm = Permutation(spec["cycles"], alphabet)
    else:
        perm = Permutation.from_wiring(spec["wiring"], alphabet)

    if kind is RotorKind.MOVING:
        if "notches" not in spec:
            raise EnigmaError(f"Rotor {name}: moving rotors need 'notches'")
        return Rotor.moving(name, perm, spec["notches"])
    if spec.get("notches"):
        raise EnigmaError(f"Rotor {name}: only moving rotors have notches")
    if kind is RotorKind.REFLECTOR:
        return Rotor.reflector(name, perm)
    return Rotor.fixed(name, perm)


def build_catalog(
    alphabet: Alphabet,
    specs: Dict[str, Dict[str, str]] | None = None,
) -> List[Rotor]:
    """Build every rotor in SPECS (the standard set when omitted)."""
    if specs is None:
        specs = STANDARD_ROTORS
    return [build_rotor(name, spec, alphabet) for name, spec in specs.items()]


def default_catalog() -> List[Rotor]:
    return build_catalog(Alphabet(DEFAULT_ALPHABET))
