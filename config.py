# config.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from alphabet import Alphabet
from catalog import (
    DEFAULT_ALPHABET,
    DEFAULT_NUM_PAWLS,
    DEFAULT_NUM_ROTORS,
    STANDARD_ROTORS,
    build_catalog,
)
from debug import Debug
from errors import EnigmaError
from machine import Machine
from permutation import Permutation, plugboard_from_pairs

debug = Debug()

REQUIRED = {"alphabet", "num_rotors", "num_pawls"}


@dataclass(slots=True)
class MachineSettings:
    """Which rotors go in, and how the machine is set up for a message."""

    rotors: List[str]
    setting: str
    rings: str | None = None
    plugboard: str | List[str] = ""


@dataclass(slots=True)
class MachineConfig:
    """Everything needed to build a machine."""

    alphabet: str = DEFAULT_ALPHABET
    num_rotors: int = DEFAULT_NUM_ROTORS
    num_pawls: int = DEFAULT_NUM_PAWLS
    rotors: Dict[str, Dict[str, str]] = field(default_factory=lambda: dict(STANDARD_ROTORS))
    settings: MachineSettings | None = None


# ────────────────────────────────────────────────────────────────────────
#  1. JSON loading helpers
# ────────────────────────────────────────────────────────────────────────


def _settings_from(data: Dict[str, Any]) -> MachineSettings:
    if not isinstance(data, dict):
        raise EnigmaError("'machine' must be an object")
    missing = {"rotors", "setting"} - data.keys()
    if missing:
        raise EnigmaError(f"Missing keys in machine settings: {', '.join(sorted(missing))}")
    if not isinstance(data["rotors"], list) or not all(isinstance(n, str) for n in data["rotors"]):
        raise EnigmaError("'machine.rotors' must be a list of rotor names")
    if not isinstance(data["setting"], str):
        raise EnigmaError("'machine.setting' must be a string")
    if data.get("rings") is not None and not isinstance(data["rings"], str):
        raise EnigmaError("'machine.rings' must be a string")
    plugboard = data.get("plugboard", "")
    if not isinstance(plugboard, (str, list)) or (
        isinstance(plugboard, list) and not all(isinstance(p, str) for p in plugboard)
    ):
        raise EnigmaError("'machine.plugboard' must be cycle notation or a list of pairs")
    return MachineSettings(
        rotors=data["rotors"],
        setting=data["setting"],
        rings=data.get("rings"),
        plugboard=plugboard,
    )


def parse_config(data: Dict[str, Any]) -> MachineConfig:
    missing = REQUIRED - data.keys()
    if missing:
        raise EnigmaError(f"Missing keys in config: {', '.join(sorted(missing))}")

    for key in ("num_rotors", "num_pawls"):
        if not isinstance(data[key], int) or isinstance(data[key], bool):
            raise EnigmaError(f"'{key}' must be an integer")
    if not isinstance(data["alphabet"], str):
        raise EnigmaError("'alphabet' must be a string")

    rotors = data.get("rotors", STANDARD_ROTORS)
    if not isinstance(rotors, dict) or not all(isinstance(v, dict) for v in rotors.values()):
        raise EnigmaError("'rotors' must map rotor names to objects")

    settings = _settings_from(data["machine"]) if "machine" in data else None
    return MachineConfig(
        alphabet=data["alphabet"],
        num_rotors=data["num_rotors"],
        num_pawls=data["num_pawls"],
        rotors=rotors,
        settings=settings,
    )


def load_config(path: str | Path) -> MachineConfig:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise EnigmaError(f"Cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise EnigmaError(f"Config {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise EnigmaError(f"Config {path} must hold a JSON object")
    debug.log("config", f"loaded {path}")
    return parse_config(data)


# ────────────────────────────────────────────────────────────────────────
#  2. Building & setting up machines
# ────────────────────────────────────────────────────────────────────────


def make_plugboard(spec: str | List[str], alphabet: Alphabet) -> Permutation:
    """Cycle notation string, or a list of pairs like ``["YF", "ZH"]``."""
    if isinstance(spec, str):
        return Permutation(spec, alphabet)
    return plugboard_from_pairs(spec, alphabet)


def build_machine(cfg: MachineConfig) -> Machine:
    alphabet = Alphabet(cfg.alphabet)
    machine = Machine(alphabet, cfg.num_rotors, cfg.num_pawls, build_catalog(alphabet, cfg.rotors))
    debug.log("config", f"machine with {cfg.num_rotors} slots, {cfg.num_pawls} pawls, "
                        f"{len(machine.catalog)} rotors available")
    if cfg.settings is not None:
        apply_settings(machine, cfg.settings)
    return machine


def apply_settings(machine: Machine, settings: MachineSettings) -> None:
    """Insert rotors, then set window letters, rings and plugboard."""
    plugboard = make_plugboard(settings.plugboard, machine.alphabet)
    machine.insert_rotors(settings.rotors)
    machine.set_rotors(settings.setting)
    if settings.rings:
        machine.set_rings(settings.rings)
    machine.set_plugboard(plugboard)
    debug.log("config", f"settings applied: {machine!r}")
