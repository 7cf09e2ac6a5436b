# main.py
from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from typing import TextIO

from config import MachineConfig, MachineSettings, apply_settings, build_machine, load_config
from debug import Debug
from errors import EnigmaError
from machine import PASSTHROUGH, Machine

debug = Debug()

# ────────────────────────────────────────────────────────────────────────
#  1. Machine set-up from arguments
# ────────────────────────────────────────────────────────────────────────


def settings_from_args(args: argparse.Namespace, base: MachineSettings | None) -> MachineSettings | None:
    """Command-line options override the file's `machine` section."""
    if base is None and args.rotors is None:
        return None
    if base is None:
        if args.setting is None:
            raise EnigmaError("--setting is required with --rotors")
        base = MachineSettings(rotors=args.rotors, setting=args.setting)
    return MachineSettings(
        rotors=args.rotors if args.rotors is not None else base.rotors,
        setting=args.setting if args.setting is not None else base.setting,
        rings=args.rings if args.rings is not None else base.rings,
        plugboard=args.plugboard if args.plugboard is not None else base.plugboard,
    )


def setup_machine(args: argparse.Namespace) -> Machine:
    cfg = load_config(args.config) if args.config else MachineConfig()
    settings = settings_from_args(args, cfg.settings)
    if settings is None:
        raise EnigmaError("No rotor selection: give --rotors or a config with a 'machine' section")
    cfg.settings = None
    machine = build_machine(cfg)
    apply_settings(machine, settings)
    return machine


# ────────────────────────────────────────────────────────────────────────
#  2. Output helpers
# ────────────────────────────────────────────────────────────────────────


def group(text: str, block: int) -> str:
    """Drop passthrough characters and print in groups of BLOCK."""
    if block <= 0:
        return text
    letters = "".join(ch for ch in text if ch not in PASSTHROUGH)
    return " ".join(letters[i : i + block] for i in range(0, len(letters), block))


def convert_lines(machine: Machine, lines: Iterable[str], out: TextIO, block: int) -> None:
    """Convert each line in turn; the rotors keep moving between lines."""
    for line in lines:
        text = machine.convert_message(line.rstrip("\n"))
        out.write(group(text, block) + "\n")


# ────────────────────────────────────────────────────────────────────────
#  3. CLI
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="enigma", description="Encrypt or decrypt with a rotor machine")
    p.add_argument("--config", metavar="FILE", help="JSON machine description. Default: standard 5-slot, 3-pawl naval set.")
    p.add_argument("--rotors", nargs="+", metavar="NAME", help="Rotor names, reflector first (e.g. B BETA III IV I).")
    p.add_argument("--setting", metavar="STR", help="Initial window letters, one per non-reflector slot.")
    p.add_argument("--rings", metavar="STR", help="Ring settings, one letter per non-reflector slot.")
    p.add_argument("--plugboard", metavar="CYCLES", help="Plugboard in cycle notation, e.g. '(YF) (ZH)'.")
    p.add_argument("-m", "--message", metavar="TEXT", help="Message to convert. If omitted, lines are read from --input or stdin.")
    p.add_argument("-i", "--input", metavar="FILE", help="Read messages from FILE.")
    p.add_argument("-o", "--output", metavar="FILE", help="Write results to FILE instead of stdout.")
    p.add_argument("--block", type=int, default=0, metavar="N", help="Print output in groups of N letters (0 keeps the layout). Default: 0")
    p.add_argument("--debug", nargs="+", metavar="COMPONENT", choices=sorted(debug.status()), help="Enable debug logging for components.")
    p.add_argument("--log-file", metavar="FILE", help="Also write log messages to FILE.")
    return p.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    if args.debug:
        Debug.configure(log_to=args.log_file)
        debug.enable(*args.debug)

    out: TextIO = sys.stdout
    try:
        machine = setup_machine(args)
        if args.output:
            out = open(args.output, "w", encoding="utf-8")
        if args.message is not None:
            convert_lines(machine, [args.message], out, args.block)
        elif args.input:
            with open(args.input, encoding="utf-8") as f:
                convert_lines(machine, f, out, args.block)
        else:
            convert_lines(machine, sys.stdin, out, args.block)
    except (EnigmaError, OSError) as e:
        print(f"enigma: {e}", file=sys.stderr)
        return 1
    finally:
        if out is not sys.stdout:
            out.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
