"""Command-line entry point for the CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.cpu import Quirks
from pychip8.system.scheduler import DEFAULT_CPU_HZ, MAX_CPU_HZ, MIN_CPU_HZ
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.ui.file_picker import pick_rom_file


def _cpu_hz(value: str) -> int:
    hz = int(value)
    if not MIN_CPU_HZ <= hz <= MAX_CPU_HZ:
        raise argparse.ArgumentTypeError(f"must be between {MIN_CPU_HZ} and {MAX_CPU_HZ}")
    return hz


def _scale(value: str) -> int:
    scale = int(value)
    if scale <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return scale


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter",
    )
    parser.add_argument(
        "rom",
        nargs="?",
        type=Path,
        help="Path to a CHIP-8 program; a file picker opens when omitted",
    )
    parser.add_argument(
        "--scale",
        type=_scale,
        default=20,
        help="Integer window scale factor (default: 20, i.e. 1280x640)",
    )
    parser.add_argument(
        "--cpu-hz",
        type=_cpu_hz,
        default=DEFAULT_CPU_HZ,
        help=f"Instructions per second (default: {DEFAULT_CPU_HZ})",
    )
    parser.add_argument(
        "--shift-quirk",
        action="store_true",
        help="8xy6/8xyE shift Vy into Vx (SUPER-CHIP style)",
    )
    parser.add_argument(
        "--jump-quirk",
        action="store_true",
        help="Bxnn jumps to xnn + Vx instead of nnn + V0",
    )
    parser.add_argument(
        "--load-store-quirk",
        action="store_true",
        help="Fx55/Fx65 advance I past the transferred registers",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable the sound-timer tone",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    rom_path = args.rom
    if rom_path is None:
        try:
            rom_path = pick_rom_file()
        except RuntimeError as exc:
            parser.exit(1, f"run.py: {exc}\n")
        if rom_path is None:
            parser.exit(1, "run.py: no ROM selected\n")

    if not rom_path.exists():
        parser.error(f"ROM file not found: {rom_path}")

    config = AppConfig(
        rom_path=rom_path,
        scale=args.scale,
        cpu_hz=args.cpu_hz,
        quirks=Quirks(
            shift_uses_vy=args.shift_quirk,
            jump_uses_vx=args.jump_quirk,
            load_store_increments_i=args.load_store_quirk,
        ),
        mute=args.mute,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
