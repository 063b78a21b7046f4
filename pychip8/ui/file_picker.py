"""Native file dialog used when no ROM path is given on the command line."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

ROM_FILETYPES = (("CHIP-8 programs", "*.ch8 *.c8 *.rom"), ("All files", "*.*"))


def pick_rom_file(title: str = "Select a CHIP-8 program") -> Optional[Path]:
    """Open a Tk file dialog and return the chosen path, or ``None`` on cancel."""

    try:
        import tkinter
        from tkinter import filedialog
    except ImportError as exc:  # pragma: no cover - depends on the Python build
        raise RuntimeError("tkinter is required for the file picker; pass a ROM path instead") from exc

    root = tkinter.Tk()
    root.withdraw()
    try:
        selected = filedialog.askopenfilename(title=title, filetypes=ROM_FILETYPES)
    finally:
        root.destroy()
    if not selected:
        return None
    return Path(selected)
