"""Checkout shim so `python -m babble.cli.extract` resolves modules under src/."""

from __future__ import annotations

from pathlib import Path

_SRC_PACKAGE = Path(__file__).resolve().parent.parent / "src" / "babble"

if _SRC_PACKAGE.is_dir():
    __path__.append(str(_SRC_PACKAGE))
