"""Make ``import termfm`` resolve to ``src/`` without an installed package."""

import sys
from pathlib import Path

SRC_ROOT = str(Path(__file__).resolve().parent.parent / "src")

if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)
