"""
Put `src` on sys.path so pytest runs from a checkout without `pip install -e .`,
and keep the repo root importable for the shared `tests.helpers` builders.
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).parent.resolve()
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
