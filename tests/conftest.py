import sys
from pathlib import Path

# Ensure the project root is on sys.path so `riestex`, `backend` and `main` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from riestex.config import settings


@pytest.fixture(autouse=True)
def _default_highlight_color(monkeypatch):
    """Pin the highlight colour so expected strings don't depend on the environment."""
    monkeypatch.setattr(settings, "HIGHLIGHT_COLOR", "lightgray")
    monkeypatch.setattr(settings, "DECIMALS", 8)
