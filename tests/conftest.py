from pathlib import Path
import os
import sys

# Headless Qt for widget tests; must be set before QApplication exists
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from core.models import Item  # noqa: E402


def make_item(seq, ts, identity=None, tags=(), width=4, height=3):
    return Item(
        sequence_index=seq,
        timestamp=ts,
        identity=identity or f"{seq}.jpg",
        width=width,
        height=height,
        tags=frozenset(tags),
    )


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    return app


@pytest.fixture
def items_three_clusters():
    """Three clusters of two items each, two hours apart."""
    hour = 3_600_000
    return [
        make_item(0, 0, "a0.jpg"),
        make_item(1, 1_000, "a1.jpg"),
        make_item(2, 2 * hour, "b0.jpg"),
        make_item(3, 2 * hour + 1_000, "b1.jpg"),
        make_item(4, 4 * hour, "c0.jpg"),
        make_item(5, 4 * hour + 1_000, "c1.jpg"),
    ]
