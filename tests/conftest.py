import itertools
import json
import sys
from pathlib import Path

import pytest

# Enforce marker discipline so each test maps to a documented suite category.
ALLOWED_MARKERS = {"web", "buttons", "store", "uploads", "config", "integration"}

# Keep `board`, `board_store` and friends importable when pytest runs from any directory.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "public" / "uploads"


@pytest.fixture
def app(data_dir, upload_dir):
    """Create the Flask app over throwaway data and upload directories."""
    from board import create_app

    app = create_app(
        test_config={
            "TESTING": True,
            "DATA_DIR": str(data_dir),
            "UPLOAD_DIR": str(upload_dir),
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    """Board store shared with the app under test."""
    return app.config["BOARD_STORE"]


@pytest.fixture
def sequential_ids(monkeypatch):
    """Replace millisecond post ids with a deterministic increasing sequence."""
    import board_store

    counter = itertools.count(1_700_000_000_000)
    monkeypatch.setattr(board_store, "timestamp_ms", lambda: next(counter))
    return counter


@pytest.fixture
def read_board(data_dir):
    """Return the raw JSON array stored for a board."""
    def _read(board):
        return json.loads((data_dir / f"{board}.json").read_text(encoding="utf-8"))

    return _read


def pytest_collection_modifyitems(session, config, items):
    unmarked = []
    for item in items:
        # Accept tests carrying any one approved marker; multiple markers are also valid.
        if not ALLOWED_MARKERS.intersection(item.keywords):
            unmarked.append(item.nodeid)

    if unmarked:
        # Fail collection early so CI does not run partially categorized suites.
        joined = "\n".join(f"- {nodeid}" for nodeid in unmarked)
        raise pytest.UsageError(
            "Each test must include at least one approved marker "
            f"({', '.join(sorted(ALLOWED_MARKERS))}).\n"
            "Unmarked tests:\n"
            f"{joined}"
        )
