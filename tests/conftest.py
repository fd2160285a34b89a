"""
Shared pytest fixtures for ROB Planner tests.

Environment variables are set at module-import time so both settings
objects see them before api.* is imported anywhere.
"""

import io
import os

import pytest
from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# Section 1: Environment setup (before ANY api.* imports)
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOAD_HISTORICAL_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")


# ---------------------------------------------------------------------------
# Section 2: Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app_state():
    """Application state emptied before and after each test."""
    from api.state import get_app_state

    state = get_app_state()
    state.sessions.clear()
    state.set_historical([], None)
    yield state
    state.sessions.clear()
    state.set_historical([], None)


@pytest.fixture
def client(app_state):
    """Create a FastAPI TestClient over a clean application state."""
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# Section 3: Historical workbook helpers + fixtures
# ---------------------------------------------------------------------------


def _build_historical_df(pairs, ncols=14):
    """Sheet layout with headers in row 0, RPM in column L and consumption in M."""
    import pandas as pd

    from src.database.historical_parser import CONSUMPTION_COLUMN, RPM_COLUMN

    data = [[None] * ncols for _ in range(len(pairs) + 1)]
    data[0][0] = "Date"
    data[0][RPM_COLUMN] = "RPM"
    data[0][CONSUMPTION_COLUMN] = "HFO (mt/h)"
    for i, (rpm, consumption) in enumerate(pairs):
        data[i + 1][RPM_COLUMN] = rpm
        data[i + 1][CONSUMPTION_COLUMN] = consumption
    return pd.DataFrame(data)


def _build_historical_bytes(pairs, sheet_name="data"):
    """Build Excel file bytes for historical data upload testing."""
    import pandas as pd

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        _build_historical_df(pairs).to_excel(writer, sheet_name=sheet_name, index=False, header=False)
    buf.seek(0)
    return buf.read()


SAMPLE_HISTORICAL_PAIRS = [
    (60, 0.33),
    (70, 0.44),
    ("n/a", 0.5),
    (80, 0.58),
    (90, None),
    (100, 0.96),
]


@pytest.fixture
def sample_historical_bytes():
    """Workbook with 4 valid rows and 2 rows that must be skipped."""
    return _build_historical_bytes(SAMPLE_HISTORICAL_PAIRS)


@pytest.fixture
def sample_historical_file(tmp_path, sample_historical_bytes):
    path = tmp_path / "user_data.xlsx"
    path.write_bytes(sample_historical_bytes)
    return path
