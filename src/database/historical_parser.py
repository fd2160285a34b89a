"""
Historical consumption workbook parser.

Reads recorded (RPM, consumption) pairs from an Excel workbook. Uses
column-index-based mapping: RPM in column L and consumption (mt/h) in
column M of the "data" sheet, with the first row reserved for headers.
Rows where either cell is missing or non-numeric are skipped.
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from src.fuel.historical import HistoricalPoint

logger = logging.getLogger(__name__)

# 0-based pandas column positions when read with header=None
RPM_COLUMN = 11  # Column L
CONSUMPTION_COLUMN = 12  # Column M

# Row 0 holds headers
DATA_START_ROW = 1

DEFAULT_SHEET = "data"


class HistoricalDataError(ValueError):
    """Workbook cannot be read as historical consumption data."""


def _safe_float(value: Any) -> Optional[float]:
    """Convert value to float, returning None for NaN/Infinity/non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value or value.lower() in ("nan", "n/a", "-"):
            return None
    try:
        val = float(value)
    except (ValueError, TypeError):
        return None

    if math.isnan(val) or math.isinf(val):
        return None
    return val


class HistoricalDataParser:
    """Parse historical (RPM, consumption) points from an Excel workbook."""

    def __init__(
        self,
        excel_file: Path,
        rpm_column: int = RPM_COLUMN,
        consumption_column: int = CONSUMPTION_COLUMN,
    ):
        self.excel_file = Path(excel_file)
        if not self.excel_file.exists():
            raise FileNotFoundError(f"Historical data file not found: {self.excel_file}")

        self.rpm_column = rpm_column
        self.consumption_column = consumption_column
        self._points: List[HistoricalPoint] = []
        self._skipped = 0

    @property
    def points(self) -> List[HistoricalPoint]:
        return list(self._points)

    @property
    def skipped(self) -> int:
        return self._skipped

    def parse(self, sheet_name: Optional[str] = None) -> List[HistoricalPoint]:
        """Parse historical points from the specified sheet."""
        sheet = sheet_name or DEFAULT_SHEET
        logger.info(f"Parsing historical data: {self.excel_file} sheet={sheet}")

        try:
            available_sheets = pd.ExcelFile(self.excel_file).sheet_names
        except Exception as e:
            raise HistoricalDataError(f"Cannot read Excel file: {e}") from e

        if sheet not in available_sheets:
            raise HistoricalDataError(
                f"Sheet '{sheet}' not found. Available: {available_sheets}"
            )

        df = pd.read_excel(self.excel_file, sheet_name=sheet, header=None)
        logger.debug(f"Raw shape: {df.shape}")

        self._points = []
        self._skipped = 0
        for row_idx in range(DATA_START_ROW, len(df)):
            row = df.iloc[row_idx]
            rpm = _safe_float(self._cell(row, self.rpm_column))
            consumption = _safe_float(self._cell(row, self.consumption_column))
            if rpm is None or consumption is None:
                self._skipped += 1
                continue
            self._points.append(HistoricalPoint(rpm=rpm, consumption_rate=consumption))

        logger.info(
            f"Parsed {len(self._points)} historical points, skipped {self._skipped} rows"
        )
        return self._points

    def _cell(self, row: pd.Series, col_idx: int) -> Any:
        """Get cell value by column index."""
        if col_idx >= len(row):
            return None
        return row.iloc[col_idx]

    def get_statistics(self) -> Dict[str, Any]:
        """Summary of the parsed points."""
        if not self._points:
            return {"total_points": 0, "skipped_rows": self._skipped}

        rpms = [p.rpm for p in self._points]
        rates = [p.consumption_rate for p in self._points]
        return {
            "total_points": len(self._points),
            "skipped_rows": self._skipped,
            "rpm_range": {"min": min(rpms), "max": max(rpms)},
            "consumption_range": {"min": min(rates), "max": max(rates)},
        }


def load_historical_data(
    excel_file: Path,
    sheet_name: Optional[str] = None,
    rpm_column: int = RPM_COLUMN,
    consumption_column: int = CONSUMPTION_COLUMN,
) -> List[HistoricalPoint]:
    """
    Load the default reference workbook, tolerating its absence.

    Returns an empty list (with a warning) when the file is missing or
    unreadable, so the charts still render without historical data.
    """
    try:
        parser = HistoricalDataParser(
            excel_file,
            rpm_column=rpm_column,
            consumption_column=consumption_column,
        )
        return parser.parse(sheet_name=sheet_name)
    except (FileNotFoundError, HistoricalDataError) as e:
        logger.warning(f"Could not load historical data: {e}")
        return []
