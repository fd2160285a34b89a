"""Spreadsheet import of historical consumption data."""

from .historical_parser import HistoricalDataError, HistoricalDataParser, load_historical_data

__all__ = ["HistoricalDataError", "HistoricalDataParser", "load_historical_data"]
