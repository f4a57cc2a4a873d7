"""Spreadsheet adapters."""

from .pandas_reader import PandasSpreadsheetReader

__all__ = ["PandasSpreadsheetReader"]
