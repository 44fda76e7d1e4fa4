"""Spreadsheet reader turning uploaded files into raw records."""

import io
from pathlib import PurePath
from typing import Protocol

import pandas as pd

from diet_insights.domain.rows import DietLogFormatError

EXCEL_SUFFIXES = frozenset({".xlsx", ".xlsm"})
CSV_SUFFIXES = frozenset({".csv"})


class SpreadsheetReader(Protocol):
    """Interface for reading a diet plan file into raw records."""

    def read(self, content: bytes, filename: str) -> list[dict[str, object]]:
        """Return the first sheet as one dict per data row."""


class PandasSpreadsheetReader(SpreadsheetReader):
    """Pandas-backed reader for Excel and CSV diet plans."""

    def read(self, content: bytes, filename: str) -> list[dict[str, object]]:
        """Read the first sheet, keeping every cell as text."""
        suffix = PurePath(filename).suffix.lower()
        if suffix not in EXCEL_SUFFIXES | CSV_SUFFIXES:
            raise DietLogFormatError(
                f"Unsupported file type '{suffix or filename}'. "
                "Upload an .xlsx or .csv diet plan."
            )
        try:
            if suffix in CSV_SUFFIXES:
                frame = pd.read_csv(
                    io.BytesIO(content), dtype=str, keep_default_na=False
                )
            else:
                frame = pd.read_excel(
                    io.BytesIO(content),
                    sheet_name=0,
                    dtype=str,
                    keep_default_na=False,
                    engine="openpyxl",
                )
        except Exception as exc:
            raise DietLogFormatError(f"Error parsing diet plan file: {exc}") from exc
        return frame.to_dict(orient="records")
