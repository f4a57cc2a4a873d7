"""Spreadsheet adapter using pandas."""

import io
import logging
from pathlib import PurePath

import pandas as pd

from ...domain.errors import SpreadsheetFormatError
from ...domain.models import UploadedFile
from ...ports.spreadsheet import SpreadsheetReader

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".csv", ".txt"}


def _clean(value: object) -> object:
    # pandas marks empty cells with NaN/NaT
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return value


class PandasSpreadsheetReader(SpreadsheetReader):
    """Reads CSV uploads with read_csv and workbooks with read_excel."""

    def read_rows(self, upload: UploadedFile) -> list[list[object]]:
        suffix = PurePath(upload.name).suffix.lower()
        buffer = io.BytesIO(upload.content)
        try:
            if suffix in TEXT_SUFFIXES:
                frame = pd.read_csv(
                    buffer, header=None, dtype=object, skip_blank_lines=True
                )
            else:
                # First sheet only
                frame = pd.read_excel(buffer, sheet_name=0, header=None, dtype=object)
        except pd.errors.EmptyDataError:
            return []
        except Exception as e:
            raise SpreadsheetFormatError(f"Could not read {upload.name} as a spreadsheet: {e}") from e

        logger.debug(f"Read {len(frame)} rows from {upload.name}")
        return [[_clean(v) for v in row] for row in frame.itertuples(index=False, name=None)]
