"""Spreadsheet port - interface for turning an upload into rows."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import UploadedFile


class SpreadsheetReader(ABC):
    """Interface for reading the first sheet of an upload."""

    @abstractmethod
    def read_rows(self, upload: "UploadedFile") -> list[list[object]]:
        """Return the sheet as rows of cell values, header row first.

        Empty cells are None.
        """
        pass
