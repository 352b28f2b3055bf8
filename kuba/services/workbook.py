"""Workbook sources feeding the catalog builder."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Any, Mapping, Protocol

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..utils import cell_text, is_blank

logger = logging.getLogger(__name__)

Row = dict[str, Any]
Sheets = Mapping[str, list[Row]]


class WorkbookError(RuntimeError):
    """Raised when a workbook exists but cannot be parsed."""


class WorkbookSource(Protocol):
    """Capability exposing a workbook as named sheets of row records."""

    def exists(self) -> bool:
        ...

    def load(self) -> Sheets:
        ...


class ExcelWorkbookSource:
    """Read ``.xlsx`` workbooks from disk using openpyxl."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> Sheets:
        """Return every sheet keyed by name, rows keyed by header text."""

        try:
            workbook = load_workbook(self._path, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
            raise WorkbookError(f"Failed to read workbook {self._path}: {exc}") from exc

        try:
            sheets: dict[str, list[Row]] = {}
            for worksheet in workbook.worksheets:
                sheets[str(worksheet.title)] = self._sheet_rows(worksheet)
            return sheets
        except Exception as exc:
            raise WorkbookError(f"Failed to parse workbook {self._path}: {exc}") from exc
        finally:
            workbook.close()

    @staticmethod
    def _sheet_rows(worksheet: Any) -> list[Row]:
        rows = worksheet.iter_rows(values_only=True)
        header = next((values for values in rows if not _is_blank_row(values)), None)
        if header is None:
            return []
        columns = _header_columns(header)
        records: list[Row] = []
        for values in rows:
            if _is_blank_row(values):
                continue
            record: Row = {}
            for position, name in columns:
                value = values[position] if position < len(values) else None
                record[name] = "" if value is None else value
            records.append(record)
        return records


def _is_blank_row(values: Any) -> bool:
    return values is None or all(is_blank(value) for value in values)


def _header_columns(header: Any) -> list[tuple[int, str]]:
    """Map column positions to names, suffixing repeats as ``name_1``, ``name_2``."""

    seen: dict[str, int] = {}
    columns: list[tuple[int, str]] = []
    for position, raw in enumerate(header):
        name = cell_text(raw)
        if not name:
            continue
        repeats = seen.get(name, 0)
        seen[name] = repeats + 1
        columns.append((position, name if repeats == 0 else f"{name}_{repeats}"))
    return columns


class InMemoryWorkbookSource:
    """Serve pre-parsed sheets, or simulate a missing or broken source."""

    def __init__(
        self,
        sheets: Sheets | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self._sheets = sheets
        self._error = error

    def exists(self) -> bool:
        return self._sheets is not None or self._error is not None

    def load(self) -> Sheets:
        if self._error is not None:
            raise self._error
        return self._sheets or {}
