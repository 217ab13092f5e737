"""Durable key-value stores used for the cursor, feed list and sitemap snapshots."""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

import gspread
from gspread.utils import rowcol_to_a1

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String values by key. No transactions or conditional writes."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""


class InMemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def put(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore(KeyValueStore):
    """
    Keeps every key in a single JSON object on disk.

    The parsed object is cached and re-read only when the file changes on
    disk. Writes go through a temporary file in the same directory followed
    by os.replace, so a crash mid-write leaves the previous file intact.
    Putting a value that is already stored does not touch the file.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._cache: Optional[Dict[str, str]] = None
        self._cache_mtime: Optional[int] = None

    def _mtime(self) -> Optional[int]:
        try:
            return self.path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    def _read_all(self) -> Dict[str, str]:
        mtime = self._mtime()
        if self._cache is not None and mtime == self._cache_mtime:
            return self._cache

        if mtime is None:
            data = {}
        else:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"Store file {self.path} does not contain a JSON object")

        self._cache, self._cache_mtime = data, mtime
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            data = dict(self._read_all())
            if data.get(key) == value:
                return
            data[key] = value

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".store-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except Exception:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise

            self._cache, self._cache_mtime = data, self._mtime()


class GoogleSheetStore(KeyValueStore):
    """
    ``key | value`` worksheet in a Google Sheet.

    Sheets caps a cell at 50,000 characters, so longer values (sitemap
    snapshots mostly) continue into the cells to the right of column B.
    """

    HEADER = ["key", "value"]
    MAX_CELL_CHARS = 45000

    def __init__(self, client: gspread.Client, spreadsheet_id: str, worksheet_name: str = "KeyValueStore"):
        """
        Initialize the store.

        Args:
            client: Authenticated gspread client
            spreadsheet_id: ID of the Google Sheet
            worksheet_name: Worksheet holding the key/value rows, created if missing
        """
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.worksheet_name = worksheet_name
        self._worksheet = None

    def _get_worksheet(self) -> gspread.Worksheet:
        if self._worksheet is not None:
            return self._worksheet

        sheet = self.client.open_by_key(self.spreadsheet_id)
        try:
            ws = sheet.worksheet(self.worksheet_name)
        except gspread.exceptions.WorksheetNotFound:
            logger.info(f"📝 Worksheet '{self.worksheet_name}' not found. Creating it.")
            ws = sheet.add_worksheet(title=self.worksheet_name, rows="1000", cols="2")
            ws.append_row(self.HEADER)

        self._worksheet = ws
        return ws

    def _find_row(self, ws: gspread.Worksheet, key: str) -> Optional[int]:
        keys = ws.col_values(1)
        # Row 1 is the header
        for row_number, existing in enumerate(keys[1:], start=2):
            if existing == key:
                return row_number
        return None

    def _split(self, value: str) -> List[str]:
        size = self.MAX_CELL_CHARS
        return [value[i:i + size] for i in range(0, len(value), size)] or [""]

    def get(self, key: str) -> Optional[str]:
        ws = self._get_worksheet()
        row_number = self._find_row(ws, key)
        if row_number is None:
            return None
        return "".join(ws.row_values(row_number)[1:])

    def put(self, key: str, value: str) -> None:
        ws = self._get_worksheet()
        row = [key] + self._split(value)

        if ws.col_count < len(row):
            ws.add_cols(len(row) - ws.col_count)

        row_number = self._find_row(ws, key)
        if row_number is None:
            ws.append_row(row, value_input_option="RAW")
            return

        # Blank out continuation cells left over from a longer previous value
        old_width = len(ws.row_values(row_number))
        row += [""] * (old_width - len(row))
        cell_range = f"A{row_number}:{rowcol_to_a1(row_number, len(row))}"
        ws.update(range_name=cell_range, values=[row], value_input_option="RAW")