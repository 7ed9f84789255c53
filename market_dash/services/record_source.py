from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from market_dash.core.exceptions import FetchFailure, MutationFailure
from market_dash.core.records import normalise_id
from market_dash.services.storage import StorageBackend

logger = logging.getLogger(__name__)


class RecordSource(ABC):
    """
    The backend tables the dashboard reads from and deletes from.
    Implementations wrap any transport error in FetchFailure / MutationFailure.
    """

    @abstractmethod
    def fetch(self, table: str) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def delete(self, table: str, record_id: Any) -> None:
        pass


class JsonTableSource(RecordSource):
    """
    Tables stored as '<table>.json' arrays of rows in a StorageBackend.
    """

    def __init__(self, storage: StorageBackend):
        self.storage = storage
        # delete is a read-modify-write of the whole table file
        self._write_lock = threading.Lock()

    @staticmethod
    def _path(table: str) -> str:
        return f"{table}.json"

    def _read_rows(self, table: str) -> List[Any]:
        path = self._path(table)
        if not self.storage.exists(path):
            raise FetchFailure(f"Table '{table}' not found")
        try:
            rows = json.loads(self.storage.read_bytes(path).decode("utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise FetchFailure(f"Table '{table}' could not be read: {e}") from e
        if not isinstance(rows, list):
            raise FetchFailure(f"Table '{table}' must hold a JSON array of rows")
        return rows

    def fetch(self, table: str) -> List[Dict[str, Any]]:
        rows = self._read_rows(table)
        logger.info("Fetched table", extra={"table": table, "n_rows": len(rows)})
        return rows

    def delete(self, table: str, record_id: Any) -> None:
        with self._write_lock:
            self._delete_row(table, record_id)

    def _delete_row(self, table: str, record_id: Any) -> None:
        key = normalise_id(record_id)
        try:
            rows = self._read_rows(table)
        except FetchFailure as e:
            raise MutationFailure(str(e)) from e

        remaining = [
            row for row in rows
            if not (isinstance(row, dict) and normalise_id(row.get("id")) == key)
        ]
        if len(remaining) == len(rows):
            raise MutationFailure(f"No row with id {record_id!r} in '{table}'")

        try:
            payload = json.dumps(remaining, indent=2, ensure_ascii=False).encode("utf-8")
            self.storage.write_bytes(self._path(table), payload)
        except OSError as e:
            raise MutationFailure(f"Table '{table}' could not be written: {e}") from e

        logger.info("Deleted row", extra={"table": table, "record_id": key})
