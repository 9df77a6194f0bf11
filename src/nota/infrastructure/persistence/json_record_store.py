"""JSON-file-backed implementation of RecordStore.

All tables live in one JSON document.  The file is re-read when an
outermost atomic block opens and rewritten when it completes, so a failed
block leaves the file untouched.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from nota.infrastructure.persistence.memory_record_store import MemoryRecordStore
from nota.infrastructure.persistence.record_store import SCHEMA, StoreError, TableSpec

logger = logging.getLogger(__name__)


class JsonRecordStore(MemoryRecordStore):

    def __init__(
        self,
        file_path: Path,
        schema: Sequence[TableSpec] = SCHEMA,
        timeout: float = 5.0,
    ) -> None:
        super().__init__(schema=schema, timeout=timeout)
        self._file_path = file_path
        self._ensure_file()

    # --- MemoryRecordStore hooks ----------------------------------------------

    def _begin(self) -> None:
        raw = self._load_raw()
        tables = raw.get("tables", {})
        sequences = raw.get("sequences", {})
        self._tables = {name: list(tables.get(name, [])) for name in self._specs}
        self._sequences = {name: int(sequences.get(name, 0)) for name in self._specs}

    def _commit(self) -> None:
        self._persist_raw({"tables": self._tables, "sequences": self._sequences})

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreError(f"cannot read {self._file_path}: {exc}") from exc

    def _persist_raw(self, data: dict) -> None:
        # Write to a sibling file first so a crash never leaves half a document.
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            raise StoreError(f"cannot write {self._file_path}: {exc}") from exc
        logger.debug("Persisted record store to %s", self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._persist_raw({"tables": {}, "sequences": {}})
