"""A backend table stored as a JSON array of row objects.

Shared by the JSON-file-backed repositories.  I/O and decoding failures
surface as BackendError, the same way a hosted backend's errors would.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from fromagerie.domain.exceptions import BackendError

logger = logging.getLogger(__name__)


class JsonTable:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    @property
    def name(self) -> str:
        return self._file_path.stem

    def load(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Reading table %s failed: %s", self.name, exc)
            raise BackendError(f"Cannot read table '{self.name}': {exc}") from exc

    def persist(self, records: list[dict]) -> None:
        try:
            self._file_path.write_text(
                json.dumps(records, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            logger.error("Writing table %s failed: %s", self.name, exc)
            raise BackendError(f"Cannot write table '{self.name}': {exc}") from exc

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
