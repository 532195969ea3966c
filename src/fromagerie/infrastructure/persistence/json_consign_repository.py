"""JSON-file-backed implementations of the consign repositories."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from fromagerie.domain.model.consign import ConsignMovement, ConsignType
from fromagerie.domain.repository.consign_repository import (
    ConsignMovementRepository,
    ConsignTypeRepository,
)
from fromagerie.infrastructure.persistence.json_table import JsonTable


class JsonConsignTypeRepository(ConsignTypeRepository):

    def __init__(self, file_path: Path) -> None:
        self._table = JsonTable(file_path)

    async def list_all(self) -> list[ConsignType]:
        types = [self._to_domain(raw) for raw in self._table.load()]
        return sorted(types, key=lambda t: t.sort_key)

    async def add(self, consign_type: ConsignType) -> ConsignType:
        records = self._table.load()
        raw = {
            "id": JsonTable.new_id(),
            "label": consign_type.label,
            "created_at": JsonTable.now(),
        }
        records.append(raw)
        self._table.persist(records)
        return self._to_domain(raw)

    async def remove(self, type_id: str) -> None:
        self._table.persist([raw for raw in self._table.load() if raw["id"] != type_id])

    @staticmethod
    def _to_domain(raw: dict) -> ConsignType:
        return ConsignType(
            id=raw["id"],
            label=raw["label"],
            created_at=datetime.fromisoformat(raw["created_at"]),
        )


class JsonConsignMovementRepository(ConsignMovementRepository):

    def __init__(self, file_path: Path) -> None:
        self._table = JsonTable(file_path)

    async def list_all(self) -> list[ConsignMovement]:
        return [self._to_domain(raw) for raw in self._table.load()]

    async def add_many(self, movements: list[ConsignMovement]) -> list[ConsignMovement]:
        records = self._table.load()
        created_at = JsonTable.now()
        new_rows = [
            {
                "id": JsonTable.new_id(),
                "client_id": m.client_id,
                "type_id": m.type_id,
                "quantity": m.quantity,
                "note": m.note,
                "created_at": created_at,
            }
            for m in movements
        ]
        records.extend(new_rows)
        self._table.persist(records)
        return [self._to_domain(raw) for raw in new_rows]

    async def remove_for_client(self, client_id: str) -> None:
        self._table.persist(
            [raw for raw in self._table.load() if raw["client_id"] != client_id]
        )

    async def remove_for_type(self, type_id: str) -> None:
        self._table.persist(
            [raw for raw in self._table.load() if raw["type_id"] != type_id]
        )

    @staticmethod
    def _to_domain(raw: dict) -> ConsignMovement:
        return ConsignMovement(
            id=raw["id"],
            client_id=raw["client_id"],
            type_id=raw["type_id"],
            quantity=int(raw["quantity"]),
            note=raw.get("note"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
