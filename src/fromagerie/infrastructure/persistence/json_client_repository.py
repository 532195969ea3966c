"""JSON-file-backed implementation of ClientRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from fromagerie.domain.model.client import Client
from fromagerie.domain.repository.client_repository import ClientRepository
from fromagerie.infrastructure.persistence.json_table import JsonTable


class JsonClientRepository(ClientRepository):

    def __init__(self, file_path: Path) -> None:
        self._table = JsonTable(file_path)

    async def list_all(self) -> list[Client]:
        clients = [self._to_domain(raw) for raw in self._table.load()]
        return sorted(clients, key=lambda c: c.sort_key)

    async def add(self, client: Client) -> Client:
        records = self._table.load()
        raw = {
            "id": JsonTable.new_id(),
            "name": client.name,
            "contact": client.contact,
            "created_at": JsonTable.now(),
        }
        records.append(raw)
        self._table.persist(records)
        return self._to_domain(raw)

    async def remove(self, client_id: str) -> None:
        self._table.persist([raw for raw in self._table.load() if raw["id"] != client_id])

    @staticmethod
    def _to_domain(raw: dict) -> Client:
        return Client(
            id=raw["id"],
            name=raw["name"],
            contact=raw.get("contact"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
