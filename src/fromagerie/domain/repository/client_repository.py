"""Abstract repository for Client aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fromagerie.domain.model.client import Client


class ClientRepository(ABC):

    @abstractmethod
    async def list_all(self) -> list[Client]:
        """Return every client ordered by name."""

    @abstractmethod
    async def add(self, client: Client) -> Client:
        """Insert a client and return the stored row."""

    @abstractmethod
    async def remove(self, client_id: str) -> None:
        """Delete a client by ID."""
