"""Abstract repositories for consign types and the consign movement log."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fromagerie.domain.model.consign import ConsignMovement, ConsignType


class ConsignTypeRepository(ABC):

    @abstractmethod
    async def list_all(self) -> list[ConsignType]:
        """Return every consign type ordered by label."""

    @abstractmethod
    async def add(self, consign_type: ConsignType) -> ConsignType:
        """Insert a consign type and return the stored row."""

    @abstractmethod
    async def remove(self, type_id: str) -> None:
        """Delete a consign type by ID."""


class ConsignMovementRepository(ABC):
    """Append-only log; rows only disappear through cascading deletes."""

    @abstractmethod
    async def list_all(self) -> list[ConsignMovement]:
        """Return every movement."""

    @abstractmethod
    async def add_many(self, movements: list[ConsignMovement]) -> list[ConsignMovement]:
        """Insert movements in one write and return the stored rows."""

    @abstractmethod
    async def remove_for_client(self, client_id: str) -> None:
        """Delete every movement of a client."""

    @abstractmethod
    async def remove_for_type(self, type_id: str) -> None:
        """Delete every movement of a consign type."""
