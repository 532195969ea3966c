"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, hosted backend)
live in the infrastructure layer.  Every method is a coroutine because
the tables live behind a remote backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fromagerie.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    async def list_all(self) -> list[Product]:
        """Return every product in the catalog, ordered by name."""

    @abstractmethod
    async def add(self, product: Product) -> Product:
        """Insert a product and return the stored row (with its ID)."""

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """Replace the product with the same ID and return the stored row."""

    @abstractmethod
    async def remove(self, product_id: str) -> None:
        """Delete a product by ID."""
