"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from pathlib import Path

from fromagerie.domain.exceptions import EntityNotFoundError
from fromagerie.domain.model.product import Product
from fromagerie.domain.model.value_objects import Money, QuantityType
from fromagerie.domain.repository.product_repository import ProductRepository
from fromagerie.infrastructure.persistence.json_table import JsonTable


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._table = JsonTable(file_path)

    # --- ProductRepository interface ------------------------------------------

    async def list_all(self) -> list[Product]:
        products = [self._to_domain(raw) for raw in self._table.load()]
        return sorted(products, key=lambda p: p.name.casefold())

    async def add(self, product: Product) -> Product:
        records = self._table.load()
        stored = replace(product, id=JsonTable.new_id())
        records.append(self._to_raw(stored))
        self._table.persist(records)
        return stored

    async def update(self, product: Product) -> Product:
        records = self._table.load()
        for i, raw in enumerate(records):
            if raw["id"] == product.id:
                records[i] = self._to_raw(product)
                self._table.persist(records)
                return product
        raise EntityNotFoundError(f"Product with ID '{product.id}' not found")

    async def remove(self, product_id: str) -> None:
        records = [raw for raw in self._table.load() if raw["id"] != product_id]
        self._table.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "quantity_type": product.quantity_type.value,
            "multiple_of": product.multiple_of,
            "step": product.step,
            "comment_enabled": product.comment_enabled,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        quantity_type = QuantityType(raw["quantity_type"])
        return Product(
            id=raw["id"],
            name=raw["name"],
            price=Money(Decimal(raw["price"])),
            quantity_type=quantity_type,
            multiple_of=raw.get("multiple_of"),
            comment_enabled=bool(raw.get("comment_enabled")),
            step=raw.get("step") or quantity_type.default_step,
        )
