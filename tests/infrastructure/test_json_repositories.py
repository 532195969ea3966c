"""Tests for the JSON-file-backed repositories."""

import asyncio
import json

import pytest

from fromagerie.domain.exceptions import BackendError, EntityNotFoundError
from fromagerie.domain.model.client import Client
from fromagerie.domain.model.consign import ConsignMovement, ConsignType
from fromagerie.domain.model.order import Order, OrderStatus
from fromagerie.domain.model.product import Product
from fromagerie.domain.model.value_objects import Money, QuantityType
from fromagerie.infrastructure.persistence.json_client_repository import JsonClientRepository
from fromagerie.infrastructure.persistence.json_consign_repository import (
    JsonConsignMovementRepository,
    JsonConsignTypeRepository,
)
from fromagerie.infrastructure.persistence.json_order_repository import JsonOrderRepository
from fromagerie.infrastructure.persistence.json_product_repository import JsonProductRepository
from fromagerie.infrastructure.persistence.json_table import JsonTable
from tests.fakes import line_item


class TestJsonTable:

    def test_creates_missing_file(self, tmp_path):
        table = JsonTable(tmp_path / "nested" / "rows.json")
        assert table.load() == []
        assert table.name == "rows"

    def test_corrupt_file_is_a_backend_error(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(BackendError, match="Cannot read table 'rows'"):
            JsonTable(path).load()


class TestJsonProductRepository:

    def test_add_list_update_remove(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "items.json")
        brie = asyncio.run(repo.add(Product.create("Brie", Money.of("20000.5"), "/kg", multiple_of=0.5)))
        asyncio.run(repo.add(Product.create("beurre", Money.of(1200), "/100g")))

        listed = asyncio.run(repo.list_all())
        assert [p.name for p in listed] == ["beurre", "Brie"]
        assert listed[1] == brie

        asyncio.run(repo.update(Product.create("Brie", Money.of(21000), "/kg", product_id=brie.id)))
        assert asyncio.run(repo.list_all())[1].price == Money.of(21000)

        asyncio.run(repo.remove(brie.id))
        assert [p.name for p in asyncio.run(repo.list_all())] == ["beurre"]

    def test_row_format(self, tmp_path):
        path = tmp_path / "items.json"
        asyncio.run(JsonProductRepository(path).add(Product.create("Brie", Money.of(20000), "/500g")))
        (row,) = json.loads(path.read_text(encoding="utf-8"))
        assert row["quantity_type"] == "/500g"
        assert row["price"] == "20000"
        assert row["step"] == 0.5
        assert row["multiple_of"] is None
        assert row["comment_enabled"] is False

    def test_update_unknown(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "items.json")
        with pytest.raises(EntityNotFoundError):
            asyncio.run(repo.update(Product.create("Brie", Money.of(1), "/kg", product_id="ghost")))


class TestJsonOrderRepository:

    def _repo(self, tmp_path):
        return JsonOrderRepository(tmp_path / "orders.json", tmp_path / "order_items.json")

    def _header(self, client_id=None):
        return Order.create("Rasoa", [line_item("Tomme", 5000, 2)], contact="034", client_id=client_id)

    def test_header_and_lines(self, tmp_path):
        repo = self._repo(tmp_path)
        header = asyncio.run(repo.add(self._header()))
        assert header.id is not None
        assert header.items == ()

        lines = [line_item("Tomme", 5000, 2), line_item("Beurre", 1200, 2.5, QuantityType.PER_100G)]
        stored = asyncio.run(repo.add_line_items(header.id, lines))
        assert all(line.id is not None for line in stored)

        (order,) = asyncio.run(repo.list_all())
        assert order.id == header.id
        assert order.contact == "034"
        assert order.status == OrderStatus.NEW
        assert [(i.product_name, i.quantity, i.unit_price) for i in order.items] == [
            ("Tomme", 2, Money.of(5000)),
            ("Beurre", 2.5, Money.of(1200)),
        ]

    def test_line_items_need_a_header(self, tmp_path):
        with pytest.raises(EntityNotFoundError):
            asyncio.run(self._repo(tmp_path).add_line_items("ghost", [line_item("Tomme", 5000, 1)]))

    def test_status_clear_client_and_remove(self, tmp_path):
        repo = self._repo(tmp_path)
        header = asyncio.run(repo.add(self._header(client_id="c1")))
        asyncio.run(repo.add_line_items(header.id, [line_item("Tomme", 5000, 1)]))

        asyncio.run(repo.update_status(header.id, OrderStatus.IN_PROGRESS))
        asyncio.run(repo.clear_client("c1"))
        (order,) = asyncio.run(repo.list_all())
        assert order.status == OrderStatus.IN_PROGRESS
        assert order.client_id is None

        asyncio.run(repo.remove(header.id))
        assert asyncio.run(repo.list_all()) == []
        assert json.loads((tmp_path / "order_items.json").read_text(encoding="utf-8")) == []

    def test_clear_client_is_repeatable(self, tmp_path):
        repo = self._repo(tmp_path)
        asyncio.run(repo.add(self._header(client_id="c1")))
        asyncio.run(repo.clear_client("c1"))
        asyncio.run(repo.clear_client("c1"))
        assert asyncio.run(repo.list_all())[0].client_id is None

    def test_unknown_status_update(self, tmp_path):
        with pytest.raises(EntityNotFoundError):
            asyncio.run(self._repo(tmp_path).update_status("ghost", OrderStatus.NEW))

    def test_newest_first(self, tmp_path):
        repo = self._repo(tmp_path)
        rows = [
            {"id": "old", "customer_name": "A", "status": "nouvelle", "created_at": "2024-05-01T08:00:00+00:00"},
            {"id": "new", "customer_name": "B", "status": "en_cours", "created_at": "2024-05-02T08:00:00+00:00"},
        ]
        (tmp_path / "orders.json").write_text(json.dumps(rows), encoding="utf-8")
        assert [o.id for o in asyncio.run(repo.list_all())] == ["new", "old"]


class TestJsonClientAndConsignRepositories:

    def test_clients(self, tmp_path):
        repo = JsonClientRepository(tmp_path / "clients.json")
        rasoa = asyncio.run(repo.add(Client.create("Rasoa", "034")))
        asyncio.run(repo.add(Client.create("atelier")))
        assert [c.name for c in asyncio.run(repo.list_all())] == ["atelier", "Rasoa"]
        asyncio.run(repo.remove(rasoa.id))
        asyncio.run(repo.remove(rasoa.id))
        assert [c.name for c in asyncio.run(repo.list_all())] == ["atelier"]

    def test_consign_types(self, tmp_path):
        repo = JsonConsignTypeRepository(tmp_path / "consign_types.json")
        jar = asyncio.run(repo.add(ConsignType.create("Bocal")))
        assert asyncio.run(repo.list_all()) == [jar]
        asyncio.run(repo.remove(jar.id))
        assert asyncio.run(repo.list_all()) == []

    def test_movements(self, tmp_path):
        repo = JsonConsignMovementRepository(tmp_path / "consign_movements.json")
        stored = asyncio.run(repo.add_many([
            ConsignMovement(id=None, client_id="c1", type_id="jar", quantity=3, note="livraison"),
            ConsignMovement(id=None, client_id="c2", type_id="jar", quantity=-1),
            ConsignMovement(id=None, client_id="c1", type_id="bottle", quantity=2),
        ]))
        assert all(m.id for m in stored)
        assert asyncio.run(repo.list_all()) == stored

        asyncio.run(repo.remove_for_client("c1"))
        assert [(m.client_id, m.quantity) for m in asyncio.run(repo.list_all())] == [("c2", -1)]

        asyncio.run(repo.remove_for_type("jar"))
        assert asyncio.run(repo.list_all()) == []
