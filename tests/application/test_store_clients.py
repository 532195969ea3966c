"""Tests for client operations of AppDataStore, including the removal cascade."""

import asyncio

import pytest

from fromagerie.domain.exceptions import BackendError, ValidationError
from fromagerie.domain.model.client import Client
from fromagerie.domain.model.consign import ConsignBalance, ConsignType
from tests.fakes import Backend, line_item, loaded_store, movement, stored_order


def _setup():
    backend = Backend(
        orders=[
            stored_order("Rasoa", [line_item("Tomme", 5000, 1)], client_id="c1"),
            stored_order("Rasoa", [line_item("Brie", 20000, 1)], client_id="c1"),
            stored_order("Rabe", [line_item("Tomme", 5000, 2)], client_id="c2"),
        ],
        clients=[Client(id="c1", name="Rasoa"), Client(id="c2", name="Rabe")],
        consign_types=[ConsignType(id="jar", label="Bocal"), ConsignType(id="bottle", label="Bouteille")],
        movements=[
            movement("c1", "jar", 5),
            movement("c1", "jar", -1),
            movement("c1", "bottle", 2),
            movement("c2", "jar", 1),
        ],
    )
    return backend, loaded_store(backend)


class TestAddClient:

    def test_inserted_in_name_order(self):
        backend, store = _setup()
        client = asyncio.run(store.add_client(" Atelier ", " 034 11 "))
        assert client.name == "Atelier"
        assert client.contact == "034 11"
        assert [c.name for c in store.clients] == ["Atelier", "Rabe", "Rasoa"]
        assert client in backend.clients.rows

    def test_name_required(self):
        backend, store = _setup()
        with pytest.raises(ValidationError, match="Client name is required"):
            asyncio.run(store.add_client("  "))
        assert backend.clients.calls == ["list_all"]


class TestRemoveClient:

    def test_cascade(self):
        backend, store = _setup()
        asyncio.run(store.remove_client("c1"))

        c1_orders = [o for o in store.orders if o.customer_name == "Rasoa"]
        assert len(c1_orders) == 2
        assert all(o.client_id is None for o in c1_orders)
        assert all(h.client_id is None for h in backend.orders.headers if h.customer_name == "Rasoa")
        assert [m for m in backend.movements.rows if m.client_id == "c1"] == []
        assert "c1" not in {c.id for c in store.clients}
        assert store.consign_totals == (ConsignBalance("c2", "jar", 1),)

    def test_other_clients_untouched(self):
        _, store = _setup()
        asyncio.run(store.remove_client("c1"))
        assert [o.client_id for o in store.orders if o.customer_name == "Rabe"] == ["c2"]
        assert store.outstanding_for("c2") == {"jar": 1}

    def test_steps_run_in_dependency_order(self):
        backend, store = _setup()
        asyncio.run(store.remove_client("c1"))
        assert backend.orders.calls[-1] == "clear_client"
        assert backend.movements.calls[-1] == "remove_for_client"
        assert backend.clients.calls[-1] == "remove"

    def test_blank_id_rejected(self):
        backend, store = _setup()
        with pytest.raises(ValidationError, match="A client is required"):
            asyncio.run(store.remove_client(" "))
        assert backend.orders.calls == ["list_all"]

    def test_failure_part_way_keeps_client_and_resyncs_balances(self):
        backend, store = _setup()
        backend.clients.fail_on.add("remove")

        with pytest.raises(BackendError):
            asyncio.run(store.remove_client("c1"))

        # orders detached and movements deleted on the backend, client row kept
        assert "c1" in {c.id for c in store.clients}
        assert store.outstanding_for("c1") == {}
        assert store.consign_totals == (ConsignBalance("c2", "jar", 1),)

    def test_failed_removal_can_be_retried(self):
        backend, store = _setup()
        backend.movements.fail_on.add("remove_for_client")
        with pytest.raises(BackendError):
            asyncio.run(store.remove_client("c1"))
        assert store.outstanding_for("c1") == {"jar": 4, "bottle": 2}

        backend.movements.fail_on.clear()
        asyncio.run(store.remove_client("c1"))
        assert "c1" not in {c.id for c in store.clients}
        assert store.outstanding_for("c1") == {}
