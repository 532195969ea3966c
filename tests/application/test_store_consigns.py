"""Tests for consign operations of AppDataStore."""

import asyncio

import pytest

from fromagerie.application.dto import ConsignTransaction
from fromagerie.domain.exceptions import BackendError, ValidationError
from fromagerie.domain.model.client import Client
from fromagerie.domain.model.consign import ConsignBalance, ConsignItem, ConsignType
from fromagerie.domain.service.consign_ledger import build_totals_from_movements
from tests.fakes import Backend, loaded_store, movement


def _setup(movements=None):
    backend = Backend(
        clients=[Client(id="c1", name="Rasoa"), Client(id="c2", name="Rabe")],
        consign_types=[ConsignType(id="jar", label="Bocal"), ConsignType(id="bottle", label="Bouteille")],
        movements=movements if movements is not None else [movement("c1", "jar", 5)],
    )
    return backend, loaded_store(backend)


def _as_dict(totals):
    return {b.key: b.quantity for b in totals}


def _tx(client_id, note=None, **quantities):
    return ConsignTransaction(
        client_id=client_id,
        items=[ConsignItem(type_id, qty) for type_id, qty in quantities.items()],
        note=note,
    )


class TestConsignTypes:

    def test_add_sorted_by_label(self):
        _, store = _setup()
        asyncio.run(store.add_consign_type(" Caisse "))
        assert [t.label for t in store.consign_types] == ["Bocal", "Bouteille", "Caisse"]

    def test_label_required(self):
        backend, store = _setup()
        with pytest.raises(ValidationError):
            asyncio.run(store.add_consign_type(""))
        assert backend.consign_types.calls == ["list_all"]

    def test_remove_drops_movements_and_balances(self):
        backend, store = _setup([movement("c1", "jar", 5), movement("c1", "bottle", 2)])
        asyncio.run(store.remove_consign_type("jar"))
        assert [t.id for t in store.consign_types] == ["bottle"]
        assert store.consign_totals == (ConsignBalance("c1", "bottle", 2),)
        assert all(m.type_id != "jar" for m in backend.movements.rows)

    def test_remove_failure_keeps_type_and_resyncs(self):
        backend, store = _setup([movement("c1", "jar", 5), movement("c1", "bottle", 2)])
        backend.consign_types.fail_on.add("remove")
        with pytest.raises(BackendError):
            asyncio.run(store.remove_consign_type("jar"))
        assert "jar" in {t.id for t in store.consign_types}
        assert _as_dict(store.consign_totals) == {("c1", "bottle"): 2}


class TestAssignAndReturn:

    def test_return_then_over_return(self):
        backend, store = _setup()

        asyncio.run(store.return_consigns(_tx("c1", jar=3)))
        assert store.outstanding_for("c1") == {"jar": 2}

        with pytest.raises(ValidationError, match="only 2 outstanding"):
            asyncio.run(store.return_consigns(_tx("c1", jar=3)))
        assert store.outstanding_for("c1") == {"jar": 2}
        assert backend.movements.calls.count("add_many") == 1

    def test_assign_writes_signed_movements(self):
        backend, store = _setup([])
        stored = asyncio.run(store.assign_consigns(_tx("c2", note="  livraison ", jar=2, bottle=1)))
        assert [(m.type_id, m.quantity, m.note) for m in stored] == [
            ("jar", 2, "livraison"), ("bottle", 1, "livraison"),
        ]
        assert all(m.id is not None for m in stored)
        assert store.outstanding_for("c2") == {"jar": 2, "bottle": 1}

    def test_return_writes_negative_quantities(self):
        backend, store = _setup()
        asyncio.run(store.return_consigns(_tx("c1", jar=1)))
        assert backend.movements.rows[-1].quantity == -1

    def test_short_return_is_rejected_in_full(self):
        backend, store = _setup([movement("c1", "jar", 5), movement("c1", "bottle", 1)])
        before = store.consign_totals
        with pytest.raises(ValidationError, match="bottle"):
            asyncio.run(store.return_consigns(_tx("c1", jar=2, bottle=2)))
        assert "add_many" not in backend.movements.calls
        assert store.consign_totals == before

    def test_backend_failure_leaves_balances(self):
        backend, store = _setup()
        backend.movements.fail_on.add("add_many")
        with pytest.raises(BackendError):
            asyncio.run(store.assign_consigns(_tx("c1", jar=1)))
        assert store.outstanding_for("c1") == {"jar": 5}

    def test_nothing_to_record(self):
        backend, store = _setup()
        with pytest.raises(ValidationError, match="At least one consign quantity"):
            asyncio.run(store.assign_consigns(_tx("c1", jar=0)))
        assert "add_many" not in backend.movements.calls

    def test_concurrent_assigns_both_land(self):
        _, store = _setup([])

        async def both():
            await asyncio.gather(
                store.assign_consigns(_tx("c1", jar=2)),
                store.assign_consigns(_tx("c1", jar=3)),
            )

        asyncio.run(both())
        assert store.outstanding_for("c1") == {"jar": 5}

    def test_incremental_balances_match_the_log(self):
        backend, store = _setup()
        asyncio.run(store.assign_consigns(_tx("c2", jar=4, bottle=2)))
        asyncio.run(store.return_consigns(_tx("c1", jar=5)))
        asyncio.run(store.return_consigns(_tx("c2", bottle=1)))
        asyncio.run(store.assign_consigns(_tx("c1", bottle=3)))

        expected = _as_dict(build_totals_from_movements(backend.movements.rows))
        assert _as_dict(store.consign_totals) == expected
        asyncio.run(store.refresh_consign_totals())
        assert _as_dict(store.consign_totals) == expected
