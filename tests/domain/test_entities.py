"""Unit tests for products, clients, consign types and users."""

import pytest

from fromagerie.domain.exceptions import ValidationError
from fromagerie.domain.model.client import Client
from fromagerie.domain.model.consign import ConsignType
from fromagerie.domain.model.product import Product
from fromagerie.domain.model.user import User
from fromagerie.domain.model.value_objects import Money, QuantityType


class TestProductCreate:

    def test_happy_path(self):
        p = Product.create(" Tomme ", Money.of(5000), "/kg", multiple_of=0.5, comment_enabled=True)
        assert p.name == "Tomme"
        assert p.quantity_type is QuantityType.PER_KG
        assert p.multiple_of == 0.5
        assert p.comment_enabled is True
        assert p.id is None

    def test_name_required(self):
        with pytest.raises(ValidationError, match="Product name is required"):
            Product.create("  ", Money.of(5000), "/pc")

    def test_unknown_quantity_type_rejected(self):
        with pytest.raises(ValidationError):
            Product.create("Tomme", Money.of(5000), "/l")

    @pytest.mark.parametrize("multiple", [0, -2, None, float("nan")])
    def test_non_positive_multiple_is_cleared(self, multiple):
        assert Product.create("Tomme", Money.of(5000), "/pc", multiple_of=multiple).multiple_of is None

    def test_missing_step_defaults_to_type(self):
        assert Product.create("Beurre", Money.of(1200), "/100g").step == 1
        assert Product.create("Brie", Money.of(1200), "/kg", step=-1).step == 0.1

    def test_keeps_the_given_id(self):
        assert Product.create("Tomme", Money.of(5000), "/pc", product_id="p9").id == "p9"


class TestClient:

    def test_create_strips(self):
        client = Client.create("  Hotel Colbert ", "  ")
        assert client.name == "Hotel Colbert"
        assert client.contact is None

    def test_name_required(self):
        with pytest.raises(ValidationError, match="Client name is required"):
            Client.create("")

    def test_sort_key_ignores_case(self):
        names = [c.name for c in sorted([Client.create("bakery"), Client.create("Atelier")], key=lambda c: c.sort_key)]
        assert names == ["Atelier", "bakery"]


class TestConsignType:

    def test_label_required(self):
        with pytest.raises(ValidationError, match="Consign type label is required"):
            ConsignType.create(" ")

    def test_create_strips(self):
        assert ConsignType.create(" Bocal 500ml ").label == "Bocal 500ml"


class TestUser:

    def test_role_admin(self):
        assert User(id="u1", app_metadata={"role": "admin"}).is_admin

    def test_flag_admin(self):
        assert User(id="u1", user_metadata={"is_admin": True}).is_admin
        assert User(id="u1", app_metadata={"is_admin": True}).is_admin

    def test_truthy_string_is_not_admin(self):
        assert not User(id="u1", user_metadata={"is_admin": "yes"}).is_admin

    def test_plain_user(self):
        assert not User(id="u1", email="a@b.mg").is_admin

    def test_display_name_fallbacks(self):
        assert User(id="u1", user_metadata={"display_name": " Rasoa "}).display_name == "Rasoa"
        assert User(id="u1", user_metadata={"full_name": "Rabe"}).display_name == "Rabe"
        assert User(id="u1", email="a@b.mg").display_name == "a@b.mg"
        assert User(id="u1").display_name == "User"

    def test_contact_fallbacks(self):
        assert User(id="u1", phone="032", user_metadata={"phone": "034"}).contact == "034"
        assert User(id="u1", phone="032").contact == "032"
        assert User(id="u1", email="a@b.mg").contact == "a@b.mg"
        assert User(id="u1").contact == ""
