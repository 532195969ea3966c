"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from fromagerie.application.accounts import AccountService
from fromagerie.application.store import AppDataStore
from fromagerie.config import Settings
from fromagerie.infrastructure.identity.json_identity_provider import JsonIdentityProvider
from fromagerie.infrastructure.persistence.json_client_repository import JsonClientRepository
from fromagerie.infrastructure.persistence.json_consign_repository import (
    JsonConsignMovementRepository,
    JsonConsignTypeRepository,
)
from fromagerie.infrastructure.persistence.json_order_repository import JsonOrderRepository
from fromagerie.infrastructure.persistence.json_product_repository import JsonProductRepository


def settings() -> Settings:
    return Settings.from_env()


def store(config: Settings | None = None) -> AppDataStore:
    config = config or settings()
    data_dir = config.data_dir
    return AppDataStore(
        product_repo=JsonProductRepository(data_dir / "items.json"),
        order_repo=JsonOrderRepository(data_dir / "orders.json", data_dir / "order_items.json"),
        client_repo=JsonClientRepository(data_dir / "clients.json"),
        consign_type_repo=JsonConsignTypeRepository(data_dir / "consign_types.json"),
        movement_repo=JsonConsignMovementRepository(data_dir / "consign_movements.json"),
        settings=config,
    )


def account_service(config: Settings | None = None) -> AccountService:
    config = config or settings()
    provider = JsonIdentityProvider(
        users_path=config.data_dir / "users.json",
        session_path=config.data_dir / "session.json",
        admin_emails=config.admin_emails,
    )
    return AccountService(provider)
