"""JSON-file-backed implementation of IdentityProvider.

Accounts live in ``users.json``; the open session is the user ID kept in
``session.json``.  E-mails listed in ``admin_emails`` get the admin role
when they sign up.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from fromagerie.domain.exceptions import AuthenticationError, BackendError, ValidationError
from fromagerie.domain.model.user import User
from fromagerie.domain.repository.identity_provider import IdentityProvider
from fromagerie.infrastructure.identity.passwords import hash_password, verify_password
from fromagerie.infrastructure.persistence.json_table import JsonTable

logger = logging.getLogger(__name__)


class JsonIdentityProvider(IdentityProvider):

    def __init__(
        self,
        users_path: Path,
        session_path: Path,
        admin_emails: frozenset[str] = frozenset(),
    ) -> None:
        self._users = JsonTable(users_path)
        self._session_path = session_path
        self._admin_emails = admin_emails

    # --- IdentityProvider interface -------------------------------------------

    async def get_session(self) -> User | None:
        user_id = self._read_session()
        if user_id is None:
            return None
        raw = self._find(lambda r: r["id"] == user_id)
        if raw is None:
            logger.warning("Session points at unknown user %s; ignoring it", user_id)
            return None
        return self._to_domain(raw)

    async def sign_in(self, email: str, password: str) -> User:
        raw = self._find(lambda r: r["email"].lower() == email.strip().lower())
        if raw is None or not verify_password(password, raw["password_hash"]):
            raise AuthenticationError("Invalid login credentials")
        self._write_session(raw["id"])
        return self._to_domain(raw)

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> User:
        email = email.strip()
        if self._find(lambda r: r["email"].lower() == email.lower()) is not None:
            raise ValidationError(f"User '{email}' already registered")

        app_metadata: dict[str, Any] = {}
        if email.lower() in self._admin_emails:
            app_metadata["role"] = "admin"

        raw = {
            "id": JsonTable.new_id(),
            "email": email,
            "phone": None,
            "password_hash": hash_password(password),
            "user_metadata": dict(metadata),
            "app_metadata": app_metadata,
            "created_at": JsonTable.now(),
        }
        records = self._users.load()
        records.append(raw)
        self._users.persist(records)
        self._write_session(raw["id"])
        return self._to_domain(raw)

    async def sign_out(self) -> None:
        self._write_session(None)

    async def update_user(
        self,
        email: str | None = None,
        password: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> User:
        user_id = self._read_session()
        if user_id is None:
            raise AuthenticationError("Not signed in")

        records = self._users.load()
        if email is not None:
            email = email.strip()
            if any(r["id"] != user_id and r["email"].lower() == email.lower() for r in records):
                raise ValidationError(f"User '{email}' already registered")

        for raw in records:
            if raw["id"] != user_id:
                continue
            if email is not None:
                raw["email"] = email
            if password is not None:
                raw["password_hash"] = hash_password(password)
            if metadata is not None:
                raw["user_metadata"] = {**raw.get("user_metadata", {}), **metadata}
            self._users.persist(records)
            return self._to_domain(raw)
        raise AuthenticationError("Not signed in")

    # --- Helpers --------------------------------------------------------------

    def _find(self, predicate) -> dict | None:
        for raw in self._users.load():
            if predicate(raw):
                return raw
        return None

    def _read_session(self) -> str | None:
        if not self._session_path.exists():
            return None
        try:
            data = json.loads(self._session_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise BackendError(f"Cannot read session: {exc}") from exc
        return data.get("user_id")

    def _write_session(self, user_id: str | None) -> None:
        try:
            self._session_path.parent.mkdir(parents=True, exist_ok=True)
            self._session_path.write_text(json.dumps({"user_id": user_id}), encoding="utf-8")
        except OSError as exc:
            raise BackendError(f"Cannot write session: {exc}") from exc

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User(
            id=raw["id"],
            email=raw.get("email"),
            phone=raw.get("phone"),
            user_metadata=copy.deepcopy(raw.get("user_metadata", {})),
            app_metadata=copy.deepcopy(raw.get("app_metadata", {})),
        )
