"""User: an account known to the identity provider.

Profile fields (display name, phone, company, delivery location) live in
``user_metadata``; ``app_metadata`` is written by the provider only and
carries the role.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class User:

    id: str
    email: str | None = None
    phone: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)
    app_metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        if self.app_metadata.get("role") == "admin":
            return True
        flag = self.user_metadata.get("is_admin", self.app_metadata.get("is_admin"))
        return flag is True

    @property
    def display_name(self) -> str:
        return (
            _read_string(self.user_metadata.get("display_name"))
            or _read_string(self.user_metadata.get("full_name"))
            or self.email
            or "User"
        )

    @property
    def contact(self) -> str:
        return (
            _read_string(self.user_metadata.get("phone"))
            or _read_string(self.phone)
            or self.email
            or ""
        )


def _read_string(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()
