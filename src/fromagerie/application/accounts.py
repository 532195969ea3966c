"""Application service: accounts and sessions.

Wraps the identity provider with the profile rules of the dairy.  The
admin flag exposed here is what collaborators check before calling the
privileged store operations (catalog edits, status changes, consigns);
the store itself does not look at it.
"""

from __future__ import annotations

import logging

from fromagerie.application.dto import ProfilePayload, SignupPayload
from fromagerie.domain.exceptions import AuthenticationError, ValidationError
from fromagerie.domain.model.user import User
from fromagerie.domain.repository.identity_provider import IdentityProvider

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, provider: IdentityProvider) -> None:
        self._provider = provider
        self._user: User | None = None

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.is_admin

    async def load_session(self) -> User | None:
        self._user = await self._provider.get_session()
        return self._user

    async def login(self, email: str, password: str) -> User:
        self._user = await self._provider.sign_in(email.strip(), password)
        logger.info("User %s signed in", self._user.id)
        return self._user

    async def signup(self, payload: SignupPayload) -> User:
        email = payload.email.strip()
        if not email:
            raise ValidationError("Email is required")
        if not payload.password:
            raise ValidationError("Password is required")

        self._user = await self._provider.sign_up(
            email,
            payload.password,
            metadata=_profile_metadata(
                payload.display_name, payload.phone, payload.company, payload.delivery_location,
            ),
        )
        logger.info("User %s signed up", self._user.id)
        return self._user

    async def logout(self) -> None:
        await self._provider.sign_out()
        self._user = None

    async def update_profile(self, payload: ProfilePayload) -> User:
        """Update profile metadata, and the e-mail address when it changed."""
        email = payload.email.strip()
        display_name = payload.display_name.strip()
        phone = payload.phone.strip()
        delivery_location = payload.delivery_location.strip()

        if not email:
            raise ValidationError("Email is required")
        if not display_name:
            raise ValidationError("Display name is required")
        if not phone:
            raise ValidationError("Contact is required")
        if not delivery_location:
            raise ValidationError("Delivery location is required")
        self._require_user()

        user = await self._provider.update_user(
            metadata=_profile_metadata(display_name, phone, payload.company, delivery_location),
        )

        current_email = (self._user.email or "").strip()  # type: ignore[union-attr]
        if email.lower() != current_email.lower():
            user = await self._provider.update_user(email=email)

        self._user = user
        return user

    async def change_password(self, current_password: str, new_password: str) -> User:
        """Re-authenticate with the current password, then set the new one."""
        user = self._require_user()
        if not user.email:
            raise ValidationError("This account has no email address")
        if not new_password:
            raise ValidationError("New password is required")

        try:
            await self._provider.sign_in(user.email, current_password)
        except AuthenticationError as exc:
            raise AuthenticationError("Current password is incorrect") from exc

        self._user = await self._provider.update_user(password=new_password)
        logger.info("User %s changed password", self._user.id)
        return self._user

    def _require_user(self) -> User:
        if self._user is None:
            raise AuthenticationError("Not signed in")
        return self._user


def _profile_metadata(
    display_name: str,
    phone: str,
    company: str | None,
    delivery_location: str,
) -> dict[str, str | None]:
    return {
        "display_name": display_name.strip(),
        "phone": phone.strip(),
        "company": (company or "").strip() or None,
        "delivery_location": delivery_location.strip(),
    }
