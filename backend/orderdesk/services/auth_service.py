"""
Auth Service - single login call, logout and the on-device session

Login order:
1. Remote credential check, then the profile (role) by identity id
2. Only if the remote store is unreachable: the local seed table

A backend that answers "wrong password" never reaches the seed table.

Author: Dicompel
Date: 2026-09-09
"""
import logging
from typing import Optional

from orderdesk.core import local_cache
from orderdesk.core.errors import InvalidCredentialsError, TransportError
from orderdesk.core.local_cache import LocalCache
from orderdesk.core.remote_store import RemoteStore
from orderdesk.domain.user import User
from orderdesk.repositories.seed_data import find_seed_user
from orderdesk.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Service for logging users in and keeping the current session"""

    def __init__(self, remote: RemoteStore, users: UserRepository, cache: LocalCache):
        self.remote = remote
        self.users = users
        self.cache = cache

    async def login(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate and remember the user on this device

        Returns:
            The logged-in User, or None when the credentials are rejected
        """
        clean_email = (email or "").strip().lower()

        try:
            user = await self._remote_login(clean_email, password)
        except InvalidCredentialsError as e:
            logger.info(f"Login rejected for {clean_email}: {e}")
            return None
        except TransportError as e:
            logger.warning(
                f"Remote login unavailable, trying seed credentials: {e}",
                extra={"event": "login_fallback_seed", "email": clean_email}
            )
            user = find_seed_user(clean_email, password)

        if user is not None:
            self.cache.save(local_cache.SESSION, [user])
        return user

    async def _remote_login(self, email: str, password: str) -> Optional[User]:
        identity = await self.remote.check_credential(email, password)
        profile = await self.users.get_profile(identity.id)
        if profile is None:
            logger.warning(
                f"Identity {identity.id} has no usable profile",
                extra={"event": "login_missing_profile", "user_id": identity.id}
            )
            return None
        if identity.email and identity.email != profile.email:
            profile = profile.model_copy(update={'email': identity.email})
        return profile

    async def logout(self) -> None:
        try:
            await self.remote.sign_out()
        except TransportError as e:
            logger.warning(f"Remote sign-out failed: {e}", extra={"event": "logout_remote_failed"})
        self.cache.clear(local_cache.SESSION)

    def current_user(self) -> Optional[User]:
        """User stored by the last successful login on this device"""
        users = self.cache.load(local_cache.SESSION, User)
        return users[0] if users else None
