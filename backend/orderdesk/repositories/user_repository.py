"""
User Repository - Data Access Layer for profiles

Author: Dicompel
Date: 2026-09-06
"""
import logging
from typing import List, Optional

from orderdesk.core.errors import TransportError, ValidationError
from orderdesk.core.remote_store import RemoteStore, Row
from orderdesk.domain.origin import RecordOrigin
from orderdesk.domain.user import User, UserCreate, UserRole
from orderdesk.repositories.seed_data import seed_users_without_credentials

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository for User profiles

    Reads fall back to the fixed seed list (there is no cached copy of
    users). Writes are always surfaced.
    """

    TABLE = "profiles"

    def __init__(self, remote: RemoteStore):
        self.remote = remote

    @staticmethod
    def _map_row_to_user(row: dict) -> Optional[User]:
        """Profile row -> User, or None when the role is outside the closed set"""
        try:
            role = UserRole(row.get('role'))
        except ValueError:
            logger.warning(
                f"Profile {row.get('id')} has unsupported role {row.get('role')!r}; ignored",
                extra={"event": "profile_unknown_role", "user_id": row.get('id')}
            )
            return None

        return User(
            id=str(row['id']),
            email=row.get('email') or '',
            name=row.get('name') or '',
            role=role,
            origin=RecordOrigin.REMOTE
        )

    def _map_rows(self, rows: List[Row]) -> List[User]:
        try:
            users = [self._map_row_to_user(row) for row in rows]
        except (KeyError, TypeError) as e:
            raise TransportError(f"Malformed profile row: {e}", table=self.TABLE, operation="select") from e
        return [user for user in users if user is not None]

    async def get_all(self) -> List[User]:
        """All profiles, or the seed list when the remote store is unreachable"""
        try:
            rows = await self.remote.query(self.TABLE)
            return self._map_rows(rows)
        except TransportError as e:
            logger.warning(
                f"Profile fetch failed, serving seed users: {e}",
                extra={"event": "user_fallback_seed"}
            )
            return seed_users_without_credentials()

    async def get_representatives(self) -> List[User]:
        users = await self.get_all()
        return [user for user in users if user.role == UserRole.REPRESENTATIVE]

    async def get_profile(self, user_id: str) -> Optional[User]:
        """
        Profile by identity id (no fallback)

        Returns:
            User, or None when missing or carrying an unsupported role
        """
        rows = await self.remote.query(self.TABLE, filters={'id': user_id})
        users = self._map_rows(rows)
        return users[0] if users else None

    async def create(self, user: UserCreate) -> User:
        """
        Register credentials, then write the profile row

        The password goes only to the credential service, never to
        `profiles`. A role the backend does not allow comes back as a
        ConstraintError, surfaced verbatim.
        """
        for field in ('email', 'name', 'password'):
            if not getattr(user, field, '').strip():
                raise ValidationError(f"Campo obrigatório ausente: {field}", field=field)

        email = user.email.strip().lower()
        identity = await self.remote.sign_up(
            email,
            user.password,
            metadata={'name': user.name, 'role': user.role.value}
        )
        await self.remote.upsert(
            self.TABLE,
            [{'id': identity.id, 'name': user.name, 'email': email, 'role': user.role.value}],
            'id'
        )

        logger.info(f"User registered: {email} as {user.role.value}")
        return User(id=identity.id, email=email, name=user.name, role=user.role, origin=RecordOrigin.REMOTE)

    async def update(self, user: User) -> None:
        await self.remote.update(self.TABLE, user.id, {'name': user.name, 'role': user.role.value})

    async def delete(self, user_id: str) -> None:
        await self.remote.delete(self.TABLE, user_id)
