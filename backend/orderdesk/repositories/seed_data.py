"""
Local seed credential table

Development/demo fallback only: consulted when the remote store cannot be
reached, never when it answers.

Author: Dicompel
Date: 2026-09-06
"""
from typing import List, Optional

from orderdesk.domain.origin import RecordOrigin
from orderdesk.domain.user import User, UserRole


SEED_USERS: List[User] = [
    User(
        id='u1',
        email='admin@dicompel.com.br',
        name='Administrador Dicompel',
        role=UserRole.ADMIN,
        password='123',
        origin=RecordOrigin.LOCAL
    ),
    User(
        id='u2',
        email='rep1@dicompel.com.br',
        name='João Representante',
        role=UserRole.REPRESENTATIVE,
        password='123',
        origin=RecordOrigin.LOCAL
    ),
    User(
        id='u3',
        email='rep2@dicompel.com.br',
        name='Maria Vendas',
        role=UserRole.REPRESENTATIVE,
        password='123',
        origin=RecordOrigin.LOCAL
    ),
    User(
        id='u4',
        email='supervisor@dicompel.com.br',
        name='Carlos Supervisor',
        role=UserRole.SUPERVISOR,
        password='123',
        origin=RecordOrigin.LOCAL
    ),
]


def seed_users_without_credentials() -> List[User]:
    """Copies of the seed users with the credential stripped"""
    return [user.model_copy(update={'password': None}) for user in SEED_USERS]


def find_seed_user(email: str, password: str) -> Optional[User]:
    """Seed user matching the (already normalized) email and password"""
    for user in SEED_USERS:
        if user.email.strip().lower() == email and user.password == password:
            return user.model_copy(update={'password': None})
    return None
