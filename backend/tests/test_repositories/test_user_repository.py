"""
Unit tests for UserRepository

Author: Dicompel
Date: 2026-09-11
"""
import pytest

from orderdesk.core.errors import ConstraintError, TransportError, ValidationError
from orderdesk.domain.origin import RecordOrigin
from orderdesk.domain.user import User, UserCreate, UserRole


@pytest.fixture
def stored_profiles(remote):
    remote.tables["profiles"].extend([
        {"id": "3b0c9a52-7e61-4d8f-9a7e-0f1b2c3d4e5f", "email": "ana@dicompel.com.br", "name": "Ana", "role": "ADMIN"},
        {"id": "9e8d7c6b-5a49-4382-b1a0-f9e8d7c6b5a4", "email": "rui@dicompel.com.br", "name": "Rui", "role": "REPRESENTATIVE"},
        {"id": "11111111-2222-3333-4444-555555555555", "email": "old@dicompel.com.br", "name": "Old", "role": "MANAGER"},
    ])


class TestUserRepository:
    """Test UserRepository methods"""

    @pytest.mark.asyncio
    async def test_get_all_maps_profiles(self, user_repo, stored_profiles):
        users = await user_repo.get_all()

        assert [u.name for u in users] == ["Ana", "Rui"]
        assert users[0].role == UserRole.ADMIN
        assert all(u.origin == RecordOrigin.REMOTE for u in users)

    @pytest.mark.asyncio
    async def test_unknown_role_is_skipped(self, user_repo, stored_profiles):
        users = await user_repo.get_all()

        assert "old@dicompel.com.br" not in [u.email for u in users]

    @pytest.mark.asyncio
    async def test_get_all_falls_back_to_seed_list_without_credentials(self, user_repo, remote):
        remote.fail("profiles", "select")

        users = await user_repo.get_all()

        assert [u.id for u in users] == ["u1", "u2", "u3", "u4"]
        assert all(u.password is None for u in users)
        assert all(u.origin == RecordOrigin.LOCAL for u in users)

    @pytest.mark.asyncio
    async def test_get_representatives(self, user_repo, stored_profiles):
        reps = await user_repo.get_representatives()

        assert [u.email for u in reps] == ["rui@dicompel.com.br"]

    @pytest.mark.asyncio
    async def test_create_writes_profile_without_password(self, user_repo, remote):
        user = await user_repo.create(UserCreate(
            email=" Nova@Dicompel.com.br ", name="Nova Rep", role=UserRole.REPRESENTATIVE, password="s3cret"
        ))

        assert user.email == "nova@dicompel.com.br"
        profile = remote.tables["profiles"][0]
        assert profile == {"id": user.id, "name": "Nova Rep", "email": "nova@dicompel.com.br", "role": "REPRESENTATIVE"}

    @pytest.mark.asyncio
    async def test_create_surfaces_role_constraint_verbatim(self, user_repo, remote):
        message = 'new row for relation "profiles" violates check constraint "profiles_role_check"'
        remote.fail("profiles", "upsert", ConstraintError(message, table="profiles", code="23514"))

        with pytest.raises(ConstraintError) as exc_info:
            await user_repo.create(UserCreate(
                email="sup@dicompel.com.br", name="Sup", role=UserRole.SUPERVISOR, password="x"
            ))

        assert str(exc_info.value) == message

    @pytest.mark.asyncio
    async def test_create_with_missing_password_is_rejected_before_remote_call(self, user_repo, remote):
        with pytest.raises(ValidationError):
            await user_repo.create(UserCreate(email="a@b.c", name="A", password=""))

        assert remote.calls == []

    @pytest.mark.asyncio
    async def test_update_and_delete_failures_are_surfaced(self, user_repo, remote):
        remote.fail("profiles", "update")
        remote.fail("profiles", "delete")
        user = User(id="u9", email="a@b.c", name="A", role=UserRole.ADMIN)

        with pytest.raises(TransportError):
            await user_repo.update(user)
        with pytest.raises(TransportError):
            await user_repo.delete("u9")
