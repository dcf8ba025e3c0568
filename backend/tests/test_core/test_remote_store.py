"""
Unit tests for SupabaseRemoteStore error translation

These tests validate the store logic without a live Supabase project.

Author: Dicompel
Date: 2026-09-11
"""
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock
from postgrest.exceptions import APIError

from orderdesk.core.errors import ConstraintError, TransportError
from orderdesk.core.remote_store import SupabaseRemoteStore, is_constraint_violation


def make_client(data=None, error=None):
    """Supabase client mock whose query builder chains back to itself"""
    builder = MagicMock()
    for method in ("select", "insert", "update", "delete", "upsert", "eq", "in_", "order"):
        getattr(builder, method).return_value = builder
    if error is not None:
        builder.execute = AsyncMock(side_effect=error)
    else:
        builder.execute = AsyncMock(return_value=MagicMock(data=data))

    client = MagicMock()
    client.table.return_value = builder
    return client, builder


class TestSupabaseRemoteStore:
    """Test SupabaseRemoteStore methods"""

    @pytest.mark.asyncio
    async def test_query_applies_filters_and_order(self):
        client, builder = make_client(data=[{"id": "1", "code": "TOM-001"}])
        store = SupabaseRemoteStore("https://x.supabase.co", "key", client=client)

        rows = await store.query("products", filters={"code": "TOM-001", "id": ["1", "2"]}, order_by="description")

        assert rows == [{"id": "1", "code": "TOM-001"}]
        client.table.assert_called_once_with("products")
        builder.eq.assert_called_once_with("code", "TOM-001")
        builder.in_.assert_called_once_with("id", ["1", "2"])
        builder.order.assert_called_once_with("description", desc=False)

    @pytest.mark.asyncio
    async def test_check_constraint_becomes_constraint_error(self):
        error = APIError({
            "message": 'new row for relation "profiles" violates check constraint "profiles_role_check"',
            "code": "23514",
            "details": "Failing row contains (...)",
            "hint": None,
        })
        client, _ = make_client(error=error)
        store = SupabaseRemoteStore("https://x.supabase.co", "key", client=client)

        with pytest.raises(ConstraintError) as exc_info:
            await store.upsert("profiles", [{"id": "1", "role": "MANAGER"}], "id")

        assert exc_info.value.code == "23514"
        assert "profiles_role_check" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_failure_becomes_transport_error(self):
        client, _ = make_client(error=httpx.ConnectError("connection refused"))
        store = SupabaseRemoteStore("https://x.supabase.co", "key", client=client)

        with pytest.raises(TransportError) as exc_info:
            await store.query("products")

        assert exc_info.value.table == "products"
        assert exc_info.value.operation == "select"

    @pytest.mark.asyncio
    async def test_non_constraint_api_error_becomes_transport_error(self):
        error = APIError({"message": "relation does not exist", "code": "42P01", "details": None, "hint": None})
        client, _ = make_client(error=error)
        store = SupabaseRemoteStore("https://x.supabase.co", "key", client=client)

        with pytest.raises(TransportError):
            await store.insert("orders", [{"status": "Novo"}])

    @pytest.mark.asyncio
    async def test_malformed_payload_becomes_transport_error(self):
        client, _ = make_client(data={"unexpected": "object"})
        store = SupabaseRemoteStore("https://x.supabase.co", "key", client=client)

        with pytest.raises(TransportError):
            await store.query("products")

    @pytest.mark.asyncio
    async def test_unconfigured_store_fails_with_transport_error(self):
        store = SupabaseRemoteStore("", "")

        with pytest.raises(TransportError):
            await store.query("products")

    @pytest.mark.asyncio
    async def test_auth_network_failure_becomes_transport_error(self):
        client = MagicMock()
        client.auth.sign_in_with_password = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))
        store = SupabaseRemoteStore("https://x.supabase.co", "key", client=client)

        with pytest.raises(TransportError):
            await store.check_credential("admin@dicompel.com.br", "123")

    def test_constraint_classification(self):
        def api_error(code):
            return APIError({"message": "m", "code": code, "details": None, "hint": None})

        assert is_constraint_violation(api_error("23505"))
        assert is_constraint_violation(api_error("23503"))
        assert is_constraint_violation(api_error("22P02"))
        assert not is_constraint_violation(api_error("PGRST116"))
