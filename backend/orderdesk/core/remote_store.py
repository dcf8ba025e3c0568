"""
Remote Store - table-oriented client for the hosted backend (Supabase)

The contract every repository depends on is `RemoteStore`. The Supabase
implementation translates client-library failures into the data-access
taxonomy, so nothing but `DataAccessError` subclasses leaves this module.

No operation here retries or times out on its own; callers that need a
deadline impose it from outside (e.g. `asyncio.wait_for`).

Author: Dicompel
Date: 2026-09-03
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthApiError, AuthError, acreate_client

from orderdesk.core.errors import (
    ConstraintError,
    InvalidCredentialsError,
    TransportError,
)
from orderdesk.domain.user import Identity

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

# PostgreSQL SQLSTATE 22P02 is invalid_text_representation (bad enum value);
# class 23 covers every integrity constraint (check, unique, FK, not-null).
INVALID_TEXT_REPRESENTATION = "22P02"
INTEGRITY_CONSTRAINT_CLASS = "23"


@runtime_checkable
class RemoteStore(Protocol):
    """
    Contract of the remote store

    Filters are `{column: value}` pairs combined with AND; a list, tuple or
    set value matches any of its elements.
    """

    async def query(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[Row]:
        ...

    async def insert(self, table: str, rows: Sequence[Row]) -> List[Row]:
        ...

    async def update(self, table: str, record_id: str, patch: Row) -> None:
        ...

    async def delete(self, table: str, record_id: str) -> None:
        ...

    async def upsert(self, table: str, rows: Sequence[Row], conflict_key: str) -> None:
        ...

    async def check_credential(self, email: str, password: str) -> Identity:
        ...

    async def sign_up(self, email: str, password: str, metadata: Optional[Row] = None) -> Identity:
        ...

    async def sign_out(self) -> None:
        ...


def is_constraint_violation(error: APIError) -> bool:
    """True when a PostgREST error comes from a schema rule rather than transport"""
    code = str(error.code or "")
    return code.startswith(INTEGRITY_CONSTRAINT_CLASS) or code == INVALID_TEXT_REPRESENTATION


class SupabaseRemoteStore:
    """
    RemoteStore backed by the async Supabase client

    The client is created lazily on first use. When the URL/key are not
    configured every call fails with TransportError.
    """

    def __init__(self, url: str, key: str, client: Optional[AsyncClient] = None):
        self.url = url
        self.key = key
        self._client = client

    async def _get_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client

        if not (self.url and self.key):
            raise TransportError("Remote store not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")

        try:
            self._client = await acreate_client(self.url, self.key)
        except Exception as e:
            # SupabaseException on malformed URL/key; never fatal to the caller
            raise TransportError(f"Could not create Supabase client: {e}") from e

        logger.info(f"Connected to Supabase at {self.url}")
        return self._client

    @contextmanager
    def _translate_errors(self, table: str, operation: str):
        """Map client-library exceptions onto the data-access taxonomy"""
        try:
            yield
        except APIError as e:
            if is_constraint_violation(e):
                logger.warning(f"Constraint violation on {operation} {table}: {e.message}")
                raise ConstraintError(
                    f"{e.message}" + (f" - {e.details}" if e.details else ""),
                    table=table,
                    code=e.code,
                    details=e.details
                ) from e
            logger.error(f"Remote error on {operation} {table}: {e.code} {e.message}")
            raise TransportError(f"Remote error: {e.message}", table=table, operation=operation) from e
        except httpx.HTTPError as e:
            logger.error(f"Remote store unreachable on {operation} {table}: {e}")
            raise TransportError(f"Remote store unreachable: {e}", table=table, operation=operation) from e
        except ValueError as e:
            # JSON decoding / response model validation
            logger.error(f"Malformed response on {operation} {table}: {e}")
            raise TransportError(f"Malformed response: {e}", table=table, operation=operation) from e

    @staticmethod
    def _rows(data: Any, table: str, operation: str) -> List[Row]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise TransportError(
                f"Malformed response: expected a list of rows, got {type(data).__name__}",
                table=table,
                operation=operation
            )
        return data

    async def query(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[Row]:
        client = await self._get_client()

        with self._translate_errors(table, "select"):
            request = client.table(table).select("*")
            for column, value in (filters or {}).items():
                if isinstance(value, (list, tuple, set)):
                    request = request.in_(column, list(value))
                else:
                    request = request.eq(column, value)
            if order_by:
                request = request.order(order_by, desc=descending)
            response = await request.execute()

        rows = self._rows(response.data, table, "select")
        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    async def insert(self, table: str, rows: Sequence[Row]) -> List[Row]:
        client = await self._get_client()

        with self._translate_errors(table, "insert"):
            response = await client.table(table).insert(list(rows)).execute()

        return self._rows(response.data, table, "insert")

    async def update(self, table: str, record_id: str, patch: Row) -> None:
        client = await self._get_client()

        with self._translate_errors(table, "update"):
            await client.table(table).update(patch).eq("id", record_id).execute()

    async def delete(self, table: str, record_id: str) -> None:
        client = await self._get_client()

        with self._translate_errors(table, "delete"):
            await client.table(table).delete().eq("id", record_id).execute()

    async def upsert(self, table: str, rows: Sequence[Row], conflict_key: str) -> None:
        client = await self._get_client()

        with self._translate_errors(table, "upsert"):
            await client.table(table).upsert(list(rows), on_conflict=conflict_key).execute()

    async def check_credential(self, email: str, password: str) -> Identity:
        """
        Verify an email/password pair

        Raises:
            InvalidCredentialsError: backend answered and rejected the pair
            TransportError: backend unreachable or failing
        """
        client = await self._get_client()

        try:
            response = await client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as e:
            status = getattr(e, "status", None)
            if status is not None and status >= 500:
                raise TransportError(f"Auth service error: {e.message}", table="auth", operation="sign_in") from e
            raise InvalidCredentialsError(e.message) from e
        except (AuthError, httpx.HTTPError) as e:
            raise TransportError(f"Auth service unreachable: {e}", table="auth", operation="sign_in") from e

        if response.user is None:
            raise InvalidCredentialsError("Credential check returned no user")

        return Identity(id=response.user.id, email=response.user.email or email)

    async def sign_up(self, email: str, password: str, metadata: Optional[Row] = None) -> Identity:
        client = await self._get_client()

        credentials: Dict[str, Any] = {"email": email, "password": password}
        if metadata:
            credentials["options"] = {"data": metadata}

        try:
            response = await client.auth.sign_up(credentials)
        except AuthApiError as e:
            status = getattr(e, "status", None)
            if status is not None and status >= 500:
                raise TransportError(f"Auth service error: {e.message}", table="auth", operation="sign_up") from e
            raise ConstraintError(f"Erro Auth: {e.message}", table="auth", code=getattr(e, "code", None)) from e
        except (AuthError, httpx.HTTPError) as e:
            raise TransportError(f"Auth service unreachable: {e}", table="auth", operation="sign_up") from e

        if response.user is None:
            raise TransportError("Sign-up returned no user", table="auth", operation="sign_up")

        return Identity(id=response.user.id, email=response.user.email or email)

    async def sign_out(self) -> None:
        client = await self._get_client()

        try:
            await client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as e:
            raise TransportError(f"Sign-out failed: {e}", table="auth", operation="sign_out") from e
