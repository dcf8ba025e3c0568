"""
Pytest fixtures and configuration for the order desk backend tests

This file provides shared fixtures that can be used across all test modules.
`FakeRemoteStore` keeps tables in memory and can be told to fail a given
table/operation, which is how the fallback and partial-write paths are
exercised.

Author: Dicompel
Date: 2026-09-11
"""
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from orderdesk.core import local_cache
from orderdesk.core.errors import InvalidCredentialsError, TransportError
from orderdesk.core.local_cache import LocalCache
from orderdesk.domain.order import CartItem
from orderdesk.domain.product import ProductCreate
from orderdesk.domain.user import Identity, UserRole
from orderdesk.repositories import OrderRepository, ProductRepository, UserRepository
from orderdesk.repositories.seed_data import seed_users_without_credentials
from orderdesk.services.auth_service import AuthService
from orderdesk.services.order_service import OrderService


class FakeRemoteStore:
    """In-memory RemoteStore double"""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.failures: Dict[tuple, Exception] = {}
        self.calls: List[tuple] = []
        self.credentials: Dict[str, tuple] = {}
        self._clock = datetime(2026, 9, 1, 12, 0, tzinfo=timezone.utc)

    # -- test controls -------------------------------------------------

    def fail(self, table: str, operation: str, error: Optional[Exception] = None):
        """Make `operation` on `table` raise (use '*' as a wildcard table)"""
        self.failures[(table, operation)] = error or TransportError(f"offline: {operation} {table}")

    def go_offline(self):
        for operation in ("select", "insert", "update", "delete", "upsert", "sign_in", "sign_up", "sign_out"):
            self.fail("*", operation)

    def register(self, email: str, password: str, user_id: Optional[str] = None) -> str:
        user_id = user_id or str(uuid.uuid4())
        self.credentials[email] = (password, user_id)
        return user_id

    def _check(self, table: str, operation: str):
        self.calls.append((table, operation))
        error = self.failures.get((table, operation)) or self.failures.get(("*", operation))
        if error is not None:
            raise error

    def _next_timestamp(self) -> str:
        self._clock += timedelta(minutes=1)
        return self._clock.isoformat()

    @staticmethod
    def _matches(row, filters) -> bool:
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                if row.get(column) not in value:
                    return False
            elif row.get(column) != value:
                return False
        return True

    # -- RemoteStore contract ------------------------------------------

    async def query(self, table, filters=None, order_by=None, descending=False):
        self._check(table, "select")
        rows = [dict(row) for row in self.tables[table] if self._matches(row, filters)]
        if order_by:
            rows.sort(key=lambda row: row.get(order_by) or "", reverse=descending)
        return rows

    async def insert(self, table, rows):
        self._check(table, "insert")
        stored = []
        for row in rows:
            record = dict(row)
            record.setdefault("id", str(uuid.uuid4()))
            if table == "orders":
                record.setdefault("created_at", self._next_timestamp())
            self.tables[table].append(record)
            stored.append(dict(record))
        return stored

    async def update(self, table, record_id, patch):
        self._check(table, "update")
        for row in self.tables[table]:
            if row.get("id") == record_id:
                row.update(patch)

    async def delete(self, table, record_id):
        self._check(table, "delete")
        self.tables[table] = [row for row in self.tables[table] if row.get("id") != record_id]

    async def upsert(self, table, rows, conflict_key):
        self._check(table, "upsert")
        for row in rows:
            existing = next(
                (r for r in self.tables[table] if r.get(conflict_key) == row.get(conflict_key)),
                None
            )
            if existing is not None:
                existing.update(row)
            else:
                record = dict(row)
                record.setdefault("id", str(uuid.uuid4()))
                self.tables[table].append(record)

    async def check_credential(self, email, password):
        self._check("auth", "sign_in")
        stored = self.credentials.get(email)
        if stored is None or stored[0] != password:
            raise InvalidCredentialsError("Invalid login credentials")
        return Identity(id=stored[1], email=email)

    async def sign_up(self, email, password, metadata=None):
        self._check("auth", "sign_up")
        return Identity(id=self.register(email, password), email=email)

    async def sign_out(self):
        self._check("auth", "sign_out")


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
def cache(tmp_path):
    return LocalCache(tmp_path / "cache").open()


@pytest.fixture
def product_repo(remote, cache):
    return ProductRepository(remote, cache)


@pytest.fixture
def user_repo(remote):
    return UserRepository(remote)


@pytest.fixture
def order_repo(remote):
    return OrderRepository(remote)


@pytest.fixture
def order_service(order_repo, product_repo):
    return OrderService(order_repo, product_repo)


@pytest.fixture
def auth_service(remote, user_repo, cache):
    return AuthService(remote, user_repo, cache)


@pytest.fixture
def sample_product_data():
    """
    Provides sample product data for tests
    """
    return ProductCreate(
        code="TOM-001",
        description="Tomada 10A 2P+T Branca",
        reference="REF-1001",
        colors=["Branco", "Preto", "Cinza"],
        image_url="https://picsum.photos/300/300?random=1",
        category="Tomadas",
        subcategory="Residencial",
        line="Classic",
        amperage="10A"
    )


@pytest.fixture
def stored_products(remote):
    """Two products already present in the remote table"""
    remote.tables["products"].extend([
        {
            "id": "7f1c2a9e-0d4b-4c1e-9b0a-5c2f8e1d3a10",
            "code": "TOM-001",
            "description": "Tomada 10A 2P+T Branca",
            "reference": "REF-1001",
            "colors": ["Branco", "Preto"],
            "image_url": "https://picsum.photos/300/300?random=1",
            "category": "Tomadas",
            "subcategory": "Residencial",
            "line": "Classic",
            "amperage": "10A",
            "details": None,
        },
        {
            "id": "0b6e4d2c-8a1f-4e3b-a7c9-1d2e3f4a5b60",
            "code": "INT-002",
            "description": "Interruptor Simples",
            "reference": "REF-2001",
            "colors": None,
            "image_url": "https://picsum.photos/300/300?random=2",
            "category": "Interruptores",
            "subcategory": "Simples",
            "line": "Premium",
            "amperage": None,
            "details": None,
        },
    ])
    return remote.tables["products"]


@pytest.fixture
def cart_items(stored_products):
    """Cart built from the stored products"""
    first, second = stored_products
    return [
        CartItem(
            id=first["id"], code=first["code"], description=first["description"],
            reference=first["reference"], colors=first["colors"], quantity=50
        ),
        CartItem(
            id=second["id"], code=second["code"], description=second["description"],
            reference=second["reference"], quantity=20
        ),
    ]


@pytest.fixture
def login_as(cache):
    """Store a seed user of the given role as the device session"""
    def _login(role: UserRole):
        user = next(u for u in seed_users_without_credentials() if u.role == role)
        cache.save(local_cache.SESSION, [user])
        return user
    return _login
