"""
Product Repository - Data Access Layer for Products

Remote store first; when the remote read fails for any data-access reason
the read path serves the last snapshot written to the local cache. Writes never fall back.

Author: Dicompel
Date: 2026-09-06
"""
import logging
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from orderdesk.core import local_cache
from orderdesk.core.errors import DataAccessError, TransportError, ValidationError
from orderdesk.core.local_cache import LocalCache
from orderdesk.core.remote_store import RemoteStore, Row
from orderdesk.domain.origin import RecordOrigin
from orderdesk.domain.product import Product, ProductCreate

logger = logging.getLogger(__name__)


class ProductRepository:
    """
    Repository for Product data access

    All remote calls for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    TABLE = "products"
    CONFLICT_KEY = "code"

    def __init__(self, remote: RemoteStore, cache: LocalCache):
        self.remote = remote
        self.cache = cache

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        """
        Map a remote row to the Product domain model.

        `colors` may come back NULL for rows created before the column had a
        default; the domain always sees a list.
        """
        colors = row.get('colors')
        return Product(
            id=str(row['id']),
            code=row['code'],
            description=row.get('description') or '',
            reference=row.get('reference') or '',
            colors=colors if isinstance(colors, list) else [],
            image_url=row.get('image_url') or '',
            category=row.get('category') or '',
            subcategory=row.get('subcategory') or '',
            line=row.get('line') or '',
            amperage=row.get('amperage'),
            details=row.get('details'),
            origin=RecordOrigin.REMOTE
        )

    @staticmethod
    def _map_product_to_row(product: Union[Product, ProductCreate]) -> Row:
        """Inverse mapping for insert/update/upsert (never carries id or origin)"""
        return {
            'code': product.code,
            'description': product.description,
            'reference': product.reference,
            'colors': list(product.colors),
            'image_url': product.image_url,
            'category': product.category,
            'subcategory': product.subcategory,
            'line': product.line,
            'amperage': product.amperage,
            'details': product.details,
        }

    def _map_rows(self, rows: List[Row]) -> List[Product]:
        try:
            return [self._map_row_to_product(row) for row in rows]
        except (KeyError, TypeError, PydanticValidationError) as e:
            raise TransportError(f"Malformed product row: {e}", table=self.TABLE, operation="select") from e

    @staticmethod
    def _validate(product: Union[Product, ProductCreate]) -> None:
        if not product.code or not product.code.strip():
            raise ValidationError("Produto sem código", field="code")
        if not product.description or not product.description.strip():
            raise ValidationError(f"Produto {product.code} sem descrição", field="description")

    async def get_all(self) -> List[Product]:
        """
        All products ordered by description

        On success the snapshot is written to the local cache; when the
        remote read fails the cached snapshot is returned instead (empty if
        it was never populated). A failed cache refresh is logged only.
        """
        try:
            rows = await self.remote.query(self.TABLE, order_by='description')
            products = self._map_rows(rows)
        except DataAccessError as e:
            logger.warning(
                f"Product fetch failed, serving local cache: {e}",
                extra={"event": "product_fallback_cache", "error_type": type(e).__name__}
            )
            return self.cache.load(local_cache.PRODUCTS, Product)

        try:
            self.cache.save(local_cache.PRODUCTS, products)
        except OSError as e:
            logger.error(
                f"Could not refresh product cache: {e}",
                extra={"event": "product_cache_write_failed", "error_type": type(e).__name__}
            )
        return products

    async def get_by_code(self, code: str) -> Optional[Product]:
        """
        Find product by code

        Returns:
            Product or None if not found
        """
        rows = await self.remote.query(self.TABLE, filters={'code': code})
        if not rows:
            return None
        return self._map_rows(rows)[0]

    async def find_by_ids(self, product_ids: Iterable[str]) -> List[Product]:
        """Products for a set of ids (missing ids are simply absent)"""
        ids = sorted(set(product_ids))
        if not ids:
            return []
        rows = await self.remote.query(self.TABLE, filters={'id': ids})
        return self._map_rows(rows)

    async def create(self, product: ProductCreate) -> Product:
        """
        Insert a product; the store assigns the id

        Raises:
            ValidationError: missing code/description (no remote call made)
            TransportError / ConstraintError: surfaced as-is
        """
        self._validate(product)

        rows = await self.remote.insert(self.TABLE, [self._map_product_to_row(product)])
        if not rows:
            raise TransportError("Insert returned no row", table=self.TABLE, operation="insert")

        created = self._map_rows(rows)[0]
        logger.info(f"Product created: {created.code} ({created.id})")
        return created

    async def update(self, product: Product) -> None:
        self._validate(product)
        await self.remote.update(self.TABLE, product.id, self._map_product_to_row(product))

    async def delete(self, product_id: str) -> None:
        await self.remote.delete(self.TABLE, product_id)

    async def upsert_many(self, products: List[ProductCreate]) -> None:
        """
        Insert-or-update a batch keyed by product code (last import wins)

        Submitted as a single upsert call.
        """
        for product in products:
            self._validate(product)
        if not products:
            return

        rows = [self._map_product_to_row(product) for product in products]
        await self.remote.upsert(self.TABLE, rows, self.CONFLICT_KEY)
        logger.info(f"Upserted {len(rows)} products by {self.CONFLICT_KEY}")
