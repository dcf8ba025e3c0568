"""
Order Service
Composes order writes and rebuilds the denormalized Order view

Creating an order is a two-step saga with no transaction around it:
  1. insert the header row (id and created_at come back from the store)
  2. insert one line-item row per cart item, as a single batch
If step 2 fails the header stays behind with zero items. Nothing retries
step 2 and nothing deletes the orphan; the caller gets a PartialWriteError
carrying the orphan's id.

Author: Dicompel
Date: 2026-09-08
"""
import logging
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from orderdesk.core.errors import DataAccessError, PartialWriteError, TransportError, ValidationError
from orderdesk.core.remote_store import Row
from orderdesk.domain.order import (
    DEFAULT_CUSTOMER_NAME,
    MISSING_PRODUCT_CODE,
    MISSING_PRODUCT_DESCRIPTION,
    CartItem,
    CRMInteraction,
    DashboardStats,
    InteractionCreate,
    Order,
    OrderCreate,
    OrderStatus,
    OrderUpdate,
)
from orderdesk.domain.origin import RecordOrigin
from orderdesk.domain.product import Product
from orderdesk.domain.user import User
from orderdesk.repositories.order_repository import OrderRepository
from orderdesk.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def placeholder_product(product_id: str) -> Product:
    """Stands in for a product deleted after it was ordered"""
    return Product(
        id=str(product_id),
        code=MISSING_PRODUCT_CODE,
        description=MISSING_PRODUCT_DESCRIPTION
    )


class OrderService:
    """
    Service for order creation and order reads

    Handles:
    - Validation before any store call
    - The header + items creation saga
    - Joining items to current products and attaching the CRM log
    - Role-based listing and dashboard counts
    """

    def __init__(self, orders: OrderRepository, products: ProductRepository):
        self.orders = orders
        self.products = products

    @staticmethod
    def _validate(order: OrderCreate) -> None:
        if not order.items:
            raise ValidationError("Pedido sem itens", field="items")
        if not order.representative_id or not order.representative_id.strip():
            raise ValidationError("Pedido sem representante", field="representative_id")
        for item in order.items:
            if not item.id:
                raise ValidationError(f"Item {item.code} sem produto", field="items")

    async def create_order(self, order: OrderCreate) -> Order:
        """
        Create header, then items

        Raises:
            ValidationError: no items / no representative (no store call made)
            TransportError / ConstraintError: header insert failed (nothing written)
            PartialWriteError: header written, item batch failed (orphan left in place)
        """
        self._validate(order)

        if not (order.customer_name or '').strip():
            order = order.model_copy(update={'customer_name': DEFAULT_CUSTOMER_NAME})

        header = await self.orders.insert_header(order)
        order_id = str(header['id'])

        try:
            await self.orders.insert_items(order_id, order.items)
        except DataAccessError as e:
            logger.error(
                f"Order {order_id} created but items failed: {e}",
                extra={
                    "event": "order_items_failed",
                    "order_id": order_id,
                    "item_count": len(order.items),
                    "error_type": type(e).__name__,
                }
            )
            raise PartialWriteError(
                f"Pedido criado mas itens falharam: {e}",
                order_id=order_id,
                cause=e
            ) from e

        logger.info(f"Order {order_id} created with {len(order.items)} items")
        return Order(
            id=order_id,
            customer_name=order.customer_name,
            customer_contact=order.customer_contact,
            representative_id=order.representative_id,
            items=list(order.items),
            status=OrderStatus.NEW,
            created_at=header['created_at'],
            notes=order.notes,
            interactions=[],
            origin=RecordOrigin.REMOTE
        )

    async def _compose(self, headers: List[Row]) -> List[Order]:
        """Join headers with their items, current products and interactions"""
        order_ids = [str(header['id']) for header in headers]
        items_by_order = await self.orders.find_items(order_ids)
        interactions_by_order = await self.orders.find_interactions(order_ids)

        product_ids = {
            str(row['product_id'])
            for rows in items_by_order.values()
            for row in rows
        }
        products = {product.id: product for product in await self.products.find_by_ids(product_ids)}

        try:
            return [
                self._build_order(
                    header,
                    items_by_order.get(str(header['id']), []),
                    interactions_by_order.get(str(header['id']), []),
                    products
                )
                for header in headers
            ]
        except (KeyError, PydanticValidationError) as e:
            raise TransportError(f"Malformed order row: {e}", table=OrderRepository.ORDERS, operation="select") from e

    @staticmethod
    def _build_order(
        header: Row,
        item_rows: Iterable[Row],
        interactions: List[CRMInteraction],
        products: Dict[str, Product]
    ) -> Order:
        items = []
        for row in item_rows:
            product_id = str(row['product_id'])
            product = products.get(product_id) or placeholder_product(product_id)
            items.append(CartItem(**product.model_dump(), quantity=row['quantity']))

        return Order(
            id=str(header['id']),
            customer_name=header.get('customer_name'),
            customer_contact=header.get('customer_contact'),
            representative_id=str(header['representative_id']),
            items=items,
            status=header.get('status') or OrderStatus.NEW,
            created_at=header['created_at'],
            notes=header.get('notes') or '',
            interactions=interactions,
            origin=RecordOrigin.REMOTE
        )

    async def get_all(self, representative_id: Optional[str] = None) -> List[Order]:
        """
        All orders, newest first

        Orders have no local fallback: when the remote read fails for any
        data-access reason the result is an empty list.
        """
        try:
            headers = await self.orders.find_headers(representative_id)
            return await self._compose(headers)
        except DataAccessError as e:
            logger.error(
                f"Order fetch error: {e}",
                extra={"event": "order_fetch_failed", "error_type": type(e).__name__}
            )
            return []

    async def get_order(self, order_id: str) -> Optional[Order]:
        """
        One order by id, including orphan headers (zero items)

        Errors are surfaced: this is the administrative read used to find
        partial writes.
        """
        header = await self.orders.find_header(order_id)
        if header is None:
            return None
        orders = await self._compose([header])
        return orders[0]

    async def list_orders_for(self, user: User) -> List[Order]:
        """Admins and supervisors see every order; representatives see their own"""
        if user.is_manager:
            return await self.get_all()
        return await self.get_all(representative_id=user.id)

    async def update_order(self, order_id: str, changes: OrderUpdate) -> None:
        await self.orders.update(order_id, changes)

    async def delete_order(self, order_id: str) -> None:
        await self.orders.delete(order_id)

    async def add_interaction(self, order_id: str, interaction: InteractionCreate) -> CRMInteraction:
        """Append a CRM entry to an order; failures are surfaced"""
        if not interaction.content.strip():
            raise ValidationError("Interação sem conteúdo", field="content")
        if not interaction.author_name.strip():
            raise ValidationError("Interação sem autor", field="author_name")
        return await self.orders.insert_interaction(order_id, interaction)

    @staticmethod
    def dashboard_stats(orders: List[Order]) -> DashboardStats:
        return DashboardStats(
            total_orders=len(orders),
            new_orders=sum(1 for order in orders if order.status == OrderStatus.NEW),
            completed_orders=sum(1 for order in orders if order.status == OrderStatus.CLOSED)
        )
