"""
Order Repository - Data Access Layer for order tables

Table-level access to `orders`, `order_items` and `interactions`. Composing
these rows into an `Order` is the job of OrderService.

Update and delete failures are logged, never raised: existing callers treat
them as fire-and-forget.

Author: Dicompel
Date: 2026-09-07
"""
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from orderdesk.core.errors import DataAccessError, TransportError
from orderdesk.core.remote_store import RemoteStore, Row
from orderdesk.domain.order import (
    CartItem,
    CRMInteraction,
    InteractionCreate,
    OrderCreate,
    OrderStatus,
    OrderUpdate,
)

logger = logging.getLogger(__name__)


class OrderRepository:
    """Repository for order headers, line items and interactions"""

    ORDERS = "orders"
    ITEMS = "order_items"
    INTERACTIONS = "interactions"

    def __init__(self, remote: RemoteStore):
        self.remote = remote

    @staticmethod
    def _map_interaction_row(row: dict) -> CRMInteraction:
        return CRMInteraction(
            id=str(row['id']),
            date=row['date'],
            type=row['type'],
            content=row.get('content') or '',
            author_name=row.get('author_name') or ''
        )

    async def insert_header(self, order: OrderCreate) -> Row:
        """
        Step 1 of order creation: one header row

        Returns:
            The stored row, including the generated id and created_at
        """
        rows = await self.remote.insert(self.ORDERS, [{
            'representative_id': order.representative_id,
            'customer_name': order.customer_name,
            'customer_contact': order.customer_contact,
            'notes': order.notes,
            'status': OrderStatus.NEW.value,
        }])
        if not rows or 'id' not in rows[0]:
            raise TransportError("Order insert returned no id", table=self.ORDERS, operation="insert")
        if not rows[0].get('created_at'):
            raise TransportError("Order insert returned no created_at", table=self.ORDERS, operation="insert")
        return rows[0]

    async def insert_items(self, order_id: str, items: Iterable[CartItem]) -> None:
        """
        Step 2 of order creation: one row per cart item, in a single batch

        Only the product reference and quantity are written; product details
        are joined back on read.
        """
        rows = [
            {'order_id': order_id, 'product_id': item.id, 'quantity': item.quantity}
            for item in items
        ]
        await self.remote.insert(self.ITEMS, rows)

    async def find_headers(self, representative_id: Optional[str] = None) -> List[Row]:
        """
        Order headers, newest first

        The representative filter is applied here rather than in the query:
        seed-session ids such as `u2` are not valid values for the remote id
        column.
        """
        rows = await self.remote.query(self.ORDERS, order_by='created_at', descending=True)
        if representative_id:
            rows = [row for row in rows if str(row.get('representative_id')) == str(representative_id)]
        return rows

    async def find_header(self, order_id: str) -> Optional[Row]:
        rows = await self.remote.query(self.ORDERS, filters={'id': order_id})
        return rows[0] if rows else None

    async def find_items(self, order_ids: List[str]) -> Dict[str, List[Row]]:
        """Line-item rows grouped by order id"""
        grouped: Dict[str, List[Row]] = defaultdict(list)
        if not order_ids:
            return grouped
        for row in await self.remote.query(self.ITEMS, filters={'order_id': order_ids}):
            grouped[str(row['order_id'])].append(row)
        return grouped

    async def find_interactions(self, order_ids: List[str]) -> Dict[str, List[CRMInteraction]]:
        """Interactions grouped by order id, oldest first"""
        grouped: Dict[str, List[CRMInteraction]] = defaultdict(list)
        if not order_ids:
            return grouped
        rows = await self.remote.query(self.INTERACTIONS, filters={'order_id': order_ids}, order_by='date')
        try:
            for row in rows:
                grouped[str(row['order_id'])].append(self._map_interaction_row(row))
        except (KeyError, PydanticValidationError) as e:
            raise TransportError(f"Malformed interaction row: {e}", table=self.INTERACTIONS, operation="select") from e
        for interactions in grouped.values():
            interactions.sort(key=lambda interaction: interaction.date)
        return grouped

    async def insert_interaction(self, order_id: str, interaction: InteractionCreate) -> CRMInteraction:
        """Append one entry to the CRM log (there is no edit or delete)"""
        rows = await self.remote.insert(self.INTERACTIONS, [{
            'order_id': order_id,
            'date': datetime.now(timezone.utc).isoformat(),
            'type': interaction.type.value,
            'content': interaction.content,
            'author_name': interaction.author_name,
        }])
        if not rows:
            raise TransportError("Interaction insert returned no row", table=self.INTERACTIONS, operation="insert")
        return self._map_interaction_row(rows[0])

    async def update(self, order_id: str, changes: OrderUpdate) -> None:
        """Patch status and/or notes. Failures are logged, not raised."""
        patch = {}
        if changes.status is not None:
            patch['status'] = changes.status.value
        if changes.notes is not None:
            patch['notes'] = changes.notes
        if not patch:
            return

        try:
            await self.remote.update(self.ORDERS, order_id, patch)
        except DataAccessError as e:
            logger.error(
                f"Order update failed silently: {e}",
                extra={
                    "event": "order_update_failed",
                    "order_id": order_id,
                    "error_type": type(e).__name__,
                    "patch": patch,
                }
            )

    async def delete(self, order_id: str) -> None:
        """Delete an order header. Failures are logged, not raised."""
        try:
            await self.remote.delete(self.ORDERS, order_id)
        except DataAccessError as e:
            logger.error(
                f"Order delete failed silently: {e}",
                extra={
                    "event": "order_delete_failed",
                    "order_id": order_id,
                    "error_type": type(e).__name__,
                }
            )
