"""
Order Domain Models

Represents orders, their line items and the CRM interaction log.
An Order is a denormalized view composed from the `orders`,
`order_items`, `products` and `interactions` tables.

Author: Dicompel
Date: 2026-09-02
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

from orderdesk.domain.origin import RecordOrigin
from orderdesk.domain.product import Product


# Substituted for line items whose product has since been deleted
MISSING_PRODUCT_CODE = "N/D"
MISSING_PRODUCT_DESCRIPTION = "Produto removido do catálogo"

DEFAULT_CUSTOMER_NAME = "Cliente Anônimo"


class OrderStatus(str, Enum):
    """Order status, stored verbatim in `orders.status`"""
    NEW = "Novo"
    IN_PROGRESS = "Em Atendimento"
    WAITING_STOCK = "Aguardando Estoque"
    CLOSED = "Finalizado"
    CANCELLED = "Cancelado"


class InteractionType(str, Enum):
    NOTE = "note"
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"


class CartItem(Product):
    """
    A product snapshot plus a quantity.

    Once added to an order it no longer tracks live product edits.
    """

    quantity: int = Field(..., description="Quantity ordered", ge=1)


class CRMInteraction(BaseModel):
    """One entry of the append-only interaction log of an order"""

    id: str = Field(..., description="Interaction identifier")
    date: datetime = Field(..., description="When the interaction was recorded")
    type: InteractionType = Field(..., description="note, call, email or meeting")
    content: str = Field(..., description="Free text")
    author_name: str = Field(..., description="Display name of the author")

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    """
    Order domain model

    Fields:
        id: Order identifier (generated by the store)
        customer_name / customer_contact: Optional customer info
        representative_id: User id of the representative
        items: Line items joined to current product records
        status: OrderStatus
        created_at: Creation timestamp (generated by the store)
        notes: Free-text notes
        interactions: CRM log, in creation order
    """

    id: str = Field(..., description="Order identifier")
    customer_name: Optional[str] = Field(None, description="Customer name")
    customer_contact: Optional[str] = Field(None, description="Customer contact")
    representative_id: str = Field(..., description="Representative user id")
    items: List[CartItem] = Field(default_factory=list, description="Line items")
    status: OrderStatus = Field(OrderStatus.NEW, description="Order status")
    created_at: datetime = Field(..., description="Creation timestamp")
    notes: str = Field("", description="Free-text notes")
    interactions: List[CRMInteraction] = Field(default_factory=list, description="CRM log")
    origin: Optional[RecordOrigin] = Field(None, description="Record provenance")

    model_config = ConfigDict(from_attributes=True)

    @property
    def item_count(self) -> int:
        """Number of line items"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)

    @property
    def is_orphan(self) -> bool:
        """Header persisted without any line item (partial write)"""
        return not self.items

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump(mode="json")
        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity
        data['is_orphan'] = self.is_orphan
        return data


class OrderCreate(BaseModel):
    """Schema for submitting a new order from the cart"""
    representative_id: str = ""
    items: List[CartItem] = Field(default_factory=list)
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None
    notes: str = ""


class OrderUpdate(BaseModel):
    """Only status and notes are mutable once an order exists"""
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None


class InteractionCreate(BaseModel):
    type: InteractionType = InteractionType.NOTE
    content: str = ""
    author_name: str = ""


class DashboardStats(BaseModel):
    total_orders: int = 0
    new_orders: int = 0
    completed_orders: int = 0

    def to_dict(self) -> dict:
        return self.model_dump()
