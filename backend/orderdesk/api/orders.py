"""
Orders API Endpoints
Order submission, kanban reads and the CRM log

Author: Dicompel
Date: 2026-09-10
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from orderdesk.api.deps import get_order_service, require_user, to_http_error
from orderdesk.core.errors import DataAccessError
from orderdesk.domain.order import CartItem, InteractionCreate, OrderCreate, OrderUpdate
from orderdesk.domain.user import User
from orderdesk.services.csv_importer import export_cart_csv
from orderdesk.services.order_service import OrderService

router = APIRouter()


class CartExport(BaseModel):
    items: List[CartItem]
    reseller_name: str = ""


@router.get("/")
async def get_orders(
    user: User = Depends(require_user),
    service: OrderService = Depends(get_order_service)
):
    """
    Orders visible to the logged-in user, newest first

    Empty when the remote store is unreachable (orders are never cached).
    """
    orders = await service.list_orders_for(user)
    return {
        "status": "success",
        "count": len(orders),
        "data": [order.to_dict() for order in orders]
    }


@router.get("/stats")
async def get_order_stats(
    user: User = Depends(require_user),
    service: OrderService = Depends(get_order_service)
):
    orders = await service.list_orders_for(user)
    return {"status": "success", "data": service.dashboard_stats(orders).to_dict()}


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    user: User = Depends(require_user),
    service: OrderService = Depends(get_order_service)
):
    """Managers see any order; a representative only their own"""
    try:
        order = await service.get_order(order_id)
    except DataAccessError as e:
        raise to_http_error(e)

    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    if not user.is_manager and order.representative_id != user.id:
        raise HTTPException(status_code=403, detail="Access denied to this order")
    return {"status": "success", "data": order.to_dict()}


@router.post("/", status_code=201)
async def create_order(order: OrderCreate, service: OrderService = Depends(get_order_service)):
    """
    Submit the cart as an order

    A 502 carrying `order_id` means the header was stored but its items were not.
    """
    try:
        created = await service.create_order(order)
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success", "data": created.to_dict()}


@router.patch("/{order_id}")
async def update_order(
    order_id: str,
    changes: OrderUpdate,
    service: OrderService = Depends(get_order_service)
):
    # Fire-and-forget: failures are logged server-side only
    await service.update_order(order_id, changes)
    return {"status": "success"}


@router.delete("/{order_id}")
async def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    await service.delete_order(order_id)
    return {"status": "success"}


@router.post("/{order_id}/interactions", status_code=201)
async def add_interaction(
    order_id: str,
    interaction: InteractionCreate,
    service: OrderService = Depends(get_order_service)
):
    try:
        created = await service.add_interaction(order_id, interaction)
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success", "data": created.model_dump(mode="json")}


@router.post("/cart/export", response_class=PlainTextResponse)
async def export_cart(cart: CartExport):
    return PlainTextResponse(
        export_cart_csv(cart.items, cart.reseller_name),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=pedido.csv"}
    )
