"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: Dicompel
Date: 2026-09-02
"""
from orderdesk.domain.origin import RecordOrigin
from orderdesk.domain.product import Product, ProductCreate
from orderdesk.domain.user import User, UserCreate, UserRole, Identity
from orderdesk.domain.order import (
    Order,
    OrderCreate,
    OrderUpdate,
    OrderStatus,
    CartItem,
    CRMInteraction,
    InteractionCreate,
    InteractionType,
    DashboardStats,
)

__all__ = [
    'RecordOrigin',
    'Product', 'ProductCreate',
    'User', 'UserCreate', 'UserRole', 'Identity',
    'Order', 'OrderCreate', 'OrderUpdate', 'OrderStatus', 'CartItem',
    'CRMInteraction', 'InteractionCreate', 'InteractionType', 'DashboardStats',
]
