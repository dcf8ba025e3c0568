"""
Repository Layer - Data Access

This layer handles all remote-store calls and local fallbacks and returns
domain models. Repositories abstract storage details from business logic.

Author: Dicompel
Date: 2026-09-06
"""
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.repositories.user_repository import UserRepository
from orderdesk.repositories.order_repository import OrderRepository

__all__ = [
    'ProductRepository',
    'UserRepository',
    'OrderRepository'
]
