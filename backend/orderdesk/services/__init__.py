"""
Service Layer - order protocol, authentication, CSV import/export
"""
from orderdesk.services.auth_service import AuthService
from orderdesk.services.csv_importer import CsvImporter, ImportResult
from orderdesk.services.order_service import OrderService
from orderdesk.services.origin_classifier import classify_origin, resolve_origin

__all__ = [
    'AuthService',
    'CsvImporter',
    'ImportResult',
    'OrderService',
    'classify_origin',
    'resolve_origin',
]
