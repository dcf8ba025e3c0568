"""
Conexión al backend remoto (Supabase) y al cache local

Este módulo centraliza la construcción de las dos fuentes de datos:
- SupabaseRemoteStore (fuente autoritativa compartida)
- LocalCache (snapshot en el dispositivo, solo para fallback)

Author: Dicompel
Updated: 2026-09-03
"""
import logging
from typing import Optional

from orderdesk.core.config import settings
from orderdesk.core.local_cache import LocalCache
from orderdesk.core.remote_store import RemoteStore, SupabaseRemoteStore

logger = logging.getLogger(__name__)


_remote_store: Optional[RemoteStore] = None
_local_cache: Optional[LocalCache] = None


def get_remote_store() -> RemoteStore:
    """
    FastAPI dependency para obtener el RemoteStore

    Usage:
        @router.get("/items")
        async def read_items(store: RemoteStore = Depends(get_remote_store)):
            ...
    """
    global _remote_store
    if _remote_store is None:
        if not settings.supabase_configured:
            logger.warning(
                "Supabase keys missing or malformed; remote calls will fail and local fallbacks apply",
                extra={"event": "remote_store_unconfigured"}
            )
        _remote_store = SupabaseRemoteStore(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    return _remote_store


def get_local_cache() -> LocalCache:
    """FastAPI dependency para obtener el LocalCache (abierto en el startup)"""
    global _local_cache
    if _local_cache is None:
        _local_cache = LocalCache(settings.LOCAL_CACHE_DIR)
    return _local_cache


def open_local_cache() -> LocalCache:
    """Called once at application startup"""
    return get_local_cache().open()
