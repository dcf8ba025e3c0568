"""
Dicompel Pedidos - Backend API
Catálogo, pedidos e CRM de representantes
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk.api import auth, orders, products, users
from orderdesk.core.config import settings
from orderdesk.core.database import open_local_cache

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = open_local_cache()
    logger.info(f"Local cache ready at {cache.directory}")
    yield


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])


@app.get("/")
async def root():
    """Endpoint raíz - Verificación de estado de la API"""
    return {
        "message": "Dicompel Pedidos API",
        "status": "online",
        "version": settings.API_VERSION
    }


@app.get("/api/v1/status")
async def api_status():
    """Estado da configuração do backend remoto"""
    return {
        "supabase": {
            "configured": settings.supabase_configured,
            "status": "configured" if settings.supabase_configured else "local_fallback"
        },
        "local_cache_dir": settings.LOCAL_CACHE_DIR
    }
