"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Dicompel Pedidos API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Catálogo, pedidos e CRM de representantes"

    # Remote store (Supabase). Left empty, every remote call fails with
    # TransportError and the local fallbacks take over.
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""

    # On-device cache
    LOCAL_CACHE_DIR: str = ".orderdesk_cache"

    # Identifiers longer than this are treated as remote-origin (UUIDs are 36)
    REMOTE_ID_MIN_LENGTH: int = 20

    LOG_LEVEL: str = "INFO"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:5173"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def supabase_configured(self) -> bool:
        """True when the URL and key look like a real Supabase project"""
        return (
            ".supabase.co" in self.SUPABASE_URL
            and len(self.SUPABASE_ANON_KEY) > 20
        )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
