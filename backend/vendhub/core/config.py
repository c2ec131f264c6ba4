from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


def _parse_cors_origins(s: str) -> List[str]:
    """Parse CORS_ORIGINS from comma-separated or JSON array string."""
    s = (s or "").strip()
    if not s:
        return []
    if s.startswith("["):
        import json
        try:
            out = json.loads(s)
            return [str(x).strip() for x in out if x]
        except ValueError:
            pass
    return [x.strip() for x in s.split(",") if x.strip()]


class Settings(BaseSettings):
    """Application settings from env."""

    # Hosted backend (PostgREST endpoint + anon/service key). Both are required:
    # the app refuses to start without them.
    SUPABASE_URL: str
    SUPABASE_KEY: str

    @field_validator("SUPABASE_URL", "SUPABASE_KEY")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    # Optional direct database connection; when set the SQL gateway is used
    # instead of the REST endpoint (self-hosted Postgres, local SQLite)
    DATABASE_URL: Optional[str] = None

    GATEWAY_TIMEOUT_SECONDS: float = 30.0

    # Access tokens are issued by the auth provider and signed with its JWT secret
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = "authenticated"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def cors_origins_list(cls, v: object) -> List[str]:
        if isinstance(v, list):
            return [str(x).strip() for x in v if x]
        return _parse_cors_origins(str(v) if v else "")

    LOG_LEVEL: str = "INFO"

    # Used for global products created without an image
    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/150x150?text=Product"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
