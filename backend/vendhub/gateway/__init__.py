from vendhub.core.config import Settings
from vendhub.gateway.base import (
    COMPANY_PRODUCTS,
    GLOBAL_PRODUCTS,
    MACHINE_CATEGORIES,
    MACHINE_TEMPLATES,
    PRODUCT_TYPES,
    Embed,
    Gateway,
)
from vendhub.gateway.rest import RestGateway
from vendhub.gateway.sql import SqlGateway


def create_gateway(settings: Settings) -> Gateway:
    """SQL gateway when DATABASE_URL is configured, otherwise the hosted REST endpoint."""
    if settings.DATABASE_URL:
        from vendhub.core.database import create_engine

        return SqlGateway(create_engine(settings.DATABASE_URL))
    return RestGateway(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        timeout=settings.GATEWAY_TIMEOUT_SECONDS,
    )


__all__ = [
    "COMPANY_PRODUCTS",
    "GLOBAL_PRODUCTS",
    "MACHINE_CATEGORIES",
    "MACHINE_TEMPLATES",
    "PRODUCT_TYPES",
    "Embed",
    "Gateway",
    "RestGateway",
    "SqlGateway",
    "create_gateway",
]
