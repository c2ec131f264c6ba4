"""Helpers shared by the catalog services."""
from typing import Any, Dict, Optional

from vendhub.core.exceptions import NotFoundError, ValidationError
from vendhub.gateway import Gateway


def require_text(value: Optional[str], field: str) -> str:
    """Required string field: strip it and refuse blanks."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required", field=field, value=value)
    return text


def clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


async def get_or_404(gw: Gateway, table: str, row_id: str, entity_type: str, **kwargs) -> Dict[str, Any]:
    row = await gw.get(table, row_id, **kwargs)
    if row is None:
        raise NotFoundError(entity_type, row_id)
    return row
