"""
Company product service.

A company product is a global product imported into one company's catalog.
Pricing is always set by the operator after import. Activation for customer
building follows a two-state machine:

    inactive -> active    only while base_price is set
    active   -> inactive  always

The rule is checked against the merged (stored + requested) row, so clearing
the price of an active product is refused as well.
"""
import logging
from typing import Any, Dict, List, Optional

from vendhub.core.exceptions import (
    ActivationError,
    AlreadyImportedError,
    BackendError,
    NotFoundError,
    ValidationError,
)
from vendhub.core.principal import Principal, require_company_access
from vendhub.gateway import COMPANY_PRODUCTS, GLOBAL_PRODUCTS, Embed, Gateway
from vendhub.schemas.common import DeleteResult
from vendhub.schemas.company_product import (
    CompanyProductCreate,
    CompanyProductItem,
    CompanyProductUpdate,
)
from vendhub.services.common import get_or_404, require_text
from vendhub.services.global_products import DISPLAY_EMBED

logger = logging.getLogger(__name__)

ENTITY = "Company product"

CATALOG_EMBED = (Embed(GLOBAL_PRODUCTS, (), DISPLAY_EMBED),)


def resolve_company(principal: Principal, company_id: Optional[str]) -> str:
    """Explicit company, or the caller's own."""
    company_id = company_id or principal.company_id
    return require_text(company_id, "company_id")


def _normalize(row: Dict[str, Any], updates: Dict[str, Any], row_id: Any) -> Dict[str, Any]:
    """Apply catalog rules to a pending write and return the values to store."""
    merged = {**row, **updates}
    if not merged.get("commission_enabled"):
        if updates.get("commission_rate") is not None:
            raise ValidationError(
                "commission_rate requires commission_enabled",
                field="commission_rate",
                value=updates["commission_rate"],
            )
        if merged.get("commission_rate") is not None:
            updates["commission_rate"] = None
    if merged.get("active_for_customer_building") and merged.get("base_price") is None:
        raise ActivationError(row_id)
    return updates


async def list_by_company(gw: Gateway, principal: Principal, company_id: str) -> List[CompanyProductItem]:
    """Company catalog with each global product (and its category/type names), newest first."""
    require_company_access(principal, company_id, "list company products")
    rows = await gw.select(
        COMPANY_PRODUCTS, {"company_id": company_id}, order="created_at", descending=True, embed=CATALOG_EMBED
    )
    return [CompanyProductItem.model_validate(r) for r in rows]


async def get_company_product(gw: Gateway, principal: Principal, company_product_id: str) -> CompanyProductItem:
    row = await get_or_404(gw, COMPANY_PRODUCTS, company_product_id, ENTITY, embed=CATALOG_EMBED)
    require_company_access(principal, row["company_id"], "view company product")
    return CompanyProductItem.model_validate(row)


async def _ensure_not_imported(gw: Gateway, product_id: str, company_id: str) -> None:
    existing = await gw.select(COMPANY_PRODUCTS, {"product_id": product_id, "company_id": company_id})
    if existing:
        logger.info("Product %s already in catalog of company %s", product_id, company_id)
        raise AlreadyImportedError(product_id, company_id)


async def _insert(gw: Gateway, values: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return await gw.insert(COMPANY_PRODUCTS, values)
    except BackendError as e:
        # lost a race against a concurrent import of the same product
        if e.is_unique_violation:
            raise AlreadyImportedError(values["product_id"], values["company_id"]) from e
        raise


async def import_from_global(
    gw: Gateway, principal: Principal, product_id: str, company_id: str
) -> CompanyProductItem:
    """
    Fork a global product into a company's catalog.

    The new row never carries pricing: no base price, inactive, commission
    off. Importing a product twice raises AlreadyImportedError.
    """
    require_company_access(principal, company_id, "import product")
    product_id = require_text(product_id, "product_id")
    await get_or_404(gw, GLOBAL_PRODUCTS, product_id, "Global product")
    await _ensure_not_imported(gw, product_id, company_id)
    row = await _insert(
        gw,
        {
            "product_id": product_id,
            "company_id": company_id,
            "base_price": None,
            "active_for_customer_building": False,
            "commission_enabled": False,
            "commission_rate": None,
        },
    )
    logger.info("Product %s imported into company %s by %s", product_id, company_id, principal.user_id)
    return CompanyProductItem.model_validate(row)


async def create_company_product(
    gw: Gateway, principal: Principal, data: CompanyProductCreate
) -> CompanyProductItem:
    company_id = resolve_company(principal, data.company_id)
    require_company_access(principal, company_id, "create company product")
    product_id = require_text(data.product_id, "product_id")
    await get_or_404(gw, GLOBAL_PRODUCTS, product_id, "Global product")
    await _ensure_not_imported(gw, product_id, company_id)
    values = data.model_dump()
    values.update(product_id=product_id, company_id=company_id)
    values = _normalize({}, values, None)
    row = await _insert(gw, values)
    logger.info("Company product %s created for company %s", row["id"], company_id)
    return CompanyProductItem.model_validate(row)


async def update_company_product(
    gw: Gateway, principal: Principal, company_product_id: str, data: CompanyProductUpdate
) -> CompanyProductItem:
    """Partial update; refuses to leave the product active without a base price."""
    current = await get_or_404(gw, COMPANY_PRODUCTS, company_product_id, ENTITY)
    require_company_access(principal, current["company_id"], "update company product")
    updates = data.model_dump(exclude_unset=True)
    for flag in ("active_for_customer_building", "commission_enabled"):
        if flag in updates and updates[flag] is None:
            raise ValidationError(f"{flag} cannot be null", field=flag)
    try:
        updates = _normalize(current, updates, company_product_id)
    except ActivationError:
        logger.warning("Refused to activate company product %s without a base price", company_product_id)
        raise
    row = await gw.update(COMPANY_PRODUCTS, company_product_id, updates)
    if row is None:
        raise NotFoundError(ENTITY, company_product_id)
    logger.info("Company product %s updated", company_product_id)
    return CompanyProductItem.model_validate(row)


async def set_active(
    gw: Gateway, principal: Principal, company_product_id: str, active: bool
) -> CompanyProductItem:
    return await update_company_product(
        gw, principal, company_product_id, CompanyProductUpdate(active_for_customer_building=active)
    )


async def toggle_active(gw: Gateway, principal: Principal, company_product_id: str) -> CompanyProductItem:
    """Flip active_for_customer_building (activation still needs a base price)."""
    current = await get_or_404(gw, COMPANY_PRODUCTS, company_product_id, ENTITY)
    return await set_active(gw, principal, company_product_id, not current["active_for_customer_building"])


async def delete_company_product(gw: Gateway, principal: Principal, company_product_id: str) -> DeleteResult:
    current = await get_or_404(gw, COMPANY_PRODUCTS, company_product_id, ENTITY)
    require_company_access(principal, current["company_id"], "delete company product")
    count = await gw.delete(COMPANY_PRODUCTS, company_product_id)
    if count == 0:
        raise NotFoundError(ENTITY, company_product_id)
    logger.info("Company product %s removed from company %s", company_product_id, current["company_id"])
    return DeleteResult(deleted=True, count=count)
