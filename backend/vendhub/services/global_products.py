"""
Global product service and the import catalog browser.

Products always belong to a category and to a product type of that same
category. in_global_catalog / in_company_catalog are placement flags stored
as given.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from vendhub.core.config import settings
from vendhub.core.exceptions import DependencyConflictError, NotFoundError, ValidationError
from vendhub.core.principal import Principal, require_admin, require_operator
from vendhub.gateway import (
    COMPANY_PRODUCTS,
    GLOBAL_PRODUCTS,
    MACHINE_CATEGORIES,
    PRODUCT_TYPES,
    Embed,
    Gateway,
)
from vendhub.schemas.common import DeleteResult
from vendhub.schemas.global_product import (
    CatalogFilters,
    CatalogGroup,
    GlobalProductCreate,
    GlobalProductItem,
    GlobalProductUpdate,
)
from vendhub.schemas.machine_category import CategorySummary
from vendhub.schemas.product_type import ProductTypeSummary
from vendhub.services.common import get_or_404, require_text

logger = logging.getLogger(__name__)

ENTITY = "Global product"

DISPLAY_EMBED = (
    Embed(MACHINE_CATEGORIES, ("name", "icon")),
    Embed(PRODUCT_TYPES, ("name",)),
)


async def list_global_products(gw: Gateway, principal: Principal) -> List[GlobalProductItem]:
    rows = await gw.select(GLOBAL_PRODUCTS, order="product_name", embed=DISPLAY_EMBED)
    return [GlobalProductItem.model_validate(r) for r in rows]


async def list_by_category(gw: Gateway, principal: Principal, category_id: str) -> List[GlobalProductItem]:
    rows = await gw.select(
        GLOBAL_PRODUCTS, {"machine_category_id": category_id}, order="product_name", embed=DISPLAY_EMBED
    )
    return [GlobalProductItem.model_validate(r) for r in rows]


async def get_global_product(gw: Gateway, principal: Principal, product_id: str) -> GlobalProductItem:
    row = await get_or_404(gw, GLOBAL_PRODUCTS, product_id, ENTITY, embed=DISPLAY_EMBED)
    return GlobalProductItem.model_validate(row)


async def _check_category_and_type(gw: Gateway, category_id: str, type_id: str) -> None:
    category, product_type = await asyncio.gather(
        gw.get(MACHINE_CATEGORIES, category_id),
        gw.get(PRODUCT_TYPES, type_id),
    )
    if category is None:
        raise NotFoundError("Machine category", category_id)
    if product_type is None:
        raise NotFoundError("Product type", type_id)
    if product_type["machine_category_id"] != category_id:
        raise ValidationError(
            "Product type does not belong to the selected machine category",
            field="product_type_id",
            value=type_id,
        )


async def create_global_product(
    gw: Gateway, principal: Principal, data: GlobalProductCreate
) -> GlobalProductItem:
    require_admin(principal, "create global product")
    values: Dict[str, Any] = {
        "machine_category_id": require_text(data.machine_category_id, "machine_category_id"),
        "product_type_id": require_text(data.product_type_id, "product_type_id"),
        "brand": require_text(data.brand, "brand"),
        "product_name": require_text(data.product_name, "product_name"),
        "image": (data.image or "").strip() or settings.PLACEHOLDER_IMAGE_URL,
        "in_global_catalog": data.in_global_catalog,
        "in_company_catalog": data.in_company_catalog,
    }
    await _check_category_and_type(gw, values["machine_category_id"], values["product_type_id"])
    row = await gw.insert(GLOBAL_PRODUCTS, values)
    logger.info("Global product %s (%s %s) created", row["id"], values["brand"], values["product_name"])
    return GlobalProductItem.model_validate(row)


async def update_global_product(
    gw: Gateway, principal: Principal, product_id: str, data: GlobalProductUpdate
) -> GlobalProductItem:
    require_admin(principal, "update global product")
    updates = data.model_dump(exclude_unset=True)
    for field in ("brand", "product_name", "machine_category_id", "product_type_id"):
        if field in updates:
            updates[field] = require_text(updates[field], field)
    for flag in ("in_global_catalog", "in_company_catalog"):
        if flag in updates and updates[flag] is None:
            raise ValidationError(f"{flag} cannot be null", field=flag)
    if "image" in updates:
        updates["image"] = (updates["image"] or "").strip() or settings.PLACEHOLDER_IMAGE_URL

    if "machine_category_id" in updates or "product_type_id" in updates:
        current = await get_or_404(gw, GLOBAL_PRODUCTS, product_id, ENTITY)
        await _check_category_and_type(
            gw,
            updates.get("machine_category_id", current["machine_category_id"]),
            updates.get("product_type_id", current["product_type_id"]),
        )

    row = await gw.update(GLOBAL_PRODUCTS, product_id, updates)
    if row is None:
        raise NotFoundError(ENTITY, product_id)
    logger.info("Global product %s updated", product_id)
    return GlobalProductItem.model_validate(row)


async def delete_global_product(gw: Gateway, principal: Principal, product_id: str) -> DeleteResult:
    """Delete a product no company has imported; imported products would be orphaned."""
    require_admin(principal, "delete global product")
    await get_or_404(gw, GLOBAL_PRODUCTS, product_id, ENTITY)
    imported = await gw.count(COMPANY_PRODUCTS, {"product_id": product_id})
    if imported:
        logger.warning("Refused to delete global product %s: imported by %s companies", product_id, imported)
        raise DependencyConflictError("product", product_id, {"company_products": imported})
    count = await gw.delete(GLOBAL_PRODUCTS, product_id)
    if count == 0:
        raise NotFoundError(ENTITY, product_id)
    logger.info("Global product %s deleted", product_id)
    return DeleteResult(deleted=True, count=count)


def _matches(product: GlobalProductItem, filters: CatalogFilters, search: Optional[str]) -> bool:
    if filters.machine_category_id and product.machine_category_id != filters.machine_category_id:
        return False
    if filters.product_type_id and product.product_type_id != filters.product_type_id:
        return False
    if search:
        return search in product.brand.lower() or search in product.product_name.lower()
    return True


async def browse_catalog(gw: Gateway, principal: Principal, filters: CatalogFilters) -> List[CatalogGroup]:
    """
    Global catalog as offered for import, grouped by machine category.

    Products, categories and types are loaded concurrently, then filtered by
    category, type and a case-insensitive search on brand and product name.
    Only products placed in the global catalog are offered.
    """
    require_operator(principal, "browse global catalog")
    product_rows, category_rows, type_rows = await asyncio.gather(
        gw.select(GLOBAL_PRODUCTS, {"in_global_catalog": True}, order="product_name"),
        gw.select(MACHINE_CATEGORIES, order="name"),
        gw.select(PRODUCT_TYPES, order="name"),
    )
    categories = {c["id"]: c for c in category_rows}
    type_names = {t["id"]: t["name"] for t in type_rows}
    search = (filters.search or "").strip().lower() or None

    groups: Dict[str, CatalogGroup] = {}
    for row in product_rows:
        product = GlobalProductItem.model_validate(row)
        if not _matches(product, filters, search):
            continue
        category = categories.get(product.machine_category_id)
        if category is not None:
            product.machine_categories = CategorySummary(name=category["name"], icon=category.get("icon"))
        if product.product_type_id in type_names:
            product.product_types = ProductTypeSummary(name=type_names[product.product_type_id])
        group = groups.get(product.machine_category_id)
        if group is None:
            group = groups[product.machine_category_id] = CatalogGroup(
                machine_category_id=product.machine_category_id,
                category_name=category["name"] if category else "Unknown",
                icon=category.get("icon") if category else None,
            )
        group.products.append(product)

    # keep category order (by name) for display
    order = {cid: i for i, cid in enumerate(categories)}
    return sorted(groups.values(), key=lambda g: order.get(g.machine_category_id, len(order)))
