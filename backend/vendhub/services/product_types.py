"""Product type service. Types are deletable only while no global product uses them."""
import logging
from typing import List

from vendhub.core.exceptions import DependencyConflictError, NotFoundError, ValidationError
from vendhub.core.principal import Principal, require_admin
from vendhub.gateway import GLOBAL_PRODUCTS, MACHINE_CATEGORIES, PRODUCT_TYPES, Gateway
from vendhub.schemas.common import DeleteResult
from vendhub.schemas.product_type import ProductTypeCreate, ProductTypeItem, ProductTypeUpdate
from vendhub.services.common import get_or_404, require_text

logger = logging.getLogger(__name__)

ENTITY = "Product type"


async def list_product_types(gw: Gateway, principal: Principal) -> List[ProductTypeItem]:
    rows = await gw.select(PRODUCT_TYPES, order="name")
    return [ProductTypeItem.model_validate(r) for r in rows]


async def list_by_category(gw: Gateway, principal: Principal, category_id: str) -> List[ProductTypeItem]:
    rows = await gw.select(PRODUCT_TYPES, {"machine_category_id": category_id}, order="name")
    return [ProductTypeItem.model_validate(r) for r in rows]


async def get_product_type(gw: Gateway, principal: Principal, type_id: str) -> ProductTypeItem:
    return ProductTypeItem.model_validate(await get_or_404(gw, PRODUCT_TYPES, type_id, ENTITY))


async def create_product_type(gw: Gateway, principal: Principal, data: ProductTypeCreate) -> ProductTypeItem:
    require_admin(principal, "create product type")
    name = require_text(data.name, "name")
    category_id = require_text(data.machine_category_id, "machine_category_id")
    await get_or_404(gw, MACHINE_CATEGORIES, category_id, "Machine category")
    row = await gw.insert(PRODUCT_TYPES, {"name": name, "machine_category_id": category_id})
    logger.info("Product type %s created in category %s", row["id"], category_id)
    return ProductTypeItem.model_validate(row)


async def _ensure_unused(gw: Gateway, type_id: str, category_id: str) -> None:
    # products keep their own category, so a type in use cannot move
    used_by = await gw.count(GLOBAL_PRODUCTS, {"product_type_id": type_id})
    if used_by:
        logger.warning(
            "Refused to move product type %s to category %s: used by %s global products",
            type_id,
            category_id,
            used_by,
        )
        raise ValidationError(
            f"Product type is used by {used_by} global products and cannot move to another machine category",
            field="machine_category_id",
            value=category_id,
        )


async def update_product_type(
    gw: Gateway, principal: Principal, type_id: str, data: ProductTypeUpdate
) -> ProductTypeItem:
    require_admin(principal, "update product type")
    updates = data.model_dump(exclude_unset=True)
    if "name" in updates:
        updates["name"] = require_text(updates["name"], "name")
    if "machine_category_id" in updates:
        updates["machine_category_id"] = require_text(updates["machine_category_id"], "machine_category_id")
        await get_or_404(gw, MACHINE_CATEGORIES, updates["machine_category_id"], "Machine category")
        current = await get_or_404(gw, PRODUCT_TYPES, type_id, ENTITY)
        if updates["machine_category_id"] != current["machine_category_id"]:
            await _ensure_unused(gw, type_id, updates["machine_category_id"])
    row = await gw.update(PRODUCT_TYPES, type_id, updates)
    if row is None:
        raise NotFoundError(ENTITY, type_id)
    logger.info("Product type %s updated", type_id)
    return ProductTypeItem.model_validate(row)


async def delete_product_type(gw: Gateway, principal: Principal, type_id: str) -> DeleteResult:
    require_admin(principal, "delete product type")
    await get_or_404(gw, PRODUCT_TYPES, type_id, ENTITY)
    used_by = await gw.count(GLOBAL_PRODUCTS, {"product_type_id": type_id})
    if used_by:
        logger.warning("Refused to delete product type %s: used by %s global products", type_id, used_by)
        raise DependencyConflictError("product type", type_id, {"global_products": used_by})
    count = await gw.delete(PRODUCT_TYPES, type_id)
    if count == 0:
        raise NotFoundError(ENTITY, type_id)
    logger.info("Product type %s deleted", type_id)
    return DeleteResult(deleted=True, count=count)
