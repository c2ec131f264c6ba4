"""
Machine category service.

Categories are the root of the global catalog. A category cannot be deleted
while product types, global products or machine templates reference it.
"""
import asyncio
import logging
from typing import List

from vendhub.core.exceptions import DependencyConflictError, NotFoundError
from vendhub.core.principal import Principal, require_admin
from vendhub.gateway import (
    GLOBAL_PRODUCTS,
    MACHINE_CATEGORIES,
    MACHINE_TEMPLATES,
    PRODUCT_TYPES,
    Gateway,
)
from vendhub.schemas.common import DeleteResult
from vendhub.schemas.machine_category import (
    CategoryDependencies,
    MachineCategoryCreate,
    MachineCategoryItem,
    MachineCategoryUpdate,
)
from vendhub.services.common import clean_optional, get_or_404, require_text

logger = logging.getLogger(__name__)

ENTITY = "Machine category"


async def list_categories(
    gw: Gateway, principal: Principal, include_dependencies: bool = False
) -> List[MachineCategoryItem]:
    """All categories ordered by name, optionally with each one's dependency report."""
    rows = await gw.select(MACHINE_CATEGORIES, order="name")
    items = [MachineCategoryItem.model_validate(r) for r in rows]
    if include_dependencies and items:
        reports = await asyncio.gather(*(check_dependencies(gw, c.id) for c in items))
        for item, deps in zip(items, reports):
            item.dependencies = deps
    return items


async def get_category(gw: Gateway, principal: Principal, category_id: str) -> MachineCategoryItem:
    return MachineCategoryItem.model_validate(await get_or_404(gw, MACHINE_CATEGORIES, category_id, ENTITY))


async def create_category(gw: Gateway, principal: Principal, data: MachineCategoryCreate) -> MachineCategoryItem:
    require_admin(principal, "create machine category")
    row = await gw.insert(
        MACHINE_CATEGORIES,
        {
            "name": require_text(data.name, "name"),
            "description": clean_optional(data.description),
            "icon": clean_optional(data.icon),
        },
    )
    logger.info("Machine category %s created by %s", row["id"], principal.user_id)
    return MachineCategoryItem.model_validate(row)


async def update_category(
    gw: Gateway, principal: Principal, category_id: str, data: MachineCategoryUpdate
) -> MachineCategoryItem:
    require_admin(principal, "update machine category")
    updates = data.model_dump(exclude_unset=True)
    if "name" in updates:
        updates["name"] = require_text(updates["name"], "name")
    for field in ("description", "icon"):
        if field in updates:
            updates[field] = clean_optional(updates[field])
    row = await gw.update(MACHINE_CATEGORIES, category_id, updates)
    if row is None:
        raise NotFoundError(ENTITY, category_id)
    logger.info("Machine category %s updated by %s", category_id, principal.user_id)
    return MachineCategoryItem.model_validate(row)


async def check_dependencies(gw: Gateway, category_id: str) -> CategoryDependencies:
    """Count rows referencing the category; the three counts run concurrently."""
    where = {"machine_category_id": category_id}
    product_types, global_products, machine_templates = await asyncio.gather(
        gw.count(PRODUCT_TYPES, where),
        gw.count(GLOBAL_PRODUCTS, where),
        gw.count(MACHINE_TEMPLATES, where),
    )
    return CategoryDependencies(
        has_product_types=product_types > 0,
        has_global_products=global_products > 0,
        has_machine_templates=machine_templates > 0,
        product_types_count=product_types,
        global_products_count=global_products,
        machine_templates_count=machine_templates,
    )


async def delete_category(gw: Gateway, principal: Principal, category_id: str) -> DeleteResult:
    """
    Delete a category that nothing references.

    Raises DependencyConflictError with the blocking counts otherwise. A
    delete the backend reports as matching zero rows is a NotFoundError, not
    a success.
    """
    require_admin(principal, "delete machine category")
    await get_or_404(gw, MACHINE_CATEGORIES, category_id, ENTITY)

    deps = await check_dependencies(gw, category_id)
    if deps.blocking:
        logger.warning(
            "Refused to delete machine category %s: %s types, %s products, %s templates",
            category_id,
            deps.product_types_count,
            deps.global_products_count,
            deps.machine_templates_count,
        )
        raise DependencyConflictError(
            "category",
            category_id,
            {
                "product_types": deps.product_types_count,
                "global_products": deps.global_products_count,
                "machine_templates": deps.machine_templates_count,
            },
        )

    count = await gw.delete(MACHINE_CATEGORIES, category_id)
    if count == 0:
        logger.warning("Delete of machine category %s removed no rows", category_id)
        raise NotFoundError(ENTITY, category_id)
    logger.info("Machine category %s deleted by %s", category_id, principal.user_id)
    return DeleteResult(deleted=True, count=count)
