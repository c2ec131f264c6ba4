"""Machine template service. template_data is stored as given and never interpreted."""
import logging
from typing import List

from vendhub.core.exceptions import NotFoundError, ValidationError
from vendhub.core.principal import Principal, require_admin
from vendhub.gateway import MACHINE_CATEGORIES, MACHINE_TEMPLATES, Embed, Gateway
from vendhub.schemas.common import DeleteResult
from vendhub.schemas.machine_template import (
    MachineTemplateCreate,
    MachineTemplateItem,
    MachineTemplateUpdate,
)
from vendhub.services.common import clean_optional, get_or_404, require_text

logger = logging.getLogger(__name__)

ENTITY = "Machine template"

CATEGORY_EMBED = (Embed(MACHINE_CATEGORIES, ("name", "icon")),)


async def list_templates(gw: Gateway, principal: Principal) -> List[MachineTemplateItem]:
    rows = await gw.select(MACHINE_TEMPLATES, order="name", embed=CATEGORY_EMBED)
    return [MachineTemplateItem.model_validate(r) for r in rows]


async def list_by_category(gw: Gateway, principal: Principal, category_id: str) -> List[MachineTemplateItem]:
    rows = await gw.select(
        MACHINE_TEMPLATES, {"machine_category_id": category_id}, order="name", embed=CATEGORY_EMBED
    )
    return [MachineTemplateItem.model_validate(r) for r in rows]


async def get_template(gw: Gateway, principal: Principal, template_id: str) -> MachineTemplateItem:
    row = await get_or_404(gw, MACHINE_TEMPLATES, template_id, ENTITY, embed=CATEGORY_EMBED)
    return MachineTemplateItem.model_validate(row)


async def create_template(gw: Gateway, principal: Principal, data: MachineTemplateCreate) -> MachineTemplateItem:
    require_admin(principal, "create machine template")
    if data.template_data is None:
        raise ValidationError("template_data is required", field="template_data")
    category_id = require_text(data.machine_category_id, "machine_category_id")
    await get_or_404(gw, MACHINE_CATEGORIES, category_id, "Machine category")
    row = await gw.insert(
        MACHINE_TEMPLATES,
        {
            "name": require_text(data.name, "name"),
            "machine_category_id": category_id,
            "description": clean_optional(data.description),
            "template_data": data.template_data,
        },
    )
    logger.info("Machine template %s created in category %s", row["id"], category_id)
    return MachineTemplateItem.model_validate(row)


async def update_template(
    gw: Gateway, principal: Principal, template_id: str, data: MachineTemplateUpdate
) -> MachineTemplateItem:
    require_admin(principal, "update machine template")
    updates = data.model_dump(exclude_unset=True)
    if "name" in updates:
        updates["name"] = require_text(updates["name"], "name")
    if "description" in updates:
        updates["description"] = clean_optional(updates["description"])
    if "template_data" in updates and updates["template_data"] is None:
        raise ValidationError("template_data is required", field="template_data")
    if "machine_category_id" in updates:
        updates["machine_category_id"] = require_text(updates["machine_category_id"], "machine_category_id")
        await get_or_404(gw, MACHINE_CATEGORIES, updates["machine_category_id"], "Machine category")
    row = await gw.update(MACHINE_TEMPLATES, template_id, updates)
    if row is None:
        raise NotFoundError(ENTITY, template_id)
    logger.info("Machine template %s updated", template_id)
    return MachineTemplateItem.model_validate(row)


async def delete_template(gw: Gateway, principal: Principal, template_id: str) -> DeleteResult:
    # nothing references templates, so no dependency check
    require_admin(principal, "delete machine template")
    count = await gw.delete(MACHINE_TEMPLATES, template_id)
    if count == 0:
        raise NotFoundError(ENTITY, template_id)
    logger.info("Machine template %s deleted", template_id)
    return DeleteResult(deleted=True, count=count)
