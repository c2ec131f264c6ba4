from typing import Optional

from fastapi import APIRouter, Depends

from vendhub.core.auth import get_current_principal
from vendhub.core.deps import get_gateway
from vendhub.core.principal import Principal
from vendhub.gateway import Gateway
from vendhub.schemas.common import DeleteResult
from vendhub.schemas.global_product import GlobalProductCreate, GlobalProductItem, GlobalProductUpdate
from vendhub.schemas.machine_category import (
    CategoryDependencies,
    MachineCategoryCreate,
    MachineCategoryItem,
    MachineCategoryUpdate,
)
from vendhub.schemas.machine_template import (
    MachineTemplateCreate,
    MachineTemplateItem,
    MachineTemplateUpdate,
)
from vendhub.schemas.product_type import ProductTypeCreate, ProductTypeItem, ProductTypeUpdate
from vendhub.services import global_products, machine_categories, machine_templates, product_types

router = APIRouter()


# --- Machine categories ---


@router.get("/machine-categories", response_model=list[MachineCategoryItem])
async def list_machine_categories(
    include_dependencies: bool = False,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """List categories by name; include_dependencies adds what blocks each delete."""
    return await machine_categories.list_categories(gw, principal, include_dependencies=include_dependencies)


@router.post("/machine-categories", response_model=MachineCategoryItem, status_code=201)
async def create_machine_category(
    body: MachineCategoryCreate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await machine_categories.create_category(gw, principal, body)


@router.get("/machine-categories/{category_id}", response_model=MachineCategoryItem)
async def get_machine_category(
    category_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await machine_categories.get_category(gw, principal, category_id)


@router.patch("/machine-categories/{category_id}", response_model=MachineCategoryItem)
async def update_machine_category(
    category_id: str,
    body: MachineCategoryUpdate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await machine_categories.update_category(gw, principal, category_id, body)


@router.get("/machine-categories/{category_id}/dependencies", response_model=CategoryDependencies)
async def get_machine_category_dependencies(
    category_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """Counts of product types, global products and templates using the category."""
    await machine_categories.get_category(gw, principal, category_id)
    return await machine_categories.check_dependencies(gw, category_id)


@router.delete("/machine-categories/{category_id}", response_model=DeleteResult)
async def delete_machine_category(
    category_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a category; 409 with counts while anything still references it."""
    return await machine_categories.delete_category(gw, principal, category_id)


# --- Product types ---


@router.get("/product-types", response_model=list[ProductTypeItem])
async def list_product_types(
    machine_category_id: Optional[str] = None,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    if machine_category_id:
        return await product_types.list_by_category(gw, principal, machine_category_id)
    return await product_types.list_product_types(gw, principal)


@router.post("/product-types", response_model=ProductTypeItem, status_code=201)
async def create_product_type(
    body: ProductTypeCreate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await product_types.create_product_type(gw, principal, body)


@router.get("/product-types/{type_id}", response_model=ProductTypeItem)
async def get_product_type(
    type_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await product_types.get_product_type(gw, principal, type_id)


@router.patch("/product-types/{type_id}", response_model=ProductTypeItem)
async def update_product_type(
    type_id: str,
    body: ProductTypeUpdate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await product_types.update_product_type(gw, principal, type_id, body)


@router.delete("/product-types/{type_id}", response_model=DeleteResult)
async def delete_product_type(
    type_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await product_types.delete_product_type(gw, principal, type_id)


# --- Global products ---


@router.get("/global-products", response_model=list[GlobalProductItem])
async def list_global_products(
    machine_category_id: Optional[str] = None,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """Global products with category and type names, by product name."""
    if machine_category_id:
        return await global_products.list_by_category(gw, principal, machine_category_id)
    return await global_products.list_global_products(gw, principal)


@router.post("/global-products", response_model=GlobalProductItem, status_code=201)
async def create_global_product(
    body: GlobalProductCreate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await global_products.create_global_product(gw, principal, body)


@router.get("/global-products/{product_id}", response_model=GlobalProductItem)
async def get_global_product(
    product_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await global_products.get_global_product(gw, principal, product_id)


@router.patch("/global-products/{product_id}", response_model=GlobalProductItem)
async def update_global_product(
    product_id: str,
    body: GlobalProductUpdate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await global_products.update_global_product(gw, principal, product_id, body)


@router.delete("/global-products/{product_id}", response_model=DeleteResult)
async def delete_global_product(
    product_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await global_products.delete_global_product(gw, principal, product_id)


# --- Machine templates ---


@router.get("/machine-templates", response_model=list[MachineTemplateItem])
async def list_machine_templates(
    machine_category_id: Optional[str] = None,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    if machine_category_id:
        return await machine_templates.list_by_category(gw, principal, machine_category_id)
    return await machine_templates.list_templates(gw, principal)


@router.post("/machine-templates", response_model=MachineTemplateItem, status_code=201)
async def create_machine_template(
    body: MachineTemplateCreate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await machine_templates.create_template(gw, principal, body)


@router.get("/machine-templates/{template_id}", response_model=MachineTemplateItem)
async def get_machine_template(
    template_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await machine_templates.get_template(gw, principal, template_id)


@router.patch("/machine-templates/{template_id}", response_model=MachineTemplateItem)
async def update_machine_template(
    template_id: str,
    body: MachineTemplateUpdate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await machine_templates.update_template(gw, principal, template_id, body)


@router.delete("/machine-templates/{template_id}", response_model=DeleteResult)
async def delete_machine_template(
    template_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await machine_templates.delete_template(gw, principal, template_id)
