from typing import Optional

from fastapi import APIRouter, Depends

from vendhub.core.auth import get_current_principal
from vendhub.core.deps import get_gateway
from vendhub.core.principal import Principal
from vendhub.gateway import Gateway
from vendhub.schemas.common import DeleteResult
from vendhub.schemas.company_product import (
    CompanyProductCreate,
    CompanyProductItem,
    CompanyProductUpdate,
)
from vendhub.services import company_products

router = APIRouter()


@router.get("/products", response_model=list[CompanyProductItem])
async def list_company_products(
    company_id: Optional[str] = None,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """Company catalog, newest first. Admins may pass company_id to view any company."""
    company = company_products.resolve_company(principal, company_id)
    return await company_products.list_by_company(gw, principal, company)


@router.post("/products", response_model=CompanyProductItem, status_code=201)
async def create_company_product(
    body: CompanyProductCreate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await company_products.create_company_product(gw, principal, body)


@router.get("/products/{company_product_id}", response_model=CompanyProductItem)
async def get_company_product(
    company_product_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await company_products.get_company_product(gw, principal, company_product_id)


@router.patch("/products/{company_product_id}", response_model=CompanyProductItem)
async def update_company_product(
    company_product_id: str,
    body: CompanyProductUpdate,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """Update pricing, commission or activation. Activation needs a base price (409 otherwise)."""
    return await company_products.update_company_product(gw, principal, company_product_id, body)


@router.post("/products/{company_product_id}/toggle-active", response_model=CompanyProductItem)
async def toggle_company_product_active(
    company_product_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await company_products.toggle_active(gw, principal, company_product_id)


@router.delete("/products/{company_product_id}", response_model=DeleteResult)
async def delete_company_product(
    company_product_id: str,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    return await company_products.delete_company_product(gw, principal, company_product_id)
