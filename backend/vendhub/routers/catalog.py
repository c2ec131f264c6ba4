from typing import Optional

from fastapi import APIRouter, Depends

from vendhub.core.auth import get_current_principal
from vendhub.core.deps import get_gateway
from vendhub.core.principal import Principal
from vendhub.gateway import Gateway
from vendhub.schemas.company_product import CompanyProductItem, ImportProductRequest
from vendhub.schemas.global_product import CatalogFilters, CatalogGroup
from vendhub.services import company_products, global_products

router = APIRouter()


@router.get("/import-products", response_model=list[CatalogGroup])
async def browse_import_products(
    machine_category_id: Optional[str] = None,
    product_type_id: Optional[str] = None,
    search: Optional[str] = None,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """Global catalog grouped by machine category, filtered for the import page."""
    filters = CatalogFilters(
        machine_category_id=machine_category_id,
        product_type_id=product_type_id,
        search=search,
    )
    return await global_products.browse_catalog(gw, principal, filters)


@router.post("/import-products", response_model=CompanyProductItem, status_code=201)
async def import_product(
    body: ImportProductRequest,
    company_id: Optional[str] = None,
    gw: Gateway = Depends(get_gateway),
    principal: Principal = Depends(get_current_principal),
):
    """
    Add a global product to the caller's company catalog.
    Returns 409 when the product is already there.
    """
    company = company_products.resolve_company(principal, company_id)
    return await company_products.import_from_global(gw, principal, body.product_id, company)
