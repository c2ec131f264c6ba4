from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from vendhub.schemas.machine_category import CategorySummary
from vendhub.schemas.product_type import ProductTypeSummary


class GlobalProductCreate(BaseModel):
    machine_category_id: str
    product_type_id: str
    brand: str
    product_name: str
    image: Optional[str] = None  # placeholder URL when omitted
    in_global_catalog: bool = True
    in_company_catalog: bool = False


class GlobalProductUpdate(BaseModel):
    machine_category_id: Optional[str] = None
    product_type_id: Optional[str] = None
    brand: Optional[str] = None
    product_name: Optional[str] = None
    image: Optional[str] = None
    in_global_catalog: Optional[bool] = None
    in_company_catalog: Optional[bool] = None


class GlobalProductItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    machine_category_id: str
    product_type_id: str
    brand: str
    product_name: str
    image: str
    in_global_catalog: bool = True
    in_company_catalog: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # embedded display data, keyed by table like the backend returns it
    machine_categories: Optional[CategorySummary] = None
    product_types: Optional[ProductTypeSummary] = None


class CatalogFilters(BaseModel):
    machine_category_id: Optional[str] = None
    product_type_id: Optional[str] = None
    search: Optional[str] = None


class CatalogGroup(BaseModel):
    """Global products of one machine category, as offered for import."""

    machine_category_id: str
    category_name: str
    icon: Optional[str] = None
    products: list[GlobalProductItem] = []
