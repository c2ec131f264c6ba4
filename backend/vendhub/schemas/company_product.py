from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vendhub.schemas.global_product import GlobalProductItem


class CompanyProductCreate(BaseModel):
    product_id: str
    company_id: Optional[str] = None  # defaults to the caller's company
    base_price: Optional[float] = Field(default=None, ge=0)
    active_for_customer_building: bool = False
    commission_enabled: bool = False
    commission_rate: Optional[float] = Field(default=None, ge=0, le=100)


class CompanyProductUpdate(BaseModel):
    """
    Partial update; an explicit null base_price clears the price.

    commission_rate is refused while commission is disabled, and disabling
    commission clears the stored rate.
    """

    base_price: Optional[float] = Field(default=None, ge=0)
    active_for_customer_building: Optional[bool] = None
    commission_enabled: Optional[bool] = None
    commission_rate: Optional[float] = Field(default=None, ge=0, le=100)


class ImportProductRequest(BaseModel):
    product_id: str


class CompanyProductItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    product_id: str
    company_id: str
    base_price: Optional[float] = None
    active_for_customer_building: bool = False
    commission_enabled: bool = False
    commission_rate: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    global_products: Optional[GlobalProductItem] = None
