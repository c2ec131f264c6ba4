from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProductTypeCreate(BaseModel):
    name: str
    machine_category_id: str


class ProductTypeUpdate(BaseModel):
    name: Optional[str] = None
    machine_category_id: Optional[str] = None


class ProductTypeItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    machine_category_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductTypeSummary(BaseModel):
    name: str
