from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MachineCategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None


class MachineCategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class CategoryDependencies(BaseModel):
    has_product_types: bool = False
    has_global_products: bool = False
    has_machine_templates: bool = False
    product_types_count: int = 0
    global_products_count: int = 0
    machine_templates_count: int = 0

    @property
    def blocking(self) -> bool:
        return self.has_product_types or self.has_global_products or self.has_machine_templates


class MachineCategoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # only filled when the list is requested with dependency info
    dependencies: Optional[CategoryDependencies] = None


class CategorySummary(BaseModel):
    name: str
    icon: Optional[str] = None
