from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from vendhub.schemas.machine_category import CategorySummary


class MachineTemplateCreate(BaseModel):
    name: str
    machine_category_id: str
    description: Optional[str] = None
    template_data: Any


class MachineTemplateUpdate(BaseModel):
    name: Optional[str] = None
    machine_category_id: Optional[str] = None
    description: Optional[str] = None
    template_data: Optional[Any] = None


class MachineTemplateItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    machine_category_id: str
    description: Optional[str] = None
    template_data: Any = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    machine_categories: Optional[CategorySummary] = None
