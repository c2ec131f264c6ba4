import uuid

from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from vendhub.core.database import Base


class MachineCategory(Base):
    """Kind of vending machine (Snack, Drink, ...). Parent of types, products and templates."""

    __tablename__ = "machine_categories"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # relationships
    product_types = relationship("ProductType", back_populates="machine_category")
    global_products = relationship("GlobalProduct", back_populates="machine_category")
    machine_templates = relationship("MachineTemplate", back_populates="machine_category")
