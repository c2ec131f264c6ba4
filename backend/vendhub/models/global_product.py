import uuid

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from vendhub.core.database import Base


class GlobalProduct(Base):
    """Admin-curated product shared by all companies."""

    __tablename__ = "global_products"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    machine_category_id = Column(
        String(36), ForeignKey("machine_categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    product_type_id = Column(
        String(36), ForeignKey("product_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    brand = Column(String(255), nullable=False)
    product_name = Column(String(255), nullable=False, index=True)
    image = Column(String(1024), nullable=False)
    # Catalog placement flags, not existence: a product may exist without being globally visible
    in_global_catalog = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    in_company_catalog = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    machine_category = relationship("MachineCategory", back_populates="global_products")
    product_type = relationship("ProductType", back_populates="global_products")
    company_products = relationship("CompanyProduct", back_populates="global_product")
