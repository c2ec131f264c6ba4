import uuid

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Numeric, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from vendhub.core.database import Base


class CompanyProduct(Base):
    """A global product imported into one company's catalog, with company pricing."""

    __tablename__ = "company_products"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(
        String(36), ForeignKey("global_products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    company_id = Column(String(64), nullable=False, index=True)
    base_price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    active_for_customer_building = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    commission_enabled = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    commission_rate = Column(Numeric(5, 2, asdecimal=False), nullable=True)  # percent, only when enabled
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    global_product = relationship("GlobalProduct", back_populates="company_products")

    __table_args__ = (
        UniqueConstraint("product_id", "company_id", name="uq_company_products_product_company"),
        CheckConstraint(
            "NOT active_for_customer_building OR base_price IS NOT NULL",
            name="ck_company_products_active_requires_price",
        ),
    )
