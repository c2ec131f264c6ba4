import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from vendhub.core.database import Base


class MachineTemplate(Base):
    __tablename__ = "machine_templates"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    machine_category_id = Column(
        String(36), ForeignKey("machine_categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    description = Column(Text, nullable=True)
    template_data = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)  # opaque machine layout
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    machine_category = relationship("MachineCategory", back_populates="machine_templates")
