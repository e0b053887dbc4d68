import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import EntityMixin

class EcommerceProduct(Base, EntityMixin):
    __tablename__ = "ecommerce_products"
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ecommerce_categories.id"), nullable=True, index=True
    )

    category = relationship("EcommerceCategory", back_populates="products")
