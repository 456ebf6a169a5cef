from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartLineModel(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    product = relationship("ProductModel", lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="u_cart_user_product"),
        CheckConstraint("quantity > 0", name="ck_cart_lines_quantity_positive"),
    )
