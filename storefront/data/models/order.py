from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.enums import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    # numer dla klienta, nie klucz - unikalnosc tylko "prawie" (timestamp + 3 cyfry)
    order_number = Column(String(32), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(16), nullable=False, default=OrderStatus.PENDING.value)
    shipping_address = Column(Text, nullable=False)
    phone = Column(String(32), nullable=False)
    payment_method = Column(String(64), nullable=False)
    notes = Column(Text, nullable=True)

    items_price = Column(Numeric(10, 2), nullable=False)
    tax_price = Column(Numeric(10, 2), nullable=False)
    shipping_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItemModel.id",
    )

    # podsumowanie klienta w odpowiedziach (id, name), ladowane w tym samym zapytaniu
    user = relationship("UserModel", lazy="joined")
