from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    brand = Column(String, nullable=True)
    image = Column(String, nullable=True)  # url glownego zdjecia

    price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=True)
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint(
            "sale_price IS NULL OR sale_price < price",
            name="ck_products_sale_below_price",
        ),
    )

    @property
    def effective_price(self) -> Decimal:
        """Cena promocyjna jesli jest ustawiona i nizsza od katalogowej, inaczej katalogowa."""
        if self.sale_price is not None and self.sale_price < self.price:
            return self.sale_price
        return self.price
