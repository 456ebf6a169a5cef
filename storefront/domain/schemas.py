# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from storefront.domain.enums import UserRole


class CamelModel(BaseModel):
    """JSON po stronie klienta jest camelCase, w Pythonie snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserCreate(CamelModel):
    """Rejestracja klienta. Rola zawsze CUSTOMER, admini tylko z seeda."""

    id: int = Field(..., gt=0, description="ID uzytkownika (musi byc > 0)")
    name: str = Field(..., min_length=1, max_length=100)


class UserRead(CamelModel):
    id: int
    name: str
    role: UserRole


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1)
    brand: str | None = None
    image: str | None = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    sale_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _sale_below_price(self):
        if self.sale_price is not None and self.sale_price >= self.price:
            raise ValueError("salePrice must be lower than price")
        return self


class ProductOut(CamelModel):
    id: int
    name: str
    brand: str | None = None
    image: str | None = None
    price: Decimal
    sale_price: Decimal | None = None
    effective_price: Decimal
    stock: int


class CartItemIn(CamelModel):
    """Dodanie produktu do koszyka."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")


class CartQuantityIn(CamelModel):
    quantity: int = Field(..., gt=0)


class CartLineOut(CamelModel):
    id: int
    product_id: int
    quantity: int
    created_at: datetime
    product: ProductOut


class CartOut(CamelModel):
    items: List[CartLineOut]
    subtotal: Decimal
    item_count: int


class OrderItemIn(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class OrderCreate(CamelModel):
    """Skladanie zamowienia. Pusta lista pozycji odrzuca serwis."""

    items: List[OrderItemIn]
    shipping_address: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1, max_length=32)
    payment_method: str = Field("Cash on Delivery", min_length=1, max_length=64)
    notes: str | None = None


class OrderItemOut(CamelModel):
    id: int
    product_id: int
    name: str
    image: str | None = None
    price: Decimal
    quantity: int


class OrderUserOut(CamelModel):
    id: int
    name: str


class OrderOut(CamelModel):
    id: int
    order_number: str
    user_id: int
    user: OrderUserOut
    status: str
    shipping_address: str
    phone: str
    payment_method: str
    notes: str | None = None
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    created_at: datetime
    items: List[OrderItemOut]


class OrderStatusIn(CamelModel):
    # zwykly str, walidacja enuma w serwisie (InvalidStatus)
    status: str


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class OrderListOut(CamelModel):
    orders: List[OrderOut]
    pagination: Pagination


class MessageOut(CamelModel):
    message: str
