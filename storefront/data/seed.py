# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db, make_session_factory
from storefront.data.models import ProductModel, UserModel
from storefront.domain.enums import UserRole
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"name": "iPhone 15 Pro", "brand": "Apple", "price": Decimal("999.00"), "sale_price": Decimal("949.00"), "stock": 25},
    {"name": "Galaxy S24", "brand": "Samsung", "price": Decimal("799.00"), "sale_price": None, "stock": 40},
    {"name": "MacBook Air M3", "brand": "Apple", "price": Decimal("1299.00"), "sale_price": None, "stock": 10},
    {"name": "USB-C Cable", "brand": "Anker", "price": Decimal("19.99"), "sale_price": Decimal("14.99"), "stock": 200},
]


def seed(bind=None):
    init_db(bind)
    db = make_session_factory(bind)() if bind is not None else SessionLocal()
    try:
        # tylko pusta baza
        if db.query(ProductModel).first():
            logger.info("Baza juz zawiera produkty, pomijam seed")
            return

        db.add(UserModel(id=1, name="Admin User", role=UserRole.ADMIN.value))
        db.add(UserModel(id=2, name="John Doe", role=UserRole.CUSTOMER.value))
        for data in PRODUCTS:
            db.add(ProductModel(**data))
        db.commit()
        logger.info(f"Seed: 2 uzytkownikow, {len(PRODUCTS)} produktow")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
