# storefront/services/product_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFound
from storefront.domain.schemas import ProductCreate
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def product_dict(product: ProductModel) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "brand": product.brand,
        "image": product.image,
        "price": product.price,
        "sale_price": product.sale_price,
        "effective_price": product.effective_price,
        "stock": product.stock,
    }


class ProductService:
    """Minimalny dostep do katalogu - reszta CRUD katalogu zyje poza tym serwisem."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return product_dict(product)

    def create_product(self, payload: ProductCreate) -> Dict[str, Any]:
        product = self.repo.create_product(
            ProductModel(
                name=payload.name,
                brand=payload.brand,
                image=payload.image,
                price=payload.price,
                sale_price=payload.sale_price,
                stock=payload.stock,
            )
        )
        logger.info(f"Dodano produkt {product.id} ({product.name}), stan {product.stock}")
        return product_dict(product)
