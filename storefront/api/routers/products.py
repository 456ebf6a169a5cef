# storefront/api/routers/products.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import http_error, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ProductCreate, ProductOut
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except StorefrontError as e:
        raise http_error(e)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ProductService(db).create_product(payload)
