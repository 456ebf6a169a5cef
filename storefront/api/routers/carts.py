# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_lock_service, get_requester, http_error
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CartItemIn, CartLineOut, CartOut, CartQuantityIn, MessageOut
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session, lock_service: LockService):
    return CartService(db=db, lock_service=lock_service)


@router.get("", response_model=CartOut)
def get_cart(
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    return svc.get_cart(requester.id)


@router.post("", response_model=CartLineOut, status_code=201)
def add_item(
    payload: CartItemIn,
    response: Response,
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        line, created = svc.add_item(requester.id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise http_error(e)

    # 201 nowa linia, 200 zwiekszona ilosc istniejacej
    if not created:
        response.status_code = 200
    return line


@router.put("/{product_id}", response_model=CartLineOut)
def update_item(
    product_id: int,
    payload: CartQuantityIn,
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        return svc.set_quantity(requester.id, product_id, payload.quantity)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/{product_id}", response_model=MessageOut)
def remove_item(
    product_id: int,
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        svc.remove_item(requester.id, product_id)
    except StorefrontError as e:
        raise http_error(e)
    return {"message": "Item removed from cart"}


@router.delete("", response_model=MessageOut)
def clear_cart(
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        svc.clear_cart(requester.id)
    except StorefrontError as e:
        raise http_error(e)
    return {"message": "Cart cleared"}
