# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_notification_service, get_requester, http_error, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderCreate, OrderListOut, OrderOut, OrderStatusIn
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, notification_service: NotificationService):
    return OrderService(db, notification_service=notification_service)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Sklada zamowienie z podanych pozycji i czysci koszyk.
    """
    svc = get_service(db, notification_service)
    try:
        return svc.place_order(
            user_id=requester.id,
            items=[{"product_id": i.product_id, "quantity": i.quantity} for i in payload.items],
            shipping_address=payload.shipping_address,
            phone=payload.phone,
            payment_method=payload.payment_method,
            notes=payload.notes,
        )
    except StorefrontError as e:
        raise http_error(e)


@router.get("", response_model=OrderListOut)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: str | None = Query(None),
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
):
    svc = get_service(db, notification_service)
    try:
        return svc.list_orders(page=page, limit=limit, status=status)
    except StorefrontError as e:
        raise http_error(e)


@router.get("/my-orders", response_model=List[OrderOut])
def my_orders(
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
):
    svc = get_service(db, notification_service)
    return svc.list_user_orders(requester.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    requester: UserModel = Depends(get_requester),
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Szczegoly zamowienia - dla wlasciciela albo admina.
    """
    svc = get_service(db, notification_service)
    try:
        return svc.get_order(order_id, requester)
    except StorefrontError as e:
        raise http_error(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
):
    svc = get_service(db, notification_service)
    try:
        return svc.set_status(order_id, payload.status)
    except StorefrontError as e:
        raise http_error(e)
