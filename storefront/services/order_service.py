# storefront/services/order_service.py
import math
import random
import time
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain.enums import OrderStatus
from storefront.domain.errors import Forbidden, InsufficientStock, InvalidRequest, InvalidStatus, NotFound
from storefront.domain.pricing import compute_totals
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.notification_service import NotificationService
from storefront.services.transaction import atomic
from storefront.utils.settings import STRICT_ORDER_STATUS_TRANSITIONS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# uzywane tylko w trybie STRICT_ORDER_STATUS_TRANSITIONS, domyslnie kazdy status -> kazdy
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def generate_order_number() -> str:
    # ORD-<epoch ms>-<3 cyfry>; unikalnosc nie jest gwarantowana
    timestamp = int(time.time() * 1000)
    return f"ORD-{timestamp}-{random.randint(0, 999):03d}"


def order_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "user_id": order.user_id,
        "status": order.status,
        "shipping_address": order.shipping_address,
        "phone": order.phone,
        "payment_method": order.payment_method,
        "notes": order.notes,
        "items_price": order.items_price,
        "tax_price": order.tax_price,
        "shipping_price": order.shipping_price,
        "total_price": order.total_price,
        "created_at": order.created_at,
        "user": {"id": order.user.id, "name": order.user.name},
        "items": [
            {
                "id": item.id,
                "product_id": item.product_id,
                "name": item.name,
                "image": item.image,
                "price": item.price,
                "quantity": item.quantity,
            }
            for item in order.items
        ],
    }


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.

    Skladanie zamowienia to jedna transakcja: walidacja stanow, zapis zamowienia
    z pozycjami, atomowe zdjecie ze stanu i czyszczenie koszyka. Wszystko albo nic.
    """

    def __init__(
        self,
        db: Session,
        catalog: ProductRepo | None = None,
        notification_service: NotificationService | None = None,
        strict_transitions: bool = STRICT_ORDER_STATUS_TRANSITIONS,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.users = UserRepo(db)
        self.catalog = catalog or ProductRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.strict_transitions = strict_transitions

    def place_order(
        self,
        user_id: int,
        items: Iterable[Dict[str, int]],
        shipping_address: str,
        phone: str,
        payment_method: str,
        notes: str | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: zlozenie zamowienia.

        1. Waliduje wszystkie pozycje na swiezych danych produktu (zanim cokolwiek zapisze)
        2. Robi snapshot ceny/nazwy/zdjecia i liczy sumy
        3. Zapisuje zamowienie, zdejmuje ze stanu, czysci koszyk - jedna transakcja
        4. Po commicie kolejkuje powiadomienie
        """
        items = list(items)
        if not items:
            raise InvalidRequest("No order items")

        for item in items:
            if item.get("quantity") is None or item["quantity"] < 1:
                raise InvalidRequest(f"Invalid quantity for product {item.get('product_id')}")

        if not shipping_address or not shipping_address.strip():
            raise InvalidRequest("Shipping address is required")

        # laczna ilosc na produkt, ten sam produkt moze byc w kilku pozycjach
        demand: Dict[int, int] = {}
        for item in items:
            demand[item["product_id"]] = demand.get(item["product_id"], 0) + item["quantity"]

        with atomic(self.db, "order placement"):
            owner = self.users.get_user(user_id)
            if not owner:
                raise NotFound("User not found")

            products = {}
            for product_id, quantity in demand.items():
                product = self.catalog.get_product(product_id)
                if not product:
                    raise NotFound(f"Product {product_id} not found")
                if product.stock < quantity:
                    logger.warning(
                        f"Zamowienie uzytkownika {user_id} odrzucone: produkt {product_id} "
                        f"na stanie {product.stock}, zamowiono {quantity}"
                    )
                    raise InsufficientStock(product.id, product.name)
                products[product_id] = product

            # snapshot z chwili walidacji
            order_items: List[OrderItemModel] = []
            for item in items:
                product = products[item["product_id"]]
                order_items.append(
                    OrderItemModel(
                        product_id=product.id,
                        name=product.name,
                        image=product.image,
                        price=product.effective_price,
                        quantity=item["quantity"],
                    )
                )

            totals = compute_totals((oi.price, oi.quantity) for oi in order_items)

            order = self.repo.add_order(
                OrderModel(
                    order_number=generate_order_number(),
                    user_id=user_id,
                    user=owner,
                    status=OrderStatus.PENDING.value,
                    shipping_address=shipping_address,
                    phone=phone,
                    payment_method=payment_method,
                    notes=notes,
                    items_price=totals.items_price,
                    tax_price=totals.tax_price,
                    shipping_price=totals.shipping_price,
                    total_price=totals.total_price,
                    items=order_items,
                )
            )

            # zawsze ta sama kolejnosc (rosnace id) - brak zakleszczen miedzy transakcjami
            for product_id in sorted(demand):
                if not self.catalog.decrement_stock(product_id, demand[product_id]):
                    # ktos inny wykupil towar miedzy walidacja a zapisem
                    product = products[product_id]
                    logger.warning(f"Warunkowe zdjecie ze stanu produktu {product_id} nie powiodlo sie")
                    raise InsufficientStock(product.id, product.name)

            # caly koszyk, nawet jesli zamowienie obejmowalo tylko czesc
            self.carts.clear(user_id)

        logger.info(
            f"Zamowienie {order.order_number} (id {order.id}) zlozone przez uzytkownika {user_id}, "
            f"total {order.total_price}"
        )

        self.notification_service.send_order_placed(user_id, order.id, order.order_number)

        return order_dict(order)

    def get_order(self, order_id: int, requester: UserModel) -> Dict[str, Any]:
        """
        Use Case: pobranie zamowienia (Query). Wlasciciel albo admin.
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Order not found")

        if order.user_id != requester.id and not requester.is_admin:
            raise Forbidden("Not authorized to view this order")

        return order_dict(order)

    def list_user_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [order_dict(o) for o in self.repo.list_user_orders(user_id)]

    def list_orders(self, page: int = 1, limit: int = 20, status: str | None = None) -> Dict[str, Any]:
        if page < 1 or limit < 1:
            raise InvalidRequest("page and limit must be positive")

        if status is not None:
            status = self._parse_status(status, InvalidRequest).value

        orders = self.repo.list_orders(offset=(page - 1) * limit, limit=limit, status=status)
        total = self.repo.count_orders(status=status)

        return {
            "orders": [order_dict(o) for o in orders],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        }

    def set_status(self, order_id: int, new_status: str) -> Dict[str, Any]:
        status = self._parse_status(new_status, InvalidStatus)

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")

        current = OrderStatus(order.status)
        if self.strict_transitions and status != current and status not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStatus(f"Cannot change status from {current.value} to {status.value}")

        with atomic(self.db, "order status update"):
            order.status = status.value

        logger.info(f"Zamowienie {order_id}: status {current.value} -> {status.value}")
        self.notification_service.send_status_changed(order.user_id, order.id, order.status)

        return order_dict(order)

    @staticmethod
    def _parse_status(value: str, error: type) -> OrderStatus:
        try:
            return OrderStatus(value)
        except ValueError:
            raise error(f"Invalid status: {value}") from None
