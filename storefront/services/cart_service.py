# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.cart_line import CartLineModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import InsufficientStock, InvalidRequest, NotFound
from storefront.domain.pricing import round_money
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.lock_service import LockService
from storefront.services.product_service import product_dict
from storefront.services.transaction import atomic
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _line_dict(line: CartLineModel) -> Dict[str, Any]:
    return {
        "id": line.id,
        "product_id": line.product_id,
        "quantity": line.quantity,
        "created_at": line.created_at,
        "product": product_dict(line.product),
    }


class CartService:
    """
    Koszyk uzytkownika: produkt -> ilosc.
    commands (add, set, remove, clear) modyfikuja stan, query (get) tylko odczyt.

    Sprawdzenie stanu magazynu tutaj jest tylko informacyjne, nic nie rezerwuje.
    Rezerwacja (zdjecie ze stanu) dzieje sie dopiero przy skladaniu zamowienia.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        catalog: ProductRepo | None = None,
    ):
        self.db = db
        self.repo = CartRepo(db)
        self.catalog = catalog or ProductRepo(db)
        self.lock_service = lock_service

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        lines = self.repo.get_lines(user_id)

        subtotal = sum(
            (line.product.effective_price * line.quantity for line in lines),
            Decimal("0.00"),
        )

        return {
            "items": [_line_dict(line) for line in lines],
            "subtotal": round_money(subtotal),
            "item_count": sum(line.quantity for line in lines),
        }

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Tuple[Dict[str, Any], bool]:
        """Dodaje produkt albo zwieksza ilosc. Zwraca (linia, czy_utworzona)."""
        self._check_quantity(quantity)

        with self.lock_service.cart_line(user_id, product_id):
            with atomic(self.db, "add to cart"):
                product = self._get_product(product_id)
                existing = self.repo.get_line(user_id, product_id)
                current = existing.quantity if existing else 0

                if current + quantity > product.stock:
                    logger.warning(
                        f"Odrzucono dodanie {quantity} x produkt {product_id} dla uzytkownika {user_id}: "
                        f"w koszyku {current}, na stanie {product.stock}"
                    )
                    raise InsufficientStock(product.id, product.name)

                if existing:
                    logger.info(
                        f"Produkt {product_id} juz jest w koszyku, zwiekszam ilosc "
                        f"z {current} do {current + quantity}"
                    )
                    existing.quantity = current + quantity
                    line = existing
                else:
                    logger.info(f"Dodaje nowy produkt {product_id} do koszyka uzytkownika {user_id}")
                    line = self.repo.add_line(
                        CartLineModel(
                            user_id=user_id,
                            product_id=product_id,
                            quantity=quantity,
                            product=product,
                        )
                    )

        return _line_dict(line), existing is None

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        self._check_quantity(quantity)

        with self.lock_service.cart_line(user_id, product_id):
            with atomic(self.db, "update cart quantity"):
                line = self.repo.get_line(user_id, product_id)
                if not line:
                    raise NotFound("Cart item not found")

                product = self._get_product(product_id)
                if quantity > product.stock:
                    logger.warning(
                        f"Odrzucono ilosc {quantity} produktu {product_id} dla uzytkownika {user_id}, "
                        f"na stanie {product.stock}"
                    )
                    raise InsufficientStock(product.id, product.name)

                line.quantity = quantity

        logger.info(f"Ustawiono ilosc produktu {product_id} na {quantity} dla uzytkownika {user_id}")
        return _line_dict(line)

    def remove_item(self, user_id: int, product_id: int) -> None:
        with self.lock_service.cart_line(user_id, product_id):
            with atomic(self.db, "remove from cart"):
                line = self.repo.get_line(user_id, product_id)
                if not line:
                    raise NotFound("Cart item not found")
                self.repo.delete_line(line)

        logger.info(f"Produkt {product_id} usuniety z koszyka uzytkownika {user_id}")

    def clear_cart(self, user_id: int) -> int:
        with atomic(self.db, "clear cart"):
            removed = self.repo.clear(user_id)

        logger.info(f"Wyczyszczono koszyk uzytkownika {user_id} ({removed} pozycji)")
        return removed

    def _get_product(self, product_id: int) -> ProductModel:
        product = self.catalog.get_product(product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return product

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity is None or quantity < 1:
            raise InvalidRequest("Quantity must be at least 1")
