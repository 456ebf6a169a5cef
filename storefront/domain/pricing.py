# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Tuple

TAX_RATE = Decimal("0.10")
FREE_SHIPPING_THRESHOLD = Decimal("100")  # darmowa wysylka dopiero POWYZEJ tej kwoty
FLAT_SHIPPING = Decimal("10")

_CENT = Decimal("0.01")


class Totals(NamedTuple):
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def compute_totals(lines: Iterable[Tuple[Decimal, int]]) -> Totals:
    """Liczy sumy zamowienia z par (cena jednostkowa, ilosc).

    Posrednie wartosci sa dokladne, zaokraglamy raz na koncu do 2 miejsc.
    """
    items = sum((Decimal(str(price)) * quantity for price, quantity in lines), Decimal("0"))
    tax = items * TAX_RATE
    shipping = Decimal("0") if items > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
    total = items + tax + shipping

    return Totals(
        items_price=round_money(items),
        tax_price=round_money(tax),
        shipping_price=round_money(shipping),
        total_price=round_money(total),
    )
