# cartify/core/pricing.py
from typing import Any, Iterable, Mapping

from cartify.core.config import get_settings

settings = get_settings()


def gift_card_discount(code: str | None) -> int:
    """
    Percentage off for a gift card code, 0 for unknown or empty codes.

    Codes are matched exactly (case-sensitive).
    """
    if not code:
        return 0
    return settings.GIFT_CARDS.get(code, 0)


def subtotal(lines: Iterable[Mapping[str, Any]]) -> float:
    return round(sum(line["price"] * line["quantity"] for line in lines), 2)


def bill_total(
    lines: Iterable[Mapping[str, Any]],
    discount_percent: int = 0,
    shipping: float = 0.0,
) -> float:
    """subtotal + shipping - discount, rounded to cents."""
    base = subtotal(lines)
    discount = base * discount_percent / 100
    return round(base + shipping - discount, 2)
