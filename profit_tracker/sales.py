from datetime import date

from . import settings
from .exceptions import InvalidInput, OverStock
from .schemas import Product


def weekday_for(day: date) -> str:
    """Maps a calendar date to its weekly bucket key, e.g. date(2024, 1, 1) -> 'monday'."""
    return settings.WEEKDAYS[day.weekday()]


def _normalize_day(day: str) -> str:
    key = day.strip().lower() if isinstance(day, str) else day
    if key not in settings.WEEKDAYS:
        raise InvalidInput(
            f"unknown weekday '{day}'", {"day": day, "allowed": list(settings.WEEKDAYS)}
        )
    return key


def record_sale(product: Product, day: str, amount: int) -> Product:
    """
    Applies a sale of `amount` units on `day` and returns the updated Product.

    The sold count and the day's bucket move together in one new object; the
    input product is left untouched. A sale that would exceed the lot raises
    OverStock instead of being capped at what remains.
    """
    key = _normalize_day(day)
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidInput("sale amount must be a positive whole number", {"amount": amount})

    if product.sold + amount > product.quantity:
        raise OverStock(sold=product.sold, quantity=product.quantity, requested=amount)

    daily_sales = dict(product.daily_sales)
    daily_sales[key] += amount
    return product.model_copy(update={"sold": product.sold + amount, "daily_sales": daily_sales})
