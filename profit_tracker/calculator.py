"""
Unit economics for a purchased lot.

Turns the raw entry fields (total cost, quantity, optional sale price or markup)
into a fully derived Product. No rounding happens here; values are kept at full
precision and only formatted for display by the caller.
"""

import math
import uuid
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from .exceptions import InvalidInput
from .schemas import Product, ProductInput, ProfitComputed, ProfitUnset, empty_week


def _is_positive_number(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def derive_unit_cost(total_cost: float, quantity: int) -> float:
    """Returns total_cost / quantity, or raises InvalidInput for a non-positive cost or quantity."""
    if not _is_positive_number(total_cost):
        raise InvalidInput("total cost must be a positive number", {"total_cost": total_cost})
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidInput("quantity must be a positive whole number", {"quantity": quantity})
    unit_cost = total_cost / quantity
    # A tiny cost over many units can underflow to 0.0.
    if not _is_positive_number(unit_cost):
        raise InvalidInput(
            "total cost is too small to split across the quantity",
            {"total_cost": total_cost, "quantity": quantity},
        )
    return unit_cost


def derive_profit(
    unit_cost: float, unit_sale_price: Optional[float], quantity: int
) -> Union[ProfitUnset, ProfitComputed]:
    """
    Computes per-unit profit, margin and potential lot profit.

    A missing sale price yields ProfitUnset rather than zero, so "no price yet" and
    "selling at cost" stay distinguishable.
    """
    if unit_sale_price is None:
        return ProfitUnset()
    if not _is_positive_number(unit_sale_price):
        raise InvalidInput(
            "unit sale price must be a positive number", {"unit_sale_price": unit_sale_price}
        )

    profit_per_unit = unit_sale_price - unit_cost
    return ProfitComputed(
        profit_per_unit=profit_per_unit,
        profit_percentage=profit_per_unit / unit_cost * 100,
        total_profit=profit_per_unit * quantity,
    )


def sale_price_from_markup(unit_cost: float, markup_pct: float) -> float:
    """Sale price that puts markup_pct on top of unit cost, e.g. 20 -> unit_cost * 1.2."""
    if isinstance(markup_pct, bool) or not isinstance(markup_pct, Real) or not math.isfinite(markup_pct):
        raise InvalidInput("markup must be a number", {"markup_pct": markup_pct})
    if markup_pct <= -100:
        raise InvalidInput("markup must be greater than -100%", {"markup_pct": markup_pct})
    return unit_cost * (1 + markup_pct / 100)


def _parse_input(data: Union[ProductInput, Mapping[str, Any]]) -> ProductInput:
    if isinstance(data, ProductInput):
        return data
    try:
        return ProductInput.model_validate(dict(data))
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "error": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidInput("invalid product input", {"errors": errors}) from e


def create_product(
    data: Union[ProductInput, Mapping[str, Any]],
    *,
    product_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
    owner_id: Optional[str] = None,
) -> Product:
    """
    Builds a new Product from entry fields: sold=0, empty weekly buckets, derived unit
    cost and profit. The caller may supply the durable id and creation time; otherwise
    a random id and the current UTC time are used.
    """
    entry = _parse_input(data)

    unit_cost = derive_unit_cost(entry.total_cost, entry.quantity)

    unit_sale_price = entry.unit_sale_price
    if unit_sale_price is None and entry.markup_pct is not None:
        unit_sale_price = sale_price_from_markup(unit_cost, entry.markup_pct)

    return Product(
        id=product_id or uuid.uuid4().hex,
        name=entry.name,
        total_cost=entry.total_cost,
        quantity=entry.quantity,
        unit_cost=unit_cost,
        unit_sale_price=unit_sale_price,
        profit=derive_profit(unit_cost, unit_sale_price, entry.quantity),
        sold=0,
        daily_sales=empty_week(),
        created_at=created_at or datetime.now(timezone.utc),
        owner_id=owner_id,
    )
