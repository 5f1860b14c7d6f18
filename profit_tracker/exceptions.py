"""
Error taxonomy for the profit tracker.

The calculation modules only classify which rule was broken; turning that into
user-facing text is left to whoever catches the error.
"""

from typing import Any, Optional


class ProfitTrackerError(Exception):
    """Base class for all profit tracker errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidInput(ProfitTrackerError, ValueError):
    """A cost, quantity, price, weekday or sale amount is missing or out of range."""


class OverStock(ProfitTrackerError):
    """A sale would push the sold count past the lot quantity."""

    def __init__(self, sold: int, quantity: int, requested: int):
        super().__init__(
            f"Cannot sell {requested} unit(s): only {quantity - sold} of {quantity} remaining",
            {
                "sold": sold,
                "quantity": quantity,
                "requested": requested,
                "remaining": quantity - sold,
            },
        )


class ProductNotFound(ProfitTrackerError, KeyError):
    """No product with the given id exists for the owner."""

    def __init__(self, product_id: str, owner_id: Optional[str] = None):
        super().__init__(
            f"Product '{product_id}' not found",
            {"product_id": product_id, "owner_id": owner_id},
        )

    def __str__(self) -> str:
        return self.message
