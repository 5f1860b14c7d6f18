import math
from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from . import settings


def empty_week() -> dict[str, int]:
    """Returns a fresh set of weekly buckets, all at zero, Monday first."""
    return {day: 0 for day in settings.WEEKDAYS}


class CamelModel(BaseModel):
    """
    Base for every record that crosses the storage/report boundary.
    Python code uses snake_case names; the serialized form uses camelCase aliases.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductInput(CamelModel):
    """
    The raw fields a user enters for a new lot.
    A sale price can be given directly or as a markup over unit cost, never both.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    total_cost: float = Field(..., gt=0, allow_inf_nan=False)
    quantity: int = Field(..., gt=0)
    unit_sale_price: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    markup_pct: Optional[float] = Field(default=None, gt=-100, allow_inf_nan=False)

    @field_validator("quantity", mode="before")
    @classmethod
    def _reject_bool_quantity(cls, value):
        if isinstance(value, bool):
            raise ValueError("quantity must be a whole number of units")
        return value

    @model_validator(mode="after")
    def _one_price_source(self):
        if self.unit_sale_price is not None and self.markup_pct is not None:
            raise ValueError("give either unit_sale_price or markup_pct, not both")
        return self


class ProfitUnset(CamelModel):
    """No sale price was set, so there is no profit figure (distinct from zero profit)."""

    kind: Literal["unset"] = "unset"


class ProfitComputed(CamelModel):
    kind: Literal["computed"] = "computed"
    profit_per_unit: float
    profit_percentage: float
    # Potential profit if the whole lot sells at the sale price.
    total_profit: float


Profit = Annotated[Union[ProfitUnset, ProfitComputed], Field(discriminator="kind")]


class Product(CamelModel):
    """
    One tracked lot with its derived unit economics and sales state.
    Instances are immutable: recording a sale produces a new Product.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    total_cost: float = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    unit_cost: float = Field(..., gt=0)
    unit_sale_price: Optional[float] = Field(default=None, gt=0)
    profit: Profit = Field(default_factory=ProfitUnset)
    sold: int = Field(default=0, ge=0)
    daily_sales: dict[str, int] = Field(default_factory=empty_week)
    created_at: datetime
    owner_id: Optional[str] = None

    @field_validator("daily_sales", mode="before")
    @classmethod
    def _normalize_week(cls, value):
        if value is None:
            return empty_week()
        if not isinstance(value, Mapping):
            raise ValueError("daily sales must be a mapping of weekday to count")
        normalized = {str(day).lower(): count for day, count in value.items()}
        unknown = set(normalized) - set(settings.WEEKDAYS)
        if unknown:
            raise ValueError(f"unknown weekday keys: {sorted(unknown)}")
        return {day: normalized.get(day, 0) for day in settings.WEEKDAYS}

    @model_validator(mode="after")
    def _check_invariants(self):
        if self.sold > self.quantity:
            raise ValueError(f"sold ({self.sold}) exceeds quantity ({self.quantity})")
        if any(count < 0 for count in self.daily_sales.values()):
            raise ValueError("daily sales counts must be non-negative")
        if sum(self.daily_sales.values()) != self.sold:
            raise ValueError("daily sales must add up to the sold count")
        if not math.isclose(self.unit_cost, self.total_cost / self.quantity):
            raise ValueError("unit_cost must equal total_cost / quantity")
        if self.unit_sale_price is None and isinstance(self.profit, ProfitComputed):
            raise ValueError("profit cannot be computed without a sale price")
        return self

    @computed_field
    @property
    def remaining(self) -> int:
        return self.quantity - self.sold

    @property
    def effective_sale_price(self) -> float:
        """Sale price if one was set, otherwise unit cost (breakeven)."""
        if self.unit_sale_price is None:
            return self.unit_cost
        return self.unit_sale_price

    @property
    def profit_per_unit(self) -> Optional[float]:
        return self.profit.profit_per_unit if isinstance(self.profit, ProfitComputed) else None

    @property
    def profit_percentage(self) -> Optional[float]:
        return self.profit.profit_percentage if isinstance(self.profit, ProfitComputed) else None

    @property
    def total_profit(self) -> Optional[float]:
        return self.profit.total_profit if isinstance(self.profit, ProfitComputed) else None


class RecoveryStatus(CamelModel):
    is_recovered: bool
    percentage_recovered: float
    amount_needed: float
    total_revenue: float
    total_cost: float


class PortfolioRecovery(CamelModel):
    total_invested: float = 0.0
    total_recovered: float = 0.0
    products_recovered: int = 0
    products_not_recovered: int = 0
    overall_recovery_percentage: float = 0.0
    is_fully_recovered: bool = False
    amount_still_needed: float = 0.0


class WeeklySummary(CamelModel):
    per_day: dict[str, int]
    total_weekly: int
    best_day: str
    max_day: int


class PortfolioTotals(CamelModel):
    total_sold: int = 0
    total_revenue: float = 0.0
    realized_profit: float = 0.0
    best_seller: Optional[Product] = None


class RecoveryRecord(RecoveryStatus):
    """Defines one row of the recovery report."""

    product_id: str
    name: str


class RankingRecord(CamelModel):
    """Defines one row of the rankings report, in long format (one row per ranking slot)."""

    ranking: str
    rank: int = Field(..., ge=1)
    product_id: str
    name: str
    value: float
