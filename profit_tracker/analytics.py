"""
Read-side analytics over a snapshot of products: rankings, weekly summaries and
portfolio totals. Everything is recomputed on each call; nothing is cached.

Rankings keep the input order for products with equal scores.
"""

from typing import Iterable

import pandas as pd

from . import settings
from .recovery import realized_revenue
from .schemas import PortfolioTotals, Product, WeeklySummary


def _to_frame(products: list[Product]) -> pd.DataFrame:
    """One row per product, positional index matching the input list."""
    df = pd.DataFrame(
        {
            "sold": [p.sold for p in products],
            "quantity": [p.quantity for p in products],
            "profit_per_unit": [p.profit_per_unit for p in products],
            "profit_percentage": [p.profit_percentage for p in products],
            "revenue": [realized_revenue(p) for p in products],
        }
    )
    # Unset profit becomes NaN, which never passes a "> 0" filter.
    for col in ["sold", "quantity"]:
        df[col] = df[col].astype("int64")
    for col in ["profit_per_unit", "profit_percentage", "revenue"]:
        df[col] = df[col].astype("float64")
    df["potential_profit"] = df["profit_per_unit"] * df["quantity"]
    df["realized_profit"] = (df["profit_per_unit"] * df["sold"]).fillna(0.0)
    return df


def _rank(products: Iterable[Product], column: str, n: int, filter_column: str | None = None) -> list[Product]:
    products = list(products)
    if not products or n <= 0:
        return []

    df = _to_frame(products)
    eligible = df[df[filter_column or column] > 0]
    # "stable" keeps ties in input order, also for descending sorts.
    ordered = eligible.sort_values(column, ascending=False, kind="stable").head(n)
    return [products[i] for i in ordered.index]


def top_selling(products: Iterable[Product], n: int = settings.TOP_N) -> list[Product]:
    """Products with at least one unit sold, most units first."""
    return _rank(products, "sold", n)


def highest_total_profit(products: Iterable[Product], n: int = settings.TOP_N) -> list[Product]:
    """Profitable products ranked by potential profit across the whole lot."""
    return _rank(products, "potential_profit", n, filter_column="profit_per_unit")


def best_margin(products: Iterable[Product], n: int = settings.TOP_N) -> list[Product]:
    """Profitable products ranked by profit percentage over unit cost."""
    return _rank(products, "profit_percentage", n)


def weekly_summary(product: Product) -> WeeklySummary:
    per_day = {day: product.daily_sales.get(day, 0) for day in settings.WEEKDAYS}
    # max() keeps the first key on ties, so an empty week resolves to Monday.
    best_day = max(settings.WEEKDAYS, key=lambda day: per_day[day])
    return WeeklySummary(
        per_day=per_day,
        total_weekly=sum(per_day.values()),
        best_day=best_day,
        max_day=per_day[best_day],
    )


def remaining_profit(product: Product) -> float:
    """Profit still to be made on unsold stock; 0 when no sale price is set."""
    if product.profit_per_unit is None:
        return 0.0
    return product.profit_per_unit * product.remaining


def realized_profit(product: Product) -> float:
    """Profit already made on the units sold; 0 when no sale price is set."""
    if product.profit_per_unit is None:
        return 0.0
    return product.profit_per_unit * product.sold


def portfolio_totals(products: Iterable[Product]) -> PortfolioTotals:
    """Units sold, realized revenue and profit across all products, plus the best seller."""
    products = list(products)
    if not products:
        return PortfolioTotals()

    df = _to_frame(products)
    best = top_selling(products, n=1)
    return PortfolioTotals(
        total_sold=int(df["sold"].sum()),
        total_revenue=float(df["revenue"].sum()),
        realized_profit=float(df["realized_profit"].sum()),
        best_seller=best[0] if best else None,
    )
