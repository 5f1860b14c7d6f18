"""
Investment recovery: how much of a lot's purchase cost has come back as revenue.
"""

from typing import Iterable

from .schemas import PortfolioRecovery, Product, RecoveryStatus


def realized_revenue(product: Product) -> float:
    """Revenue from units sold so far, at the sale price or at unit cost when unset."""
    return product.effective_sale_price * product.sold


def recovery_status(product: Product) -> RecoveryStatus:
    total_revenue = realized_revenue(product)
    total_cost = product.total_cost
    return RecoveryStatus(
        is_recovered=total_revenue >= total_cost,
        percentage_recovered=total_revenue / total_cost * 100,
        amount_needed=max(0.0, total_cost - total_revenue),
        total_revenue=total_revenue,
        total_cost=total_cost,
    )


def portfolio_recovery_summary(products: Iterable[Product]) -> PortfolioRecovery:
    """
    Folds recovery_status over every product. An empty portfolio gives a zeroed
    summary with is_fully_recovered=False.
    """
    total_invested = 0.0
    total_recovered = 0.0
    recovered = 0
    not_recovered = 0

    for product in products:
        status = recovery_status(product)
        total_invested += status.total_cost
        total_recovered += status.total_revenue
        if status.is_recovered:
            recovered += 1
        else:
            not_recovered += 1

    if total_invested == 0:
        return PortfolioRecovery()

    return PortfolioRecovery(
        total_invested=total_invested,
        total_recovered=total_recovered,
        products_recovered=recovered,
        products_not_recovered=not_recovered,
        overall_recovery_percentage=total_recovered / total_invested * 100,
        is_fully_recovered=total_recovered >= total_invested,
        amount_still_needed=max(0.0, total_invested - total_recovered),
    )
