import logging

from profit_tracker import recovery
from profit_tracker.pipeline import ReportPipeline
from profit_tracker.schemas import Product, RecoveryRecord

logger = logging.getLogger(__name__)


class RecoveryReportPipeline(ReportPipeline):
    def __init__(self, **kwargs):
        super().__init__("recovery", **kwargs)

    def transform(self, products: list[Product]) -> list[RecoveryRecord]:
        logger.info("\n--- Evaluating Investment Recovery ---")

        records = [
            RecoveryRecord(
                product_id=product.id,
                name=product.name,
                **recovery.recovery_status(product).model_dump(),
            )
            for product in products
        ]

        portfolio = recovery.portfolio_recovery_summary(products)
        self.summary = portfolio.model_dump(mode="json", by_alias=True)

        if products and not portfolio.is_fully_recovered:
            logger.info(
                f"  > {portfolio.products_not_recovered} product(s) still recovering, "
                f"{portfolio.amount_still_needed:.2f} needed overall."
            )
        return records
