import logging

from profit_tracker import analytics, settings
from profit_tracker.pipeline import ReportPipeline
from profit_tracker.schemas import Product, RankingRecord

logger = logging.getLogger(__name__)


class AnalyticsReportPipeline(ReportPipeline):
    def __init__(self, top_n: int = settings.TOP_N, **kwargs):
        super().__init__("analytics", **kwargs)
        self.top_n = top_n

        # Ranking name -> (ranker, metric shown in the report)
        self.RANKING_REGISTRY = {
            "top_selling": (analytics.top_selling, lambda p: p.sold),
            "highest_total_profit": (analytics.highest_total_profit, lambda p: p.total_profit),
            "best_margin": (analytics.best_margin, lambda p: p.profit_percentage),
        }

    def transform(self, products: list[Product]) -> list[RankingRecord]:
        logger.info("\n--- Ranking Products ---")

        records = []
        for ranking, (ranker, metric) in self.RANKING_REGISTRY.items():
            ranked = ranker(products, n=self.top_n)
            logger.info(f"  > {ranking}: {len(ranked)} product(s)")
            records.extend(
                RankingRecord(
                    ranking=ranking,
                    rank=position,
                    product_id=product.id,
                    name=product.name,
                    value=metric(product),
                )
                for position, product in enumerate(ranked, start=1)
            )

        totals = analytics.portfolio_totals(products)
        self.summary = {
            "totalSold": totals.total_sold,
            "totalRevenue": totals.total_revenue,
            "realizedProfit": totals.realized_profit,
            "bestSeller": totals.best_seller.name if totals.best_seller else None,
            "weekly": {
                product.id: analytics.weekly_summary(product).model_dump(by_alias=True)
                for product in products
            },
            "remainingProfit": {
                product.id: analytics.remaining_profit(product) for product in products
            },
        }
        return records
