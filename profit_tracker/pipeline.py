import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel

from . import settings, data_handler
from .data_handler import ProductStore
from .schemas import Product

logger = logging.getLogger(__name__)


class ReportPipeline(ABC):
    """
    Abstract base class for report pipelines (recovery, analytics).
    Follows an Extract -> Transform -> Load pattern over one owner's products.
    """

    def __init__(
        self,
        report_type: str,
        store: Optional[ProductStore] = None,
        owner_id: str = settings.DEFAULT_OWNER_ID,
        test_mode: bool = False,
    ):
        self.report_type = report_type
        self.store = store or ProductStore()
        self.owner_id = owner_id
        self.test_mode = test_mode
        # Summary figures sent alongside the rows
        self.summary: dict[str, Any] = {}

    def run(self) -> list[BaseModel]:
        """
        Orchestrates the pipeline execution and returns the report rows.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        products = self.extract()
        if not products:
            logger.warning(f"⚠️ No products found for {self.report_type}. Sending empty report.")

        # --- 2. TRANSFORM ---
        records = self.transform(products)

        # --- 3. LOAD ---
        self.load(records)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return records

    def extract(self) -> list[Product]:
        """
        Reads the owner's current products. The list is treated as a fixed snapshot
        for the rest of the run.
        """
        products = self.store.list_products(self.owner_id)
        logger.info(f"  > Loaded {len(products)} product(s) for owner '{self.owner_id}'.")
        return products

    @abstractmethod
    def transform(self, products: list[Product]) -> list[BaseModel]:
        """
        Computes the report rows and fills self.summary.
        """

    def load(self, records: list[BaseModel]):
        """
        Saves rows to disk and posts them to the webhook.
        """
        if self.summary:
            logger.info("\n--- Summary ---")
            for key, value in self.summary.items():
                if not isinstance(value, (dict, list)):
                    logger.info(f"{key}: {value}")

        data_handler.save_outputs(records, f"{self.report_type}_report")

        if not self.test_mode:
            data_handler.post_to_webhook(
                validated_data=records,
                metadata=self.summary,
                report_type=self.report_type,
            )
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")
