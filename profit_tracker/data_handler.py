import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

import pandas as pd
import requests
from pydantic import BaseModel, ValidationError

from . import settings
from . import utils
from .exceptions import InvalidInput, ProductNotFound
from .schemas import Product

logger = logging.getLogger(__name__)


class ProductStore:
    """
    A JSON-file store for product records, partitioned by owner id.

    The file holds one list of camelCase product records. Every call re-reads the
    file, so the store keeps no state between operations.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or settings.DATA_DIR / settings.STORE_FILENAME

    def _read(self) -> list[Product]:
        if not self.path.exists():
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        try:
            return [Product.model_validate(record) for record in raw]
        except ValidationError as e:
            logger.error(f"❌ Stored products in {self.path} failed validation.")
            logger.error(e)
            raise

    def _write(self, products: list[Product]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(
                [p.model_dump(mode="json", by_alias=True) for p in products],
                f,
                indent=2,
            )
        tmp_path.replace(self.path)

    def list_products(self, owner_id: str = settings.DEFAULT_OWNER_ID) -> list[Product]:
        """All products of one owner, newest first."""
        owned = [p for p in self._read() if p.owner_id == owner_id]
        return sorted(owned, key=lambda p: p.created_at, reverse=True)

    def get(self, product_id: str, owner_id: str = settings.DEFAULT_OWNER_ID) -> Product:
        for product in self._read():
            if product.id == product_id and product.owner_id == owner_id:
                return product
        raise ProductNotFound(product_id, owner_id)

    def add(self, product: Product, owner_id: Optional[str] = None) -> Product:
        """Stores a new product, stamping the owner when the record has none."""
        owner = owner_id or product.owner_id or settings.DEFAULT_OWNER_ID
        if product.owner_id != owner:
            product = product.model_copy(update={"owner_id": owner})

        products = self._read()
        if any(p.id == product.id for p in products):
            raise InvalidInput(f"Product '{product.id}' already exists", {"product_id": product.id})
        products.append(product)
        self._write(products)
        logger.info(f"✅ Added '{product.name}' ({product.id}).")
        return product

    def save(self, product: Product) -> Product:
        """Replaces the stored record with the same id and owner."""
        products = self._read()
        for i, existing in enumerate(products):
            if existing.id == product.id and existing.owner_id == product.owner_id:
                products[i] = product
                self._write(products)
                return product
        raise ProductNotFound(product.id, product.owner_id)

    def delete(self, product_id: str, owner_id: str = settings.DEFAULT_OWNER_ID):
        products = self._read()
        kept = [p for p in products if not (p.id == product_id and p.owner_id == owner_id)]
        if len(kept) == len(products):
            raise ProductNotFound(product_id, owner_id)
        self._write(kept)
        logger.info(f"🗑️ Deleted product {product_id}.")


def save_outputs(validated_data: Sequence[BaseModel], filename_base: str) -> Path | None:
    """
    Saves report rows to a dated CSV and, if enabled, to a JSON file.
    Returns the CSV path, or None when there was nothing to write.
    """
    if not validated_data:
        logger.warning("No data to save to disk.")
        return None

    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()

    csv_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.csv"
    json_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.json"

    records = [item.model_dump(mode="json", by_alias=True) for item in validated_data]
    pd.DataFrame(records).to_csv(csv_path, index=False)
    logger.info(f"✅ Report saved to: {csv_path}")

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, default=str)
        logger.info(f"✅ JSON output saved to: {json_path}")
    else:
        logger.info("Skipping JSON file save as per configuration.")

    return csv_path


def post_to_webhook(
    validated_data: Sequence[BaseModel],
    metadata: dict[str, Any],
    report_type: str,
) -> bool:
    """
    Posts the report rows and summary metadata to the webhook.
    Failures are logged and reported through the return value, never raised.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting {report_type} report to webhook: {settings.WEBHOOK_URL}")

    payload = {
        "reportType": report_type,
        "reportData": [
            item.model_dump(mode="json", by_alias=True) for item in validated_data
        ],
        "summary": metadata,
    }

    try:
        response = requests.post(settings.WEBHOOK_URL, json=payload, timeout=15)
        response.raise_for_status()
        logger.info("✅ Report successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
