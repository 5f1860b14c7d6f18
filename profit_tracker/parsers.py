import logging
import math
from pathlib import Path

from pydantic import ValidationError

from .schemas import ProductInput
from .utils import load_csv

logger = logging.getLogger(__name__)

# Maps the purchase sheet's headers to ProductInput fields.
PURCHASE_COLUMN_MAP = {
    "Name": "name",
    "Total Cost": "total_cost",
    "Quantity": "quantity",
    "Unit Sale Price": "unit_sale_price",
    "Markup %": "markup_pct",
}
REQUIRED_COLUMNS = ["Name", "Total Cost", "Quantity"]


def _clean(value):
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def parse_purchases_csv(file_path: Path) -> list[ProductInput] | None:
    """
    Loads a purchase sheet (one lot per row) and validates each row as a ProductInput.
    Rows that fail validation are skipped with a warning. Returns None if the file
    can't be read or is missing a required column.
    """
    df = load_csv(file_path)
    if df is None:
        return None

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        logger.error(f"❌ {file_path.name} is missing required columns: {missing}")
        return None

    present = {src: dst for src, dst in PURCHASE_COLUMN_MAP.items() if src in df.columns}
    df = df[list(present)].rename(columns=present)

    entries = []
    skipped = 0
    for row_number, record in enumerate(df.to_dict("records"), start=2):
        cleaned = {key: _clean(value) for key, value in record.items()}
        try:
            entries.append(ProductInput(**cleaned))
        except ValidationError as e:
            skipped += 1
            logger.warning(
                f"  > ⚠️  Skipping row {row_number} of {file_path.name}: "
                f"{e.error_count()} validation error(s)"
            )

    logger.info(f"✅ Parsed {file_path.name}: {len(entries)} lot(s), {skipped} skipped.")
    return entries
