"""
Lot profit tracker command line.

Usage:
    python main.py add "Coffee mugs" --total-cost 150 --quantity 6 --price 30
    python main.py sell <product-id> 2 --day friday
    python main.py list
    python main.py import input/purchases_2024-05-01.csv
    python main.py report all
"""
import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from profit_tracker import analytics, calculator, parsers, recovery, sales, settings, utils
from profit_tracker.data_handler import ProductStore
from profit_tracker.exceptions import ProfitTrackerError
from profit_tracker.logger import setup_logger
from profit_tracker.pipelines.analytics import AnalyticsReportPipeline
from profit_tracker.pipelines.recovery import RecoveryReportPipeline

logger = logging.getLogger(__name__)


def _format_product(product) -> str:
    status = recovery.recovery_status(product)
    if product.profit_per_unit is None:
        profit = "no sale price"
    else:
        profit = f"{product.profit_per_unit:.2f}/unit ({product.profit_percentage:.1f}%)"
    return (
        f"{product.id}  {product.name}\n"
        f"    unit cost {product.unit_cost:.2f} | sale price {product.effective_sale_price:.2f} | profit {profit}\n"
        f"    sold {product.sold}/{product.quantity} | remaining {product.remaining} | "
        f"recovered {status.percentage_recovered:.1f}%"
    )


def with_default_markup(entry: dict) -> dict:
    """Lots entered without any price get DEFAULT_MARKUP_PCT, for both add and import."""
    if entry.get("unit_sale_price") is None and entry.get("markup_pct") is None:
        return {**entry, "markup_pct": settings.DEFAULT_MARKUP_PCT}
    return entry


def cmd_add(args, store: ProductStore) -> int:
    entry = with_default_markup(
        {
            "name": args.name,
            "total_cost": args.total_cost,
            "quantity": args.quantity,
            "unit_sale_price": args.price,
            "markup_pct": args.markup,
        }
    )
    product = calculator.create_product(entry, owner_id=args.owner)
    product = store.add(product)
    logger.info(_format_product(product))
    return 0


def cmd_sell(args, store: ProductStore) -> int:
    product = store.get(args.product_id, args.owner)
    day = args.day or sales.weekday_for(date.today())
    updated = sales.record_sale(product, day, args.amount)
    store.save(updated)
    logger.info(f"✅ Sold {args.amount} x '{updated.name}' on {day}.")
    logger.info(_format_product(updated))
    return 0


def cmd_delete(args, store: ProductStore) -> int:
    store.delete(args.product_id, args.owner)
    return 0


def cmd_list(args, store: ProductStore) -> int:
    products = store.list_products(args.owner)
    if not products:
        logger.info("No products yet. Add your first lot with 'add'.")
        return 0

    for product in products:
        logger.info(_format_product(product))

    totals = analytics.portfolio_totals(products)
    logger.info("\n--- Totals ---")
    logger.info(f"Units sold: {totals.total_sold}")
    logger.info(f"Revenue: {totals.total_revenue:.2f}")
    logger.info(f"Realized profit: {totals.realized_profit:.2f}")
    logger.info(f"Best seller: {totals.best_seller.name if totals.best_seller else 'N/A'}")
    return 0


def cmd_import(args, store: ProductStore) -> int:
    if args.file:
        path = Path(args.file)
    else:
        found = utils.find_latest_report(settings.INPUT_DIR, settings.PURCHASES_FILENAME_PREFIX)
        if not found:
            logger.error(
                f"❌ No '{settings.PURCHASES_FILENAME_PREFIX}YYYY-MM-DD.csv' file in {settings.INPUT_DIR}."
            )
            return 1
        path, file_date = found
        logger.info(f"  > Found: {path.name} (File Date: {file_date})")

    entries = parsers.parse_purchases_csv(path)
    if entries is None:
        return 1

    for entry in entries:
        fields = with_default_markup(entry.model_dump())
        store.add(calculator.create_product(fields, owner_id=args.owner))
    logger.info(f"Imported {len(entries)} lot(s).")
    return 0


def cmd_report(args, store: ProductStore) -> int:
    pipelines = {
        "recovery": RecoveryReportPipeline,
        "analytics": AnalyticsReportPipeline,
    }
    selected = list(pipelines) if args.kind == "all" else [args.kind]
    for kind in selected:
        pipelines[kind](store=store, owner_id=args.owner, test_mode=args.test).run()
    return 0


COMMANDS = {
    "add": cmd_add,
    "sell": cmd_sell,
    "delete": cmd_delete,
    "list": cmd_list,
    "import": cmd_import,
    "report": cmd_report,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Track lot costs, sales and profit.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--owner", default=settings.DEFAULT_OWNER_ID, help="Owner id partitioning the store")
    parser.add_argument("--store", type=Path, default=None, help="Path to the products JSON file")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a purchased lot")
    add.add_argument("name")
    add.add_argument("--total-cost", type=float, required=True, help="Amount paid for the whole lot")
    add.add_argument("--quantity", type=int, required=True, help="Units in the lot")
    price = add.add_mutually_exclusive_group()
    price.add_argument("--price", type=float, default=None, help="Sale price per unit")
    price.add_argument(
        "--markup", type=float, default=None,
        help=f"Markup over unit cost in percent (default: {settings.DEFAULT_MARKUP_PCT:g})",
    )

    sell = sub.add_parser("sell", help="Record a sale")
    sell.add_argument("product_id")
    sell.add_argument("amount", type=int)
    sell.add_argument("--day", choices=settings.WEEKDAYS, default=None, help="Weekday bucket (default: today)")

    delete = sub.add_parser("delete", help="Delete a product")
    delete.add_argument("product_id")

    sub.add_parser("list", help="List products and totals")

    imp = sub.add_parser("import", help="Import lots from a purchases CSV")
    imp.add_argument("file", nargs="?", default=None, help="CSV path (default: latest in INPUT_DIR)")

    report = sub.add_parser("report", help="Build recovery/analytics reports")
    report.add_argument("kind", choices=["recovery", "analytics", "all"], nargs="?", default="all")
    report.add_argument("--test", action="store_true", help="Skip the webhook post")

    return parser


def main(argv=None) -> int:
    setup_logger()
    args = build_parser().parse_args(argv)
    store = ProductStore(args.store)
    try:
        return COMMANDS[args.command](args, store)
    except ProfitTrackerError as e:
        logger.error(f"❌ {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
