"""
Tests for importing purchase lots from CSV.
"""
import logging
from datetime import date

from profit_tracker import settings, utils
from profit_tracker.parsers import parse_purchases_csv


def _write(path, text, encoding="utf-8"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding=encoding)
    return path


class TestParsePurchasesCsv:
    def test_valid_rows(self, tmp_path):
        path = _write(
            tmp_path / "purchases.csv",
            "Name,Total Cost,Quantity,Unit Sale Price,Markup %\n"
            "Mugs,150,6,30,\n"
            "Plates,100,10,,25\n"
            "Bowls,40,4,,\n",
        )
        entries = parse_purchases_csv(path)
        assert [e.name for e in entries] == ["Mugs", "Plates", "Bowls"]
        assert entries[0].unit_sale_price == 30.0
        assert entries[0].markup_pct is None
        assert entries[1].unit_sale_price is None
        assert entries[1].markup_pct == 25.0
        assert entries[2].quantity == 4

    def test_optional_columns_may_be_absent(self, tmp_path):
        path = _write(tmp_path / "purchases.csv", "Name,Total Cost,Quantity\nMugs,150,6\n")
        entries = parse_purchases_csv(path)
        assert entries[0].total_cost == 150.0
        assert entries[0].unit_sale_price is None

    def test_invalid_rows_skipped(self, tmp_path, caplog):
        path = _write(
            tmp_path / "purchases.csv",
            "Name,Total Cost,Quantity\n"
            "Mugs,150,6\n"
            "Broken,0,6\n"
            "Half,10,2.5\n",
        )
        with caplog.at_level(logging.WARNING):
            entries = parse_purchases_csv(path)
        assert [e.name for e in entries] == ["Mugs"]
        assert "Skipping row 3" in caplog.text
        assert "Skipping row 4" in caplog.text

    def test_missing_required_column(self, tmp_path):
        path = _write(tmp_path / "purchases.csv", "Name,Quantity\nMugs,6\n")
        assert parse_purchases_csv(path) is None

    def test_missing_file(self, tmp_path):
        assert parse_purchases_csv(tmp_path / "nope.csv") is None

    def test_latin1_fallback(self, tmp_path):
        path = _write(
            tmp_path / "purchases.csv",
            "Name,Total Cost,Quantity\nCafé,20,4\n",
            encoding="latin-1",
        )
        assert parse_purchases_csv(path)[0].name == "Café"


class TestFindLatestReport:
    def test_picks_newest_dated_file(self):
        for name in ["purchases_2024-04-30.csv", "purchases_2024-05-02.csv", "purchases_latest.csv"]:
            _write(settings.INPUT_DIR / name, "Name,Total Cost,Quantity\n")
        path, file_date = utils.find_latest_report(settings.INPUT_DIR, "purchases_")
        assert path.name == "purchases_2024-05-02.csv"
        assert file_date == date(2024, 5, 2)

    def test_nothing_found(self):
        settings.INPUT_DIR.mkdir(parents=True)
        assert utils.find_latest_report(settings.INPUT_DIR, "purchases_") is None
