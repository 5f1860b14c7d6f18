"""
Tests for the recovery and analytics report pipelines.
"""
import json

import pytest

from profit_tracker import data_handler, settings
from profit_tracker.pipelines.analytics import AnalyticsReportPipeline
from profit_tracker.pipelines.recovery import RecoveryReportPipeline


@pytest.fixture
def stocked_store(store, make_product):
    store.add(make_product("Mugs", total_cost=150, quantity=6, unit_sale_price=30, sales={"monday": 5}))
    store.add(make_product("Plates", total_cost=100, quantity=10, unit_sale_price=12, sales={"friday": 2, "monday": 1}))
    store.add(make_product("Bowls", total_cost=40, quantity=4))
    store.add(make_product("Elsewhere", total_cost=10, quantity=1), owner_id="someone-else")
    return store


@pytest.fixture
def no_network(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("unexpected webhook post")

    monkeypatch.setattr(data_handler.requests, "post", fail)


class TestRecoveryReportPipeline:
    def test_rows_and_summary(self, stocked_store, no_network):
        pipeline = RecoveryReportPipeline(store=stocked_store, test_mode=True)
        records = pipeline.run()

        by_name = {r.name: r for r in records}
        assert set(by_name) == {"Mugs", "Plates", "Bowls"}
        assert by_name["Mugs"].is_recovered is True
        assert by_name["Plates"].total_revenue == 36.0
        assert by_name["Bowls"].amount_needed == 40.0

        assert pipeline.summary["totalInvested"] == 290.0
        assert pipeline.summary["productsRecovered"] == 1
        assert pipeline.summary["productsNotRecovered"] == 2

    def test_writes_report_files(self, stocked_store, no_network):
        RecoveryReportPipeline(store=stocked_store, test_mode=True).run()
        assert len(list(settings.OUTPUT_DIR.glob("recovery_report_*.csv"))) == 1
        assert len(list(settings.OUTPUT_DIR.glob("recovery_report_*.json"))) == 1

    def test_empty_store(self, store, no_network):
        pipeline = RecoveryReportPipeline(store=store, test_mode=True)
        assert pipeline.run() == []
        assert pipeline.summary["overallRecoveryPercentage"] == 0.0
        assert not settings.OUTPUT_DIR.exists()

    def test_posts_when_not_in_test_mode(self, stocked_store, monkeypatch):
        posted = []
        monkeypatch.setattr(
            data_handler, "post_to_webhook", lambda **kwargs: posted.append(kwargs) or True
        )
        RecoveryReportPipeline(store=stocked_store).run()
        assert posted[0]["report_type"] == "recovery"
        assert len(posted[0]["validated_data"]) == 3


class TestAnalyticsReportPipeline:
    def test_rankings_in_long_format(self, stocked_store, no_network):
        pipeline = AnalyticsReportPipeline(store=stocked_store, test_mode=True)
        records = pipeline.run()

        top = [(r.rank, r.name, r.value) for r in records if r.ranking == "top_selling"]
        assert top == [(1, "Mugs", 5.0), (2, "Plates", 3.0)]

        profit = [r.name for r in records if r.ranking == "highest_total_profit"]
        # Mugs: +5 x 6 = 30, Plates: +2 x 10 = 20
        assert profit == ["Mugs", "Plates"]

        margin = [r.name for r in records if r.ranking == "best_margin"]
        # Both at 20%: the tie keeps store order (same created_at, so insertion order)
        assert margin == ["Mugs", "Plates"]

    def test_summary(self, stocked_store, no_network):
        pipeline = AnalyticsReportPipeline(store=stocked_store, test_mode=True)
        pipeline.run()
        summary = pipeline.summary
        assert summary["totalSold"] == 8
        assert summary["bestSeller"] == "Mugs"
        assert summary["weekly"]["plates"]["bestDay"] == "friday"
        assert summary["weekly"]["bowls"]["bestDay"] == "monday"
        assert summary["remainingProfit"]["bowls"] == 0.0
        assert summary["remainingProfit"]["plates"] == pytest.approx(14.0)
        # The summary is JSON-serializable for the webhook.
        json.dumps(summary)

    def test_top_n(self, stocked_store, no_network):
        records = AnalyticsReportPipeline(store=stocked_store, top_n=1, test_mode=True).run()
        assert [r.name for r in records if r.ranking == "top_selling"] == ["Mugs"]
