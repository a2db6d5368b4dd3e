"""HTTP-level tests for the API routers."""

import math
import time

import pytest

from conftest import ts
from tradejournal.services.trade_store import trade_store


def _trade(id, pnl=None, **overrides):
    data = {
        "id": id,
        "timestamp": ts(2024, 3, 1),
        "market": "PERP",
        "symbol": "SOL-PERP",
        "side": "LONG",
        "order_type": "MARKET",
        "size": 1,
        "entry_price": 100,
        "fee": 0.5,
        "pnl": pnl,
        "status": "CLOSED" if pnl is not None else "OPEN",
    }
    if pnl is not None:
        data["exit_price"] = 100 + pnl
        data["duration"] = 60000
    data.update(overrides)
    return data


@pytest.fixture
def seeded(client):
    trades = [
        _trade("w1", 100, timestamp=ts(2024, 3, 1, 9)),
        _trade("l1", -50, timestamp=ts(2024, 3, 2, 9), side="SHORT", symbol="BTC-PERP"),
        _trade("w2", 200, timestamp=ts(2024, 3, 3, 9), order_type="LIMIT", fee_type="MAKER"),
        _trade("o1", timestamp=ts(2024, 3, 4, 9), market="SPOT", side="BUY", symbol="SOL/USDC"),
    ]
    resp = client.post("/api/trades/import", json=trades)
    assert resp.status_code == 200
    assert resp.json() == {"created": 4, "skipped": []}
    return client


# ---------------------------------------------------------------------------
# 1. Trades
# ---------------------------------------------------------------------------

class TestTradesApi:
    def test_health(self, client):
        resp = client.get("/api/system/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_list_paginated_newest_first(self, seeded):
        body = seeded.get("/api/trades", params={"page_size": 3}).json()
        assert body["total"] == 4
        assert body["total_pages"] == 2
        assert [t["id"] for t in body["items"]] == ["o1", "w2", "l1"]

    def test_list_filters(self, seeded):
        ids = lambda params: [t["id"] for t in seeded.get("/api/trades", params=params).json()["items"]]
        assert ids({"market": "SPOT"}) == ["o1"]
        assert ids({"min_pnl": 0, "sort": "pnl"}) == ["w2", "w1", "o1"]
        assert ids({"q": "btc"}) == ["l1"]
        assert ids({"side": ["LONG", "SHORT"], "order": "asc"}) == ["w1", "l1", "w2"]

    def test_invalid_query_rejected(self, seeded):
        assert seeded.get("/api/trades", params={"sort": "nope"}).status_code == 422
        assert seeded.get("/api/trades", params={"page": 0}).status_code == 422
        assert seeded.get("/api/trades", params={"side": "UP"}).status_code == 422

    def test_crud(self, client):
        resp = client.post("/api/trades", json=_trade("c1", 10))
        assert resp.status_code == 201
        assert client.post("/api/trades", json=_trade("c1", 10)).status_code == 409
        assert client.get("/api/trades/c1").json()["pnl"] == 10

        resp = client.put("/api/trades/c1", json={"pnl": 20, "exit_price": 120})
        assert resp.status_code == 200
        assert resp.json()["pnl"] == 20
        # removing the pnl of a closed trade breaks the status rule
        assert client.put("/api/trades/c1", json={"pnl": None}).status_code == 422

        assert client.delete("/api/trades/c1").status_code == 204
        assert client.get("/api/trades/c1").status_code == 404
        assert client.delete("/api/trades/c1").status_code == 404

    def test_create_validation(self, client):
        assert client.post("/api/trades", json=_trade("bad", 5, side="BUY")).status_code == 422

    def test_import_skips_duplicates(self, seeded):
        resp = seeded.post("/api/trades/import", json=[_trade("w1", 1), _trade("n1", 1), _trade("n1", 2)])
        assert resp.json() == {"created": 1, "skipped": ["w1", "n1"]}


# ---------------------------------------------------------------------------
# 2. Analytics and dashboard
# ---------------------------------------------------------------------------

class TestAnalyticsApi:
    def test_summary(self, seeded):
        body = seeded.get("/api/analytics/summary").json()
        assert body["total_trades"] == 4
        assert body["total_pnl"] == pytest.approx(250)
        assert body["profit_factor"] == pytest.approx(6.0)
        assert body["profit_factor_display"] == "6.00"

    def test_summary_reflects_writes(self, seeded):
        seeded.get("/api/analytics/summary")
        seeded.post("/api/trades", json=_trade("w3", 50, timestamp=ts(2024, 3, 5)))
        assert seeded.get("/api/analytics/summary").json()["total_pnl"] == pytest.approx(300)

    def test_infinite_profit_factor_is_null_with_display(self, client):
        client.post("/api/trades", json=_trade("only-win", 10))
        body = client.get("/api/analytics/summary").json()
        assert body["profit_factor"] is None
        assert body["profit_factor_display"] == "∞"

    def test_filtered_summary(self, seeded):
        body = seeded.get("/api/analytics/summary", params={"symbol": "BTC-PERP"}).json()
        assert body["total_trades"] == 1
        assert body["total_pnl"] == -50

    def test_period_filter(self, seeded):
        # seeded trades are from 2024, far outside the last day
        body = seeded.get("/api/analytics/summary", params={"period": "1D"}).json()
        assert body["total_trades"] == 0

    def test_bad_period(self, seeded):
        assert seeded.get("/api/analytics/summary", params={"period": "2W"}).status_code == 422

    def test_equity_and_daily(self, seeded):
        curve = seeded.get("/api/analytics/equity").json()
        assert len(curve) == 4
        assert curve[0]["equity"] == 10000
        assert curve[-1]["equity"] == pytest.approx(10000 + 250 - 1.5)
        daily = seeded.get("/api/analytics/daily").json()
        assert [d["date"] for d in daily] == ["2024-03-01", "2024-03-02", "2024-03-03", "2024-03-04"]
        calendar = seeded.get("/api/analytics/calendar").json()
        assert [c["intensity"] for c in calendar] == [1, -1, 1, 0]
        chart = seeded.get("/api/analytics/pnl-chart").json()
        assert chart[-1]["cumulative"] == pytest.approx(250)

    def test_streaks_and_score(self, seeded):
        streaks = seeded.get("/api/analytics/streaks").json()
        assert streaks["current"] == {"type": "win", "count": 1, "pnl": 200}
        assert streaks["longest_win"]["count"] == 1
        assert streaks["is_hot"] is False
        score = seeded.get("/api/analytics/score").json()
        assert score["max_total"] == 100
        assert score["grade"] in {"A+", "A", "B+", "B", "C+", "C", "D", "F"}

    def test_breakdowns(self, seeded):
        timing = seeded.get("/api/analytics/time").json()
        assert len(timing["hourly"]) == 24
        assert timing["hourly"][9]["trades"] == 3
        direction = seeded.get("/api/analytics/direction").json()
        assert direction["long"]["count"] == 2
        assert direction["ratio_display"] == "2.00"
        order_types = seeded.get("/api/analytics/order-types").json()
        assert [o["order_type"] for o in order_types] == ["IOC", "LIMIT", "MARKET"]
        fees = seeded.get("/api/analytics/fees").json()
        assert fees["breakdown"]["total"] == pytest.approx(2.0)
        assert fees["breakdown"]["maker"] == pytest.approx(0.5)
        assert len(fees["daily"]) == 30
        volume = seeded.get("/api/analytics/volume", params={"days": 7}).json()
        assert len(volume["daily"]) == 7
        assert volume["allocation"][0]["name"] == "SOL-PERP"
        symbols = seeded.get("/api/analytics/symbols").json()
        assert {s["symbol"] for s in symbols["symbols"]} == {"SOL-PERP", "BTC-PERP", "SOL/USDC"}

    def test_direction_can_include_spot(self, seeded):
        seeded.post("/api/trades", json=_trade("s1", 5, market="SPOT", side="SELL", symbol="SOL/USDC"))
        literal = seeded.get("/api/analytics/direction").json()
        assert literal["short"]["count"] == 1
        folded = seeded.get("/api/analytics/direction", params={"include_spot": True}).json()
        assert folded["short"]["count"] == 2
        assert folded["ratio_display"] == "1.00"

    def test_volume_display_strings(self, client):
        recent = int(time.time() * 1000) - 60_000
        client.post("/api/trades", json=_trade("v1", 10, timestamp=recent, size=20, entry_price=100, fee=3))
        body = client.get("/api/analytics/volume", params={"days": 7}).json()
        assert body["total_volume"] == pytest.approx(2000)
        assert body["total_volume_display"] == "$2.00K"
        assert body["total_fees_display"] == "$3.00"

    def test_daily_activity_not_cached(self, seeded):
        for days in (5, 10, 30):
            seeded.get("/api/analytics/fees", params={"days": days})
            seeded.get("/api/analytics/volume", params={"days": days})
        keys = [key for key in trade_store._cache if "daily_activity" in str(key)]
        assert keys == []

    def test_risk(self, seeded):
        body = seeded.get("/api/analytics/risk").json()
        assert body["risk_reward_ratio"] == pytest.approx(3.0)
        assert body["risk_reward_display"] == "3.00"
        assert body["risk_level"] in {"Low", "Medium", "High"}
        assert math.isfinite(body["sharpe_ratio"])

    def test_empty_history(self, client):
        assert client.get("/api/analytics/equity").json() == []
        summary = client.get("/api/analytics/summary").json()
        assert summary["total_trades"] == 0
        assert summary["profit_factor"] == 0
        assert client.get("/api/analytics/streaks").json()["current"]["type"] == "none"

    def test_dashboard(self, seeded):
        body = seeded.get("/api/dashboard/summary", params={"recent": 2}).json()
        assert body["analytics"]["closed_trades"] == 3
        assert body["quick_stats"]["best_trade"]["id"] == "w2"
        assert body["quick_stats"]["worst_trade"]["id"] == "l1"
        assert body["quick_stats"]["avg_duration_display"] == "1m"
        assert [t["id"] for t in body["recent_trades"]] == ["o1", "w2"]
        assert body["recent_trades"][0]["age"].endswith("ago")
        assert body["quick_stats"]["today_pnl_display"] == "+$0.00"
        assert body["streaks"]["current"]["type"] == "win"


# ---------------------------------------------------------------------------
# 3. Journal, positions, export, preferences
# ---------------------------------------------------------------------------

class TestJournalApi:
    def test_crud_and_stats(self, client):
        resp = client.post("/api/journal", json={
            "trade_id": "w1", "date": "2024-03-01", "notes": "clean breakout",
            "tags": ["Breakout", "trend"], "sentiment": "BULLISH", "rating": 4,
        })
        assert resp.status_code == 201
        entry_id = resp.json()["id"]
        client.post("/api/journal", json={"date": "2024-03-02", "tags": ["trend"], "rating": 0})

        assert client.get("/api/journal/tags").json() == ["breakout", "trend"]
        stats = client.get("/api/journal/stats").json()
        assert stats["total_entries"] == 2
        assert stats["avg_rating"] == 4
        assert stats["most_used_tags"][0] == {"tag": "trend", "count": 2}
        assert [s["sentiment"] for s in stats["sentiment_breakdown"]] == ["BULLISH", "BEARISH", "NEUTRAL"]

        assert len(client.get("/api/journal", params={"tag": "breakout"}).json()) == 1
        assert len(client.get("/api/journal", params={"trade_id": "w1"}).json()) == 1

        resp = client.put(f"/api/journal/{entry_id}", json={"rating": 5, "tags": ["Scalp"]})
        assert resp.json()["rating"] == 5
        assert resp.json()["tags"] == ["scalp"]
        assert client.put(f"/api/journal/{entry_id}", json={"rating": 9}).status_code == 422

        assert client.delete(f"/api/journal/{entry_id}").status_code == 204
        assert client.get(f"/api/journal/{entry_id}").status_code == 404


class TestPositionsApi:
    def test_reseed_populates_positions(self, client):
        resp = client.post("/api/system/reseed", params={"count": 30})
        assert resp.json() == {"status": "ok", "trades": 30}
        assert client.get("/api/trades").json()["total"] == 30
        positions = client.get("/api/positions").json()
        allocation = client.get("/api/positions/allocation").json()
        assert len(allocation["allocation"]) == len({p["symbol"] for p in positions})


class TestExportApi:
    def test_csv(self, seeded):
        resp = seeded.get("/api/export/csv", params={"market": "PERP"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "attachment; filename=\"trades-" in resp.headers["content-disposition"]
        lines = resp.text.split("\n")
        assert len(lines) == 4
        assert lines[1].startswith('"w2",')

    def test_json_and_report(self, seeded):
        records = seeded.get("/api/export/json").json()
        assert [r["id"] for r in records] == ["o1", "w2", "l1", "w1"]
        report = seeded.get("/api/export/report").text
        assert "Total Trades:        4" in report


class TestPreferencesApi:
    def test_round_trip(self, client):
        assert client.get("/api/system/preferences").json() == {
            "sidebar_collapsed": False, "theme": "dark", "selected_period": "1M",
        }
        resp = client.put("/api/system/preferences", json={"theme": "light", "selected_period": "3M"})
        assert resp.json()["theme"] == "light"
        assert client.post("/api/system/preferences/toggle-sidebar").json()["sidebar_collapsed"] is True
        assert client.get("/api/system/preferences").json() == {
            "sidebar_collapsed": True, "theme": "light", "selected_period": "3M",
        }
        assert client.put("/api/system/preferences", json={"theme": "neon"}).status_code == 422
