"""Tests for trade filtering, period ranges, sorting and pagination."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from conftest import ts
from tradejournal.models.enums import Period
from tradejournal.schemas.filters import DateRange, TradeFilters
from tradejournal.services.filtering import filter_trades, paginate, period_date_range, sort_trades


@pytest.fixture
def trades(make_trade):
    return [
        make_trade(id="alpha-1", pnl=120, symbol="BTC-PERP", timestamp=ts(2024, 1, 10)),
        make_trade(id="beta-2", pnl=-40, symbol="SOL-PERP", side="SHORT", order_type="LIMIT",
                   timestamp=ts(2024, 1, 15)),
        make_trade(id="gamma-3", symbol="ETH/USDC", market="SPOT", side="BUY", timestamp=ts(2024, 1, 20)),
        make_trade(id="delta-4", pnl=5, symbol="SOL/USDC", market="SPOT", side="SELL",
                   order_type="IOC", timestamp=ts(2024, 2, 1)),
    ]


def _ids(trades):
    return [t.id for t in trades]


# ---------------------------------------------------------------------------
# 1. filter_trades
# ---------------------------------------------------------------------------

class TestFilterTrades:
    def test_no_filters_returns_copy(self, trades):
        result = filter_trades(trades, TradeFilters())
        assert result == trades
        assert result is not trades
        assert filter_trades(trades, None) == trades

    def test_date_range_inclusive(self, trades):
        filters = TradeFilters(date_range=DateRange(
            start=datetime(2024, 1, 15, 12), end=datetime(2024, 1, 20, 12),
        ))
        assert _ids(filter_trades(trades, filters)) == ["beta-2", "gamma-3"]

    def test_aware_date_range(self, trades):
        start = datetime.fromtimestamp(ts(2024, 1, 15) / 1000, tz=timezone.utc)
        filters = TradeFilters(date_range=DateRange(start=start, end=datetime(2030, 1, 1, tzinfo=timezone.utc)))
        assert _ids(filter_trades(trades, filters)) == ["beta-2", "gamma-3", "delta-4"]

    def test_allow_lists(self, trades):
        assert _ids(filter_trades(trades, TradeFilters(symbols=["SOL-PERP", "SOL/USDC"]))) == ["beta-2", "delta-4"]
        assert _ids(filter_trades(trades, TradeFilters(sides=["BUY"]))) == ["gamma-3"]
        assert _ids(filter_trades(trades, TradeFilters(markets=["SPOT"]))) == ["gamma-3", "delta-4"]
        assert _ids(filter_trades(trades, TradeFilters(order_types=["LIMIT", "IOC"]))) == ["beta-2", "delta-4"]
        assert _ids(filter_trades(trades, TradeFilters(status=["OPEN"]))) == ["gamma-3"]

    def test_empty_allow_list_is_no_constraint(self, trades):
        assert filter_trades(trades, TradeFilters(symbols=[])) == trades

    def test_pnl_bounds_keep_open_trades(self, trades):
        result = filter_trades(trades, TradeFilters(min_pnl=100))
        assert _ids(result) == ["alpha-1", "gamma-3"]
        result = filter_trades(trades, TradeFilters(max_pnl=-1000))
        assert _ids(result) == ["gamma-3"]

    def test_undefined_pnl_never_removed_by_bounds(self, make_trade):
        open_trade = make_trade()
        for lo, hi in [(0, 0), (1e9, None), (None, -1e9), (5, -5)]:
            assert filter_trades([open_trade], TradeFilters(min_pnl=lo, max_pnl=hi)) == [open_trade]

    def test_search_is_case_insensitive_over_symbol_and_id(self, trades):
        assert _ids(filter_trades(trades, TradeFilters(search_query="sol"))) == ["beta-2", "delta-4"]
        assert _ids(filter_trades(trades, TradeFilters(search_query="GAMMA"))) == ["gamma-3"]

    def test_constraints_are_anded(self, trades):
        filters = TradeFilters(markets=["SPOT"], min_pnl=0, search_query="usdc", status=["CLOSED"])
        assert _ids(filter_trades(trades, filters)) == ["delta-4"]

    def test_idempotent(self, trades):
        filters = TradeFilters(markets=["PERP", "SPOT"], min_pnl=-50, search_query="-")
        once = filter_trades(trades, filters)
        assert filter_trades(once, filters) == once

    def test_does_not_mutate_input(self, trades):
        before = list(trades)
        filter_trades(trades, TradeFilters(sides=["LONG"]))
        assert trades == before


# ---------------------------------------------------------------------------
# 2. Date ranges
# ---------------------------------------------------------------------------

class TestPeriodDateRange:
    NOW = datetime(2024, 3, 31, 15, 30)

    @pytest.mark.parametrize("period, start", [
        (Period.ONE_DAY, datetime(2024, 3, 30, 15, 30)),
        (Period.ONE_WEEK, datetime(2024, 3, 24, 15, 30)),
        (Period.ONE_MONTH, datetime(2024, 2, 29, 15, 30)),
        (Period.THREE_MONTHS, datetime(2023, 12, 31, 15, 30)),
        (Period.ONE_YEAR, datetime(2023, 3, 31, 15, 30)),
        (Period.ALL, datetime(2020, 1, 1, 15, 30)),
    ])
    def test_periods(self, period, start):
        rng = period_date_range(period, now=self.NOW)
        assert rng.start == start
        assert rng.end == self.NOW

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            DateRange(start=datetime(2024, 2, 1), end=datetime(2024, 1, 1))


# ---------------------------------------------------------------------------
# 3. Sorting and pagination
# ---------------------------------------------------------------------------

class TestSortTrades:
    def test_missing_values_last_in_both_directions(self, trades):
        assert _ids(sort_trades(trades, "pnl", descending=True)) == ["alpha-1", "delta-4", "beta-2", "gamma-3"]
        assert _ids(sort_trades(trades, "pnl", descending=False)) == ["beta-2", "delta-4", "alpha-1", "gamma-3"]

    def test_default_is_newest_first(self, trades):
        assert _ids(sort_trades(trades)) == ["delta-4", "gamma-3", "beta-2", "alpha-1"]

    def test_string_field(self, trades):
        assert _ids(sort_trades(trades, "symbol", descending=False))[0] == "alpha-1"

    def test_unknown_field(self, trades):
        with pytest.raises(ValueError):
            sort_trades(trades, "password")


class TestPaginate:
    def test_pages(self):
        page = paginate(list(range(45)), page=3, page_size=20)
        assert page.items == list(range(40, 45))
        assert page.total == 45
        assert page.total_pages == 3

    def test_page_past_end_is_empty(self):
        assert paginate([1, 2], page=5, page_size=20).items == []

    def test_empty(self):
        page = paginate([], page=1, page_size=20)
        assert page.items == [] and page.total_pages == 0

    @pytest.mark.parametrize("page, size", [(0, 20), (1, 0), (-1, 5), (1, -20)])
    def test_invalid_arguments_raise(self, page, size):
        with pytest.raises(ValueError):
            paginate([1], page=page, page_size=size)
