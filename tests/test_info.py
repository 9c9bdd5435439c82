"""Tests for order, market and token snapshots."""

import asyncio

from termmax_tools.tracker import get_market_info, get_order_info, get_token_info
from termmax_tools.utils.convert_time import timestamp_to_iso

from conftest import (
    DEBT,
    FT,
    FakeLedgerClient,
    GT,
    MAKER,
    MARKET,
    MATURITY,
    ORDER,
    TREASURER,
    market_calls,
)


class TestTokenInfo:

    def test_reads_erc20_metadata(self, ledger):
        info = asyncio.run(get_token_info(ledger, DEBT))

        assert (info.name, info.symbol, info.decimals) == ("USD Coin", "USDC", 6)
        assert info.error is None

    def test_each_read_falls_back_individually(self):
        client = FakeLedgerClient(calls={(DEBT, "symbol"): "USDC"})

        info = asyncio.run(get_token_info(client, DEBT))

        assert (info.name, info.symbol, info.decimals) == ("Unknown", "USDC", 18)

    def test_zero_decimals_are_kept(self):
        client = FakeLedgerClient(calls={(DEBT, "decimals"): 0})

        assert asyncio.run(get_token_info(client, DEBT)).decimals == 0


class TestMarketInfo:

    def test_full_snapshot(self, ledger):
        info = asyncio.run(get_market_info(ledger, MARKET))

        assert info.error is None
        assert info.config.treasurer == TREASURER
        assert info.config.maturity == str(MATURITY)
        assert info.config.maturity_date == timestamp_to_iso(MATURITY)
        assert info.tokens.ft.symbol == "FT-USDC"
        assert info.tokens.gt.address == GT
        assert info.tokens.debt_token.decimals == 6

    def test_missing_config_keeps_tokens(self):
        calls = market_calls()
        del calls[(MARKET, "config")]

        info = asyncio.run(get_market_info(FakeLedgerClient(calls=calls), MARKET))

        assert info.config is None
        assert info.tokens is not None
        assert info.error is None

    def test_unreadable_market_reports_error(self):
        calls = market_calls()
        calls[(MARKET, "tokens")] = ConnectionError("node unavailable")

        info = asyncio.run(get_market_info(FakeLedgerClient(calls=calls), MARKET))

        assert info.tokens is None
        assert "node unavailable" in info.error


class TestOrderInfo:

    def test_full_snapshot(self, ledger):
        info = asyncio.run(get_order_info(ledger, ORDER))

        assert info.error is None
        assert info.market_address == MARKET
        assert info.maker_address == MAKER
        assert (info.ft_reserve, info.xt_reserve) == ("5000000", "7000000")
        assert info.order_config.max_xt_reserve == "9000000"
        assert info.order_config.gt_id == "3"
        assert info.tokens.ft.address == FT
        assert info.maturity == MATURITY

    def test_never_raises(self):
        info = asyncio.run(get_order_info(FakeLedgerClient(), ORDER))

        assert info.error
        assert info.market_info is None
        assert info.ft_reserve == "0"
