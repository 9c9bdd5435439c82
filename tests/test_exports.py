"""Tests for the console report, JSON and CSV exports."""

import asyncio
import json

import pytest

from termmax_tools.export import (
    CSV_HEADER,
    build_json_document,
    csv_row,
    render_csv,
    render_history,
    render_summary,
    write_csv,
    write_json,
)
from termmax_tools.tracker import TrackingResult, enrich_events, get_order_info
from termmax_tools.types import (
    EventsCollection,
    OrderInitializedEvent,
    SwapEvent,
    UpdateOrderEvent,
    WithdrawAssetsEvent,
)

from conftest import BASE_TIMESTAMP, CALLER, DAY, DEBT, MAKER, MARKET, ORDER, XT, ZERO


def header(block: int, log_index: int = 0, event_type: str = "UpdateOrder", operation: str = "Deposit"):
    return dict(event_type=event_type, operation_type=operation, block_number=block,
                transaction_hash=f"0x{block:064x}", log_index=log_index)


def update(block: int, ft: int, xt: int = 0, operation: str = "Deposit") -> UpdateOrderEvent:
    return UpdateOrderEvent(**header(block, operation=operation), ft_change_amt=ft, xt_change_amt=xt,
                            gt_id=0, max_xt_reserve=2_000_000, swap_trigger=ZERO)


@pytest.fixture
def events(ledger):
    order_info = asyncio.run(get_order_info(ledger, ORDER))
    collection = EventsCollection(
        swaps=(SwapEvent(**header(5, 1, "SwapExactTokenToToken", "Swap"), token_in=DEBT, token_out=XT,
                         caller=CALLER, recipient=CALLER, token_in_amount=1_000_000,
                         token_out_amount=1_050_000, fee_amount=1_000),),
        deposits=(update(3, 1_500_000),),
        withdrawals=(update(4, -500_000, operation="Withdraw"),
                     WithdrawAssetsEvent(**header(6, 0, "WithdrawAssets", "Withdraw"), token=DEBT,
                                         owner=CALLER, recipient=CALLER, amount=250_000)),
        update_curves=(update(7, 0, operation="UpdateCurve"),),
        creations=(OrderInitializedEvent(**header(1, 0, "OrderInitialized", "Create"), market=MARKET,
                                         maker=MAKER, max_xt_reserve=3_000_000, swap_trigger=ZERO),),
    )
    timestamps = {block: BASE_TIMESTAMP + block * DAY for block in (1, 3, 4, 5, 6, 7)}
    return order_info, enrich_events(collection, order_info, timestamps)


class TestCsv:

    def test_rows(self, events):
        _, collection = events
        lines = render_csv(collection).splitlines()

        assert lines[0] == CSV_HEADER
        assert lines[1] == "2023-11-15,1,Create,CREATE,3.0,"
        assert lines[2] == "2023-11-17,3,Deposit,DEPOSIT,1.5,"
        assert lines[3] == "2023-11-18,4,Withdraw,WITHDRAW,0.5,"
        assert lines[4].startswith("2023-11-19,5,Swap,LEND,0.05,")
        assert lines[4].split(",")[5] != ""
        # WithdrawAssets and UpdateCurve rows carry no amount
        assert len(lines) == 5

    def test_idempotent(self, events, tmp_path):
        _, collection = events

        first = render_csv(collection)
        write_csv(tmp_path / "history.csv", collection)

        assert render_csv(collection) == first
        assert (tmp_path / "history.csv").read_text() == first

    def test_rows_without_date_are_skipped(self):
        collection = EventsCollection(deposits=(update(3, 1_500_000),))

        assert render_csv(collection) == CSV_HEADER + "\n"

    @pytest.mark.parametrize("rate,cell", [
        (0.05, "0.05"),
        (2.0, "2"),
        (123.456, "123.456"),
        (0.000001, "0.000001"),
        (1e-7, "1e-7"),
        (1.5e-7, "1.5e-7"),
        (0.00001234, "0.00001234"),
        (1e21, "1e+21"),
        (0.0, ""),
        (float("inf"), ""),
    ])
    def test_rate_cell_prints_like_javascript(self, rate, cell):
        swap = SwapEvent(**header(9, 0, "SwapExactTokenToToken", "Swap"), token_in=DEBT, token_out=XT,
                         caller=CALLER, recipient=CALLER, token_in_amount=1, token_out_amount=1,
                         fee_amount=0, date="2024-05-01T00:00:00.000Z", direction="LEND",
                         abstract_token_out_amount_formatted="1.0", avg_matched_interest_rate=rate)

        assert csv_row(swap) == f"2024-05-01,9,Swap,LEND,1.0,{cell}"


class TestJson:

    def test_document_shape(self, events):
        order_info, collection = events
        document = build_json_document(collection, order_info)

        assert set(document) == {"swaps", "deposits", "withdrawals", "updateCurves", "creations",
                                 "all", "orderInfo", "incomplete"}
        assert len(document["all"]) == 6
        assert [e["blockNumber"] for e in document["all"]] == [7, 6, 5, 4, 3, 1]
        assert document["incomplete"] is False

        swap = document["swaps"][0]
        assert swap["tokenInAmount"] == "1000000"
        assert swap["feeAmount"] == "1000"
        assert swap["direction"] == "LEND"
        assert swap["kind"] == "SwapEvent"
        assert "sortKey" not in swap
        assert document["deposits"][0]["ftChangeAmt"] == "1500000"
        assert document["orderInfo"]["marketInfo"]["tokens"]["debtToken"]["symbol"] == "USDC"

    def test_write_json(self, events, tmp_path):
        order_info, collection = events
        path = write_json(tmp_path / "out" / "history.json", collection, order_info)

        data = json.loads(path.read_text())

        assert data["orderInfo"]["ftReserve"] == "5000000"
        assert data["creations"][0]["maxXtReserveFormatted"] == "3.0"


class TestReport:

    def test_empty(self):
        assert render_history(EventsCollection()) == "No events found"

    def test_limit_and_notice(self, events):
        _, collection = events
        text = render_history(collection, limit=2)

        assert "--- Order History (showing 2 of 6 events) ---" in text
        assert "... and 4 more events" in text
        assert "Max XT Reserve: 2.0" in text

    def test_negative_limit_shows_nothing(self, events):
        _, collection = events
        text = render_history(collection, limit=-1)

        assert "--- Order History (showing 0 of 6 events) ---" in text
        assert "... and 6 more events" in text

    def test_detailed_view(self, events):
        _, collection = events
        text = render_history(collection, limit=20, detailed=True, detail_count=1)

        assert "--- Detailed Event View ---" in text
        assert "Event #1:" in text
        assert "Event #2:" not in text

    def test_incomplete_warning(self):
        collection = EventsCollection(deposits=(update(3, 1),), incomplete=True)

        assert "may be incomplete" in render_history(collection)

    def test_summary(self, events):
        order_info, collection = events
        text = render_summary(TrackingResult(order_info=order_info, events=collection))

        assert "Total Events: 6" in text
        assert "- Withdrawals: 2" in text
        assert "FT Reserve: 5.0 FT-USDC" in text
        assert "XT Reserve: 7.0 XT-USDC" in text
        assert "Market Maturity: " in text
