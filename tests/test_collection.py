"""Tests for EventsCollection ordering and mapping."""

from termmax_tools.types import EventsCollection, OrderInitializedEvent, UpdateOrderEvent

from conftest import MAKER, MARKET, ZERO


def update(block: int, log_index: int, ft: int = 1) -> UpdateOrderEvent:
    return UpdateOrderEvent(
        event_type="UpdateOrder",
        operation_type="Deposit",
        block_number=block,
        transaction_hash=f"0x{block:064x}",
        log_index=log_index,
        ft_change_amt=ft,
        xt_change_amt=0,
        gt_id=0,
        max_xt_reserve=0,
        swap_trigger=ZERO,
    )


class TestOrdering:

    def test_all_is_block_desc_log_asc(self):
        events = EventsCollection(deposits=(update(10, 2), update(12, 0), update(10, 0)))

        assert [e.position for e in events.all] == [(12, 0), (10, 0), (10, 2)]

    def test_chronological(self):
        events = EventsCollection(deposits=(update(10, 2), update(12, 0), update(10, 0)))

        assert [e.position for e in events.chronological()] == [(10, 0), (10, 2), (12, 0)]

    def test_sort_key_is_zero_padded(self):
        assert update(123, 4).sort_key == "0000000123-00004"


class TestMapping:

    def test_replace_events_keeps_categories_and_flags(self):
        creation = OrderInitializedEvent(
            event_type="OrderInitialized", operation_type="Create", block_number=1,
            transaction_hash="0x01", log_index=0, market=MARKET, maker=MAKER,
            max_xt_reserve=5, swap_trigger=ZERO,
        )
        events = EventsCollection(deposits=(update(2, 0),), creations=(creation,), incomplete=True)

        mapped = events.replace_events(lambda e: e.with_timestamp(1_700_000_000, "2023-11-14T22:13:20.000Z"))

        assert mapped.incomplete
        assert mapped.counts() == {"swaps": 0, "deposits": 1, "withdrawals": 0, "update_curves": 0,
                                   "creations": 1, "total": 2}
        assert all(e.date == "2023-11-14T22:13:20.000Z" for e in mapped.all)
        assert events.deposits[0].date is None
