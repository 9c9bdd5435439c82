# termmax_tools/export/report.py

from typing import List, Sequence

from ..types import (
    Event,
    EventsCollection,
    SwapEvent,
    UpdateOrderEvent,
    WithdrawAssetsEvent,
    OrderInitializedEvent,
    TokenBook,
)
from ..utils.amounts import format_units


DETAIL_COUNT = 5

TABLE_HEADER = "Date       | Block   | Type       | Operation | Details"
TABLE_RULE = "-----------+---------+------------+-----------+------------------------------------"


def _unsigned(value) -> str:
    return (value or "").replace("-", "", 1)


def describe_event(event: Event) -> str:
    """One-line detail text for the history table"""
    operation = event.operation_type

    if operation == "Swap" and isinstance(event, SwapEvent):
        return (f"{event.direction or ''}: "
                f"{event.abstract_token_in_amount_formatted} {event.abstract_token_in_symbol} → "
                f"{event.abstract_token_out_amount_formatted} {event.abstract_token_out_symbol}")

    if operation == "Deposit" and isinstance(event, UpdateOrderEvent):
        parts = []
        if event.ft_change_amt > 0:
            parts.append(f"{event.ft_change_amt_formatted} FT")
        if event.xt_change_amt > 0:
            parts.append(f"{event.xt_change_amt_formatted} XT")
        return f"Add: {' and '.join(parts)}"

    if operation == "Withdraw":
        if isinstance(event, WithdrawAssetsEvent):
            return f"Remove: {event.amount_formatted} {event.token_symbol}"
        parts = []
        if event.ft_change_amt < 0:
            parts.append(f"{_unsigned(event.ft_change_amt_formatted)} FT")
        if event.xt_change_amt < 0:
            parts.append(f"{_unsigned(event.xt_change_amt_formatted)} XT")
        return f"Remove: {' and '.join(parts)}"

    if operation == "UpdateCurve" and isinstance(event, UpdateOrderEvent):
        return f"Max XT Reserve: {event.max_xt_reserve_formatted}"

    if operation == "Create" and isinstance(event, OrderInitializedEvent):
        return (f"Order Created, Max XT Reserve: {event.max_xt_reserve_formatted}, "
                f"Maker: {event.maker[:10]}...")

    return event.event_type


def format_row(event: Event) -> str:
    date = event.date[:10] if event.date else "Unknown"
    return (f"{date} | {event.block_number} | {(event.event_type or 'Unknown').ljust(12)} | "
            f"{(event.operation_type or 'Unknown').ljust(11)} | {describe_event(event)}")


def event_details(index: int, event: Event) -> List[str]:
    lines = [
        "",
        f"Event #{index}:",
        f"Hash: {event.transaction_hash}",
        f"Block: {event.block_number} | Log Index: {event.log_index}",
        f"Type: {event.event_type}",
        f"Operation: {event.operation_type}",
        f"Date: {event.date or 'Unknown'}",
    ]

    if isinstance(event, SwapEvent):
        lines += [
            f"Direction: {event.direction}",
            f"Token In: {event.token_in_amount_formatted} {event.token_in_symbol} ({event.token_in})",
            f"Token Out: {event.token_out_amount_formatted} {event.token_out_symbol} ({event.token_out})",
            f"Fee: {event.fee_amount_formatted}",
            f"Caller: {event.caller}",
            f"Recipient: {event.recipient}",
        ]
    elif isinstance(event, UpdateOrderEvent):
        lines += [
            f"FT Change: {event.ft_change_amt_formatted}",
            f"XT Change: {event.xt_change_amt_formatted}",
            f"Max XT Reserve: {event.max_xt_reserve_formatted}",
            f"GT ID: {event.gt_id}",
            f"Swap Trigger: {event.swap_trigger}",
        ]
    elif isinstance(event, WithdrawAssetsEvent):
        lines += [
            f"Token: {event.token_symbol} ({event.token})",
            f"Amount: {event.amount_formatted}",
            f"Owner: {event.owner}",
            f"Recipient: {event.recipient}",
        ]
    elif isinstance(event, OrderInitializedEvent):
        lines += [
            f"Market: {event.market}",
            f"Maker: {event.maker}",
            f"Max XT Reserve: {event.max_xt_reserve_formatted}",
            f"Swap Trigger: {event.swap_trigger}",
        ]
    return lines


def render_history(events: EventsCollection, limit: int = 20, detailed: bool = False,
                   detail_count: int = DETAIL_COUNT) -> str:
    all_events: Sequence[Event] = events.all
    if not all_events:
        return "No events found"

    shown = all_events[:max(limit, 0)]
    lines = [
        "",
        f"--- Order History (showing {len(shown)} of {len(all_events)} events) ---",
        TABLE_HEADER,
        TABLE_RULE,
    ]
    lines += [format_row(event) for event in shown]

    if detailed and shown:
        lines += ["", "--- Detailed Event View ---"]
        for index, event in enumerate(shown[:detail_count], start=1):
            lines += event_details(index, event)

    hidden = len(all_events) - len(shown)
    if hidden:
        lines += ["", f"... and {hidden} more events"]

    if events.incomplete:
        lines += ["", f"Warning: history may be incomplete ({len(events.errors)} error(s) during collection)"]

    return "\n".join(lines)


def render_summary(tracking_result) -> str:
    events = tracking_result.events
    order_info = tracking_result.order_info
    counts = events.counts()

    lines = [
        "",
        "--- Order Summary ---",
        f"Total Events: {counts['total']}",
        f"- Swaps: {counts['swaps']}",
        f"- Deposits: {counts['deposits']}",
        f"- Withdrawals: {counts['withdrawals']}",
        f"- Curve Updates: {counts['update_curves']}",
        f"- Creations: {counts['creations']}",
    ]

    market_info = order_info.market_info
    if market_info is not None:
        tokens = market_info.tokens
        book = TokenBook(tokens)
        ft_symbol = tokens.ft.symbol if tokens else "FT"
        xt_symbol = tokens.xt.symbol if tokens else "XT"

        lines += [
            "",
            "--- Current Reserves ---",
            f"FT Reserve: {format_units(order_info.ft_reserve, book.decimals_of('ft'))} {ft_symbol}",
            f"XT Reserve: {format_units(order_info.xt_reserve, book.decimals_of('xt'))} {xt_symbol}",
        ]

        if market_info.config is not None:
            lines += ["", f"Market Maturity: {market_info.config.maturity_date}"]

    return "\n".join(lines)
