# termmax_tools/tracker/enricher.py

import asyncio
from typing import Dict, Iterable, Optional, Tuple

import msgspec

from ..clients.interfaces import LedgerClientInterface
from ..core.logging import ToolsLogger, log_with_context, DEBUG, INFO
from ..types import (
    Direction,
    Event,
    EventsCollection,
    MarketTokens,
    OrderInfo,
    SwapEvent,
    UpdateOrderEvent,
    WithdrawAssetsEvent,
    OrderInitializedEvent,
    TokenBook,
    DAYS_PER_YEAR,
)
from ..utils.amounts import format_units, parse_decimal
from ..utils.convert_time import timestamp_to_iso, days_until


logger = ToolsLogger.get_logger('tracker.enricher')

# Which leg nets against the other for each meaningful (token in, token out) pairing
NET_INPUT = "net_input"
NET_OUTPUT = "net_output"

SWAP_ORDERINGS: Dict[Tuple[str, str], Tuple[Direction, str]] = {
    ("ft", "debt_token"): ("LEND", NET_INPUT),
    ("debt_token", "xt"): ("LEND", NET_OUTPUT),
    ("xt", "debt_token"): ("BORROW", NET_INPUT),
    ("debt_token", "ft"): ("BORROW", NET_OUTPUT),
}


async def resolve_block_timestamps(client: LedgerClientInterface, block_numbers: Iterable[int],
                                   batch_size: int = 50) -> Dict[int, int]:
    """Fetch timestamps for the distinct blocks, `batch_size` requests at a time"""
    distinct = list(dict.fromkeys(block_numbers))
    timestamps: Dict[int, int] = {}

    for start in range(0, len(distinct), batch_size):
        batch = distinct[start:start + batch_size]
        log_with_context(logger, DEBUG, "Fetching block timestamps",
                         from_block=batch[0], to_block=batch[-1], count=len(batch))

        blocks = await asyncio.gather(*(client.get_block(number) for number in batch))
        for number, block in zip(batch, blocks):
            if block:
                timestamps[int(block.get("number", number))] = int(block["timestamp"])

    log_with_context(logger, INFO, "Block timestamps resolved",
                     requested=len(distinct), resolved=len(timestamps))
    return timestamps


def _token_role(address: str, tokens: Optional[MarketTokens]) -> Optional[str]:
    if tokens is None or not address:
        return None
    address = address.lower()
    for role in ("ft", "xt", "debt_token"):
        role_address = getattr(tokens, role).address
        if role_address and role_address.lower() == address:
            return role
    return None


def infer_swap_direction(token_in: str, token_out: str, tokens: Optional[MarketTokens]) -> Direction:
    ordering = SWAP_ORDERINGS.get((_token_role(token_in, tokens), _token_role(token_out, tokens)))
    return ordering[0] if ordering else "OTHER"


def annualized_rate(direction: Direction, abstract_in: Optional[str], abstract_out: Optional[str],
                    days_to_maturity: Optional[int]) -> Optional[float]:
    """LEND: in/out, BORROW: out/in, scaled by 365/days; unset near or past maturity"""
    if not days_to_maturity or days_to_maturity <= 0:
        return None

    amount_in = parse_decimal(abstract_in)
    amount_out = parse_decimal(abstract_out)
    if amount_in is None or amount_out is None:
        return None

    numerator, denominator = (amount_in, amount_out) if direction == "LEND" else (amount_out, amount_in)
    if denominator == 0:
        return None
    return (numerator / denominator) * (DAYS_PER_YEAR / days_to_maturity)


class _Enrichment:
    def __init__(self, order_info: Optional[OrderInfo], timestamps: Dict[int, int]):
        self.tokens = order_info.tokens if order_info else None
        self.maturity = order_info.maturity if order_info else None
        self.book = TokenBook(self.tokens)
        self.timestamps = timestamps

        self.debt_decimals = self.book.decimals_of("debt_token")
        self.ft_decimals = self.book.decimals_of("ft")
        self.xt_decimals = self.book.decimals_of("xt")

    def __call__(self, event: Event) -> Event:
        timestamp = self.timestamps.get(event.block_number)
        if timestamp is not None:
            event = event.with_timestamp(timestamp, timestamp_to_iso(timestamp))

        if isinstance(event, SwapEvent):
            return self.swap(event)
        if isinstance(event, UpdateOrderEvent):
            return msgspec.structs.replace(
                event,
                ft_change_amt_formatted=format_units(event.ft_change_amt, self.ft_decimals),
                xt_change_amt_formatted=format_units(event.xt_change_amt, self.xt_decimals),
                max_xt_reserve_formatted=format_units(event.max_xt_reserve, self.xt_decimals),
            )
        if isinstance(event, WithdrawAssetsEvent):
            return msgspec.structs.replace(
                event,
                token_symbol=self.book.symbol(event.token),
                amount_formatted=format_units(event.amount, self.book.decimals(event.token)),
            )
        if isinstance(event, OrderInitializedEvent):
            return msgspec.structs.replace(
                event,
                max_xt_reserve_formatted=format_units(event.max_xt_reserve, self.xt_decimals),
            )
        return event

    def swap(self, event: SwapEvent) -> SwapEvent:
        in_formatted = format_units(event.token_in_amount, self.book.decimals(event.token_in))
        out_formatted = format_units(event.token_out_amount, self.book.decimals(event.token_out))
        days = days_until(self.maturity, event.timestamp)

        fields = dict(
            token_in_symbol=self.book.symbol(event.token_in),
            token_out_symbol=self.book.symbol(event.token_out),
            token_in_amount_formatted=in_formatted,
            token_out_amount_formatted=out_formatted,
            fee_amount_formatted=format_units(event.fee_amount, self.debt_decimals),
            days_to_maturity=days,
        )

        ordering = SWAP_ORDERINGS.get((_token_role(event.token_in, self.tokens),
                                       _token_role(event.token_out, self.tokens)))
        if ordering is None:
            return msgspec.structs.replace(event, direction="OTHER", **fields)

        direction, netting = ordering
        if netting == NET_INPUT:
            abstract_in = format_units(event.token_in_amount - event.token_out_amount, self.debt_decimals)
            abstract_out = out_formatted
        else:
            abstract_in = in_formatted
            abstract_out = format_units(event.token_out_amount - event.token_in_amount, self.debt_decimals)

        if direction == "LEND":
            in_symbol, out_symbol = self.book.symbol_of("ft"), self.book.symbol_of("xt")
        else:
            in_symbol, out_symbol = self.book.symbol_of("xt"), self.book.symbol_of("ft")

        return msgspec.structs.replace(
            event,
            direction=direction,
            abstract_token_in_symbol=in_symbol,
            abstract_token_out_symbol=out_symbol,
            abstract_token_in_amount_formatted=abstract_in,
            abstract_token_out_amount_formatted=abstract_out,
            avg_matched_interest_rate=annualized_rate(direction, abstract_in, abstract_out, days),
            **fields,
        )


def enrich_events(collection: EventsCollection, order_info: Optional[OrderInfo],
                  timestamps: Dict[int, int]) -> EventsCollection:
    """Return a new collection whose events carry timestamps, formatted amounts and swap economics"""
    enriched = collection.replace_events(_Enrichment(order_info, timestamps))
    log_with_context(logger, DEBUG, "Events enriched",
                     total=enriched.counts()["total"], timestamps=len(timestamps))
    return enriched
