# termmax_tools/export/csv_export.py

import math
from decimal import Decimal
from pathlib import Path
from typing import Optional

from ..types import Event, EventsCollection, SwapEvent, UpdateOrderEvent, OrderInitializedEvent


CSV_HEADER = "Date,Block,Operation,Direction,Amount,InterestRate"


def _number(value: float) -> str:
    """
    Shortest round-trip text of a float, laid out the way JavaScript prints
    numbers: plain decimals for magnitudes in [1e-6, 1e21), otherwise
    exponent form such as `1.5e-7` or `1e+21`.
    """
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(map(str, digits))
    point = len(digits) + exponent

    if len(digits) <= point <= 21:
        text = digits + "0" * (point - len(digits))
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
        text = f"{mantissa}e{'+' if point > 0 else '-'}{abs(point - 1)}"

    return f"-{text}" if sign else text


def _rate_cell(event: Event) -> str:
    rate = event.avg_matched_interest_rate if isinstance(event, SwapEvent) else None
    if not rate or not math.isfinite(rate):
        return ""
    return _number(rate)


def csv_row(event: Event) -> Optional[str]:
    """
    One CSV line, or None when the event has no date or no amount applies.

    LEND swaps report the abstract output, BORROW swaps the abstract input,
    reserve updates the unsigned FT change and creations the reserve cap.
    """
    if not event.date:
        return None

    operation = event.operation_type or "Unknown"
    direction = (event.direction if isinstance(event, SwapEvent) else None) or "N/A"
    amount: Optional[str] = None

    if direction == "LEND":
        amount = event.abstract_token_out_amount_formatted or "0"
    elif direction == "BORROW":
        amount = event.abstract_token_in_amount_formatted or "0"
    elif operation == "Deposit" and isinstance(event, UpdateOrderEvent) and event.ft_change_amt_formatted:
        direction = "DEPOSIT"
        amount = event.ft_change_amt_formatted.replace("-", "", 1) or "0"
    elif operation == "Withdraw" and isinstance(event, UpdateOrderEvent) and event.ft_change_amt_formatted:
        direction = "WITHDRAW"
        amount = event.ft_change_amt_formatted.replace("-", "", 1) or "0"
    elif operation == "Create" and isinstance(event, OrderInitializedEvent):
        direction = "CREATE"
        amount = event.max_xt_reserve_formatted or "0"

    if not amount:
        return None

    return f"{event.date[:10]},{event.block_number},{operation},{direction},{amount},{_rate_cell(event)}"


def render_csv(events: EventsCollection) -> str:
    lines = [CSV_HEADER]
    for event in events.chronological():
        row = csv_row(event)
        if row is not None:
            lines.append(row)
    return "\n".join(lines) + "\n"


def write_csv(path: Path, events: EventsCollection) -> Path:
    path = Path(path)
    path.write_text(render_csv(events))
    return path
