# termmax_tools/utils/amounts.py
"""
Utility functions for handling raw integer amounts from the ledger
"""

from typing import Union, Optional


def amount_to_int(amount: Union[str, int, None]) -> int:
    """Convert amount to int with robust type handling"""
    if amount is None:
        return 0
    if isinstance(amount, str):
        if amount.strip() == "":
            return 0
        return int(amount)
    return int(amount)


def format_units(amount: Union[str, int, None], decimals: int = 18) -> str:
    """
    Render a raw integer amount as a decimal string.

    Follows the ledger-library convention: at least one fractional digit,
    trailing zeros trimmed, sign preserved, and no fraction at all for
    zero-decimal tokens.

        format_units(1000, 6)    -> "0.001"
        format_units(10**6, 6)   -> "1.0"
        format_units(-100, 6)    -> "-0.0001"
    """
    value = amount_to_int(amount)
    if decimals <= 0:
        return str(value)

    negative = value < 0
    whole, fraction = divmod(abs(value), 10 ** decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"

    result = f"{whole}.{fraction_str}"
    return f"-{result}" if negative else result


def parse_decimal(value: Optional[str]) -> Optional[float]:
    """Parse a formatted amount; None when it is missing or not numeric"""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
