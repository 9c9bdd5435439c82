# termmax_tools/types/model/events.py

from typing import Literal, Optional, Union, Tuple

import msgspec
from msgspec import Struct

from ..new import EvmAddress, EvmHash, DateTimeStr


OperationType = Literal["Swap", "Deposit", "Withdraw", "UpdateCurve", "Create"]
Direction = Literal["LEND", "BORROW", "OTHER"]


class OrderEvent(Struct, frozen=True, kw_only=True, rename="camel", omit_defaults=True, tag_field="kind"):
    """Common ledger position and classification shared by every order event"""
    event_type: str
    operation_type: OperationType
    block_number: int
    transaction_hash: EvmHash
    log_index: int
    timestamp: Optional[int] = None
    date: Optional[DateTimeStr] = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.block_number, self.log_index)

    @property
    def sort_key(self) -> str:
        return f"{self.block_number:010d}-{self.log_index:05d}"

    def with_timestamp(self, timestamp: int, date: DateTimeStr):
        return msgspec.structs.replace(self, timestamp=timestamp, date=date)


class SwapEvent(OrderEvent, tag=True):
    token_in: EvmAddress
    token_out: EvmAddress
    caller: EvmAddress
    recipient: EvmAddress
    token_in_amount: int
    token_out_amount: int
    fee_amount: int
    days_to_maturity: Optional[int] = None
    token_in_symbol: Optional[str] = None
    token_out_symbol: Optional[str] = None
    token_in_amount_formatted: Optional[str] = None
    token_out_amount_formatted: Optional[str] = None
    fee_amount_formatted: Optional[str] = None
    direction: Optional[Direction] = None
    abstract_token_in_symbol: Optional[str] = None
    abstract_token_out_symbol: Optional[str] = None
    abstract_token_in_amount_formatted: Optional[str] = None
    abstract_token_out_amount_formatted: Optional[str] = None
    avg_matched_interest_rate: Optional[float] = None


class UpdateOrderEvent(OrderEvent, tag=True):
    ft_change_amt: int
    xt_change_amt: int
    gt_id: int
    max_xt_reserve: int
    swap_trigger: EvmAddress
    ft_change_amt_formatted: Optional[str] = None
    xt_change_amt_formatted: Optional[str] = None
    max_xt_reserve_formatted: Optional[str] = None


class WithdrawAssetsEvent(OrderEvent, tag=True):
    token: EvmAddress
    owner: EvmAddress
    recipient: EvmAddress
    amount: int
    token_symbol: Optional[str] = None
    amount_formatted: Optional[str] = None


class OrderInitializedEvent(OrderEvent, tag=True):
    market: EvmAddress
    maker: EvmAddress
    max_xt_reserve: int
    swap_trigger: EvmAddress
    max_xt_reserve_formatted: Optional[str] = None


Event = Union[SwapEvent, UpdateOrderEvent, WithdrawAssetsEvent, OrderInitializedEvent]

# Raw integer fields, rendered as strings in exported documents
BIG_INTEGER_FIELDS = (
    "tokenInAmount", "tokenOutAmount", "feeAmount", "amount",
    "ftChangeAmt", "xtChangeAmt", "maxXtReserve", "gtId",
)
