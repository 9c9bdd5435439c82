# termmax_tools/types/evm.py

from typing import Any, Dict

from msgspec import Struct

from .new import EvmAddress, EvmHash


class RawEventLog(Struct, frozen=True):
    """A ledger log decoded against one event descriptor"""
    event: str
    address: EvmAddress
    block_number: int
    transaction_hash: EvmHash
    log_index: int
    args: Dict[str, Any]
