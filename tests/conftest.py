"""Shared fixtures: an in-memory ledger serving ABI-encoded order logs."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import eth_abi
import pytest
from eth_utils import keccak
from hexbytes import HexBytes

from termmax_tools.clients.interfaces import LedgerClientInterface
from termmax_tools.contracts import ABILoader, build_type_string, event_abis, event_topic
from termmax_tools.core.logging import ROOT_LOGGER_NAME, ToolsLogger


ORDER = "0x1000000000000000000000000000000000000001"
MARKET = "0x2000000000000000000000000000000000000002"
FT = "0x3000000000000000000000000000000000000003"
XT = "0x4000000000000000000000000000000000000004"
GT = "0x5000000000000000000000000000000000000005"
COLLATERAL = "0x6000000000000000000000000000000000000006"
DEBT = "0x7000000000000000000000000000000000000007"
MAKER = "0x8000000000000000000000000000000000000008"
CALLER = "0x9000000000000000000000000000000000000009"
TREASURER = "0x1100000000000000000000000000000000000011"
ZERO = "0x0000000000000000000000000000000000000000"

DAY = 86_400
BASE_TIMESTAMP = 1_700_000_000
MATURITY = BASE_TIMESTAMP + 30 * DAY

ORDER_ABI = ABILoader().require_abi("TermMaxOrder")
ORDER_EVENTS = event_abis(ORDER_ABI)


def _default(param: Dict[str, Any]):
    param_type = param["type"]
    if param_type.endswith("]"):
        return []
    if param_type == "tuple":
        return tuple(_default(c) for c in param["components"])
    if param_type == "address":
        return ZERO
    if param_type == "bool":
        return False
    if param_type.startswith("bytes"):
        return b"" if param_type == "bytes" else b"\x00" * int(param_type[5:])
    if param_type == "string":
        return ""
    return 0


def make_log(event_name: str, block_number: int, log_index: int = 0, address: str = ORDER,
             tx_hash: Optional[bytes] = None, **args) -> Dict[str, Any]:
    """Build a raw log for one order event, encoding `args` the way the contract emits them"""
    entry = ORDER_EVENTS[event_name]
    values = {p["name"]: args.get(p["name"], _default(p)) for p in entry["inputs"]}

    topics = [HexBytes(event_topic(entry))]
    for param in entry["inputs"]:
        if param.get("indexed"):
            topics.append(HexBytes(eth_abi.encode([param["type"]], [values[param["name"]]])))

    data_params = [p for p in entry["inputs"] if not p.get("indexed")]
    data = eth_abi.encode([build_type_string(p, canonical=True) for p in data_params],
                          [values[p["name"]] for p in data_params])

    return {
        "address": address,
        "topics": topics,
        "data": HexBytes(data),
        "blockNumber": block_number,
        "logIndex": log_index,
        "transactionIndex": 0,
        "transactionHash": HexBytes(tx_hash or keccak(text=f"{block_number}-{log_index}")),
        "blockHash": HexBytes(keccak(text=f"block-{block_number}")),
    }


class FakeLedgerClient(LedgerClientInterface):
    """
    In-memory ledger.

    Serves logs filtered by address, topic0 and block range, block headers from
    a timestamp map and view calls from a (address, function) map. Records every
    log query and the peak number of log queries in flight at once.
    """

    def __init__(self, logs: Optional[List[Dict[str, Any]]] = None,
                 timestamps: Optional[Dict[int, int]] = None,
                 calls: Optional[Dict[Tuple[str, str], Any]] = None,
                 head: int = 0,
                 fail_from_block: Optional[int] = None):
        self.logs = list(logs or [])
        self.timestamps = dict(timestamps or {})
        self.calls = {(address.lower(), name): value for (address, name), value in (calls or {}).items()}
        self.head = head
        self.fail_from_block = fail_from_block

        self.log_queries: List[Tuple[int, int, str]] = []
        self.block_requests: List[int] = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self.closed = False

    @property
    def windows(self) -> List[Tuple[int, int]]:
        return list(dict.fromkeys((from_block, to_block) for from_block, to_block, _ in self.log_queries))

    async def get_block_number(self) -> int:
        return self.head

    async def get_logs(self, address, topics, from_block, to_block):
        self.log_queries.append((from_block, to_block, topics[0]))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.fail_from_block is not None and from_block >= self.fail_from_block:
                raise ConnectionError(f"getLogs failed for {from_block}-{to_block}")
        finally:
            self.in_flight -= 1

        topic0 = HexBytes(topics[0])
        return [
            log for log in self.logs
            if log["address"].lower() == address.lower()
            and log["topics"][0] == topic0
            and from_block <= log["blockNumber"] <= to_block
        ]

    async def get_block(self, block_number):
        self.block_requests.append(block_number)
        timestamp = self.timestamps.get(block_number)
        if timestamp is None:
            return None
        return {"number": block_number, "timestamp": timestamp}

    async def call(self, address, abi, function_name, *args):
        key = (address.lower(), function_name)
        if key not in self.calls:
            raise ValueError(f"execution reverted: {function_name}")
        value = self.calls[key]
        if isinstance(value, Exception):
            raise value
        return value

    async def close(self) -> None:
        self.closed = True


def token_calls(address: str, name: str, symbol: str, decimals: int) -> Dict[Tuple[str, str], Any]:
    return {(address, "name"): name, (address, "symbol"): symbol, (address, "decimals"): decimals}


def market_calls(ft_decimals: int = 6, xt_decimals: int = 6, debt_decimals: int = 6,
                 maturity: int = MATURITY) -> Dict[Tuple[str, str], Any]:
    calls = {
        (ORDER, "market"): MARKET,
        (ORDER, "maker"): MAKER,
        (ORDER, "tokenReserves"): (5_000_000, 7_000_000),
        (ORDER, "orderConfig"): (((), ()), 3, 9_000_000, ZERO, (0, 0, 0)),
        (MARKET, "tokens"): (FT, XT, GT, COLLATERAL, DEBT),
        (MARKET, "config"): (TREASURER, maturity, (0, 0, 0, 0, 0, 0)),
    }
    calls.update(token_calls(FT, "TermMax FT", "FT-USDC", ft_decimals))
    calls.update(token_calls(XT, "TermMax XT", "XT-USDC", xt_decimals))
    calls.update(token_calls(COLLATERAL, "Wrapped Ether", "WETH", 18))
    calls.update(token_calls(DEBT, "USD Coin", "USDC", debt_decimals))
    return calls


@pytest.fixture
def order_abi():
    return ORDER_ABI


@pytest.fixture
def ledger():
    """Ledger with a resolvable order, market and tokens, and no logs"""
    return FakeLedgerClient(calls=market_calls(), head=100)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger(ROOT_LOGGER_NAME).handlers.clear()
    ToolsLogger.reset()
