# termmax_tools/tracker/query.py

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Tuple

from msgspec import Struct

from ..clients.interfaces import LedgerClientInterface
from ..contracts import event_abis, extract_event_topics
from ..decode.log_decoder import LogDecoder
from ..core.logging import LoggingMixin
from ..types import RawEventLog, ProcessingError, create_query_error, create_decode_error


EVENT_KINDS = (
    "SwapExactTokenToToken",
    "SwapTokenToExactToken",
    "UpdateOrder",
    "WithdrawAssets",
    "OrderInitialized",
)

DEFAULT_BATCH_SIZE = 10_000


def block_windows(start: int, end: int, width: int = DEFAULT_BATCH_SIZE) -> List[Tuple[int, int]]:
    """Consecutive inclusive windows covering [start, end], each at most `width` blocks"""
    if width < 1:
        raise ValueError(f"Batch width must be positive, got {width}")
    if start < 0:
        raise ValueError(f"Start block must be non-negative, got {start}")

    windows = []
    from_block = start
    while from_block <= end:
        to_block = min(from_block + width - 1, end)
        windows.append((from_block, to_block))
        from_block += width
    return windows


class QueryResult(Struct, frozen=True):
    logs_by_kind: Dict[str, Tuple[RawEventLog, ...]]
    windows: Tuple[Tuple[int, int], ...]
    end_block: Optional[int]
    incomplete: bool = False
    errors: Tuple[ProcessingError, ...] = ()

    def total(self) -> int:
        return sum(len(logs) for logs in self.logs_by_kind.values())


class LedgerQueryEngine(LoggingMixin):
    """
    Batched log retrieval for the order event kinds.

    Windows are fetched one after another; within a window the five kinds are
    requested together and consumed only once all of them have answered.
    Any failure stops the scan, keeps what was gathered and flags the result
    as incomplete.
    """

    def __init__(self, client: LedgerClientInterface, abi: List[Dict[str, Any]],
                 batch_size: int = DEFAULT_BATCH_SIZE):
        self.client = client
        self.batch_size = batch_size

        topics = extract_event_topics(abi)
        missing = [kind for kind in EVENT_KINDS if kind not in topics]
        if missing:
            raise ValueError(f"ABI is missing order events: {', '.join(missing)}")

        self.topics = {kind: topics[kind] for kind in EVENT_KINDS}
        self.decoder = LogDecoder(event_abis(abi))

    async def collect(self, order_address: str, start_block: int = 0,
                      end_block: Optional[int] = None) -> QueryResult:
        if start_block < 0:
            raise ValueError(f"Start block must be non-negative, got {start_block}")

        logs_by_kind: Dict[str, List[RawEventLog]] = {kind: [] for kind in EVENT_KINDS}
        errors: List[ProcessingError] = []
        completed: List[Tuple[int, int]] = []
        incomplete = False
        current_window: Optional[Tuple[int, int]] = None

        self.log_info("Collecting order events",
                      order_address=order_address,
                      from_block=start_block,
                      to_block=end_block if end_block is not None else "latest")

        try:
            if end_block is None:
                end_block = await self.client.get_block_number()
                self.log_info("Using current block as end block", block_number=end_block)

            for current_window in block_windows(start_block, end_block, self.batch_size):
                from_block, to_block = current_window
                batch = await self._query_window(order_address, from_block, to_block)

                for kind, raw_logs in zip(EVENT_KINDS, batch):
                    logs_by_kind[kind].extend(self._decode_batch(kind, raw_logs, errors))
                completed.append(current_window)

                self.log_debug("Window collected",
                               order_address=order_address,
                               from_block=from_block,
                               to_block=to_block,
                               counts={kind: len(logs) for kind, logs in zip(EVENT_KINDS, batch)})

        except Exception as e:
            incomplete = True
            from_block, to_block = current_window if current_window else (start_block, end_block)
            errors.append(create_query_error(
                "query_failed",
                f"{type(e).__name__}: {e}",
                contract_address=order_address,
                from_block=from_block,
                to_block=to_block,
            ))
            self.log_error("Error collecting events, keeping partial results",
                           order_address=order_address,
                           from_block=from_block,
                           to_block=to_block,
                           error=str(e))

        result = QueryResult(
            logs_by_kind={kind: tuple(logs) for kind, logs in logs_by_kind.items()},
            windows=tuple(completed),
            end_block=end_block,
            incomplete=incomplete,
            errors=tuple(errors),
        )

        self.log_info("Event collection finished",
                      order_address=order_address,
                      total=result.total(),
                      windows=len(completed),
                      incomplete=incomplete)
        return result

    async def _query_window(self, order_address: str, from_block: int,
                            to_block: int) -> List[List[Mapping[str, Any]]]:
        responses = await asyncio.gather(
            *(self.client.get_logs(order_address, [self.topics[kind]], from_block, to_block)
              for kind in EVENT_KINDS),
            return_exceptions=True,
        )
        for response in responses:
            if isinstance(response, BaseException):
                raise response
        return responses

    def _decode_batch(self, kind: str, raw_logs: List[Mapping[str, Any]],
                      errors: List[ProcessingError]) -> List[RawEventLog]:
        decoded = []
        for raw_log in raw_logs:
            event_log = self.decoder.decode(kind, raw_log)
            if event_log is None:
                errors.append(create_decode_error(
                    "decode_failed",
                    f"Could not decode {kind} log",
                    log_index=_as_int(raw_log.get("logIndex")),
                    contract_address=str(raw_log.get("address") or ""),
                ))
                continue
            decoded.append(event_log)
        return decoded


def _as_int(value) -> Optional[int]:
    return value if isinstance(value, int) else None
