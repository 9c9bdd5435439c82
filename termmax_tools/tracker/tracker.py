# termmax_tools/tracker/tracker.py

from typing import Any, Dict, List, Optional

from msgspec import Struct, structs

from ..clients.interfaces import LedgerClientInterface
from ..contracts import ABILoader
from ..core.logging import LoggingMixin
from ..types import EventsCollection, OrderInfo, TrackerSettings, create_rpc_error
from .classifier import EventClassifier
from .enricher import enrich_events, resolve_block_timestamps
from .info import get_order_info
from .query import LedgerQueryEngine


class TrackingResult(Struct, frozen=True):
    order_info: OrderInfo
    events: EventsCollection


class OrderHistoryTracker(LoggingMixin):
    """
    Rebuilds the event history of one order: order snapshot, batched log
    collection, classification, then enrichment with timestamps and token data.
    """

    def __init__(self, client: LedgerClientInterface, settings: Optional[TrackerSettings] = None,
                 order_abi: Optional[List[Dict[str, Any]]] = None):
        self.client = client
        self.settings = settings or TrackerSettings()
        self.order_abi = order_abi or ABILoader().require_abi("TermMaxOrder")

        self.query_engine = LedgerQueryEngine(client, self.order_abi, self.settings.log_batch_size)
        self.classifier = EventClassifier()

    async def run(self, order_address: str, start_block: int = 0,
                  end_block: Optional[int] = None) -> TrackingResult:
        order_info = await get_order_info(self.client, order_address)
        if order_info.error:
            self.log_warning("Continuing without order details",
                             order_address=order_address, error=order_info.error)

        query_result = await self.query_engine.collect(order_address, start_block, end_block)
        events = self.classifier.classify(query_result)
        if order_info.error:
            rpc_error = create_rpc_error("OrderInfoUnavailable", order_info.error, contract_address=order_address)
            events = structs.replace(events, errors=events.errors + (rpc_error,))

        block_numbers = [event.block_number for event in events.chronological()]
        self.log_info("Enriching events",
                      order_address=order_address, total=len(block_numbers))
        timestamps = await resolve_block_timestamps(
            self.client, block_numbers, self.settings.timestamp_batch_size
        )
        events = enrich_events(events, order_info, timestamps)

        if events.incomplete:
            self.log_warning("Event history may be incomplete",
                             order_address=order_address, errors=len(events.errors))

        return TrackingResult(order_info=order_info, events=events)
