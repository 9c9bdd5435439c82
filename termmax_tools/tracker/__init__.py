# termmax_tools/tracker/__init__.py

from .query import EVENT_KINDS, QueryResult, LedgerQueryEngine, block_windows
from .classifier import EventClassifier, classify_update_order
from .info import get_token_info, get_market_info, get_order_info
from .enricher import (
    resolve_block_timestamps,
    infer_swap_direction,
    annualized_rate,
    enrich_events,
)
from .tracker import OrderHistoryTracker, TrackingResult

__all__ = [
    'EVENT_KINDS',
    'QueryResult',
    'LedgerQueryEngine',
    'block_windows',
    'EventClassifier',
    'classify_update_order',
    'get_token_info',
    'get_market_info',
    'get_order_info',
    'resolve_block_timestamps',
    'infer_swap_direction',
    'annualized_rate',
    'enrich_events',
    'OrderHistoryTracker',
    'TrackingResult',
]
