# termmax_tools/types/model/collection.py

from typing import Callable, Dict, List, Tuple

from msgspec import Struct

from .events import (
    Event,
    SwapEvent,
    UpdateOrderEvent,
    WithdrawAssetsEvent,
    OrderInitializedEvent,
)
from .errors import ProcessingError


CATEGORIES = ("swaps", "deposits", "withdrawals", "update_curves", "creations")


class EventsCollection(Struct, frozen=True):
    """
    Categorized order events.

    The merged views (`all`, `chronological()`) are projections over the
    categorized tuples, so enrichment only ever replaces categorized events.
    """
    swaps: Tuple[SwapEvent, ...] = ()
    deposits: Tuple[UpdateOrderEvent, ...] = ()
    withdrawals: Tuple[Event, ...] = ()  # UpdateOrderEvent or WithdrawAssetsEvent
    update_curves: Tuple[UpdateOrderEvent, ...] = ()
    creations: Tuple[OrderInitializedEvent, ...] = ()
    incomplete: bool = False
    errors: Tuple[ProcessingError, ...] = ()

    def _merged(self) -> List[Event]:
        merged: List[Event] = []
        for category in CATEGORIES:
            merged.extend(getattr(self, category))
        return merged

    @property
    def all(self) -> List[Event]:
        """Every event, newest block first and in log order within a block"""
        return sorted(self._merged(), key=lambda e: (-e.block_number, e.log_index))

    def chronological(self) -> List[Event]:
        return sorted(self._merged(), key=lambda e: (e.block_number, e.log_index))

    def counts(self) -> Dict[str, int]:
        counts = {category: len(getattr(self, category)) for category in CATEGORIES}
        counts["total"] = sum(counts.values())
        return counts

    def replace_events(self, mapper: Callable[[Event], Event]) -> "EventsCollection":
        return EventsCollection(
            swaps=tuple(mapper(e) for e in self.swaps),
            deposits=tuple(mapper(e) for e in self.deposits),
            withdrawals=tuple(mapper(e) for e in self.withdrawals),
            update_curves=tuple(mapper(e) for e in self.update_curves),
            creations=tuple(mapper(e) for e in self.creations),
            incomplete=self.incomplete,
            errors=self.errors,
        )
