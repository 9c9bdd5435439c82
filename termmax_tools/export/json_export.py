# termmax_tools/export/json_export.py

from pathlib import Path
from typing import Any, Dict, Optional

import msgspec

from ..types import Event, EventsCollection, OrderInfo, BIG_INTEGER_FIELDS


def event_to_json(event: Event) -> Dict[str, Any]:
    """camelCase mapping of one event with raw integers as decimal strings"""
    data = msgspec.to_builtins(event)
    for field in BIG_INTEGER_FIELDS:
        if isinstance(data.get(field), int):
            data[field] = str(data[field])
    return data


def order_info_to_json(order_info: Optional[OrderInfo]) -> Dict[str, Any]:
    if order_info is None:
        return {}
    data = msgspec.to_builtins(order_info)
    market_info = data.get("marketInfo")
    if market_info is not None:
        market_info["tokens"] = {
            key: dict(value) for key, value in (market_info.get("tokens") or {}).items()
        }
    return data


def build_json_document(events: EventsCollection, order_info: Optional[OrderInfo]) -> Dict[str, Any]:
    return {
        "swaps": [event_to_json(e) for e in events.swaps],
        "deposits": [event_to_json(e) for e in events.deposits],
        "withdrawals": [event_to_json(e) for e in events.withdrawals],
        "updateCurves": [event_to_json(e) for e in events.update_curves],
        "creations": [event_to_json(e) for e in events.creations],
        "all": [event_to_json(e) for e in events.all],
        "orderInfo": order_info_to_json(order_info),
        "incomplete": events.incomplete,
    }


def write_json(path: Path, events: EventsCollection, order_info: Optional[OrderInfo]) -> Path:
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    encoded = msgspec.json.encode(build_json_document(events, order_info))
    path.write_bytes(msgspec.json.format(encoded, indent=2))
    return path
