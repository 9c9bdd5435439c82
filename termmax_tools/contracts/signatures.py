# termmax_tools/contracts/signatures.py
"""
Event signature derivation.

Two string forms are produced for every event:

- the descriptor form keeps the `tuple` keyword (`Updated(tuple(uint256,address)[])`),
  which is how the descriptor files spell nested structs
- the canonical form drops it (`Updated((uint256,address)[])`); this is the string
  the ledger hashes into topic0
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from eth_utils import encode_hex, keccak

from ..core.logging import ToolsLogger, log_with_context, ERROR


logger = ToolsLogger.get_logger('contracts.signatures')

TUPLE_TYPE = re.compile(r"^tuple((?:\[\d*\])*)$")


def build_type_string(param: Mapping[str, Any], canonical: bool = False) -> str:
    """Flatten a descriptor input into its type string, recursing into tuple components"""
    param_type = param["type"]
    match = TUPLE_TYPE.match(param_type)
    if not match:
        return param_type

    components = ",".join(build_type_string(comp, canonical) for comp in param["components"])
    prefix = "" if canonical else "tuple"
    return f"{prefix}({components}){match.group(1)}"


def event_signature(entry: Mapping[str, Any]) -> str:
    param_types = ",".join(build_type_string(param) for param in entry["inputs"])
    return f"{entry['name']}({param_types})"


def canonical_signature(entry: Mapping[str, Any]) -> str:
    param_types = ",".join(build_type_string(param, canonical=True) for param in entry["inputs"])
    return f"{entry['name']}({param_types})"


def event_topic(entry: Mapping[str, Any]) -> str:
    return encode_hex(keccak(text=canonical_signature(entry)))


def _event_entries(abi: List[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    return [item for item in abi if isinstance(item, Mapping) and item.get("type") == "event"]


def extract_event_signatures(abi: List[Mapping[str, Any]]) -> Dict[str, str]:
    """Event name -> descriptor-form signature; malformed entries are logged and skipped"""
    signatures = {}
    for entry in _event_entries(abi):
        signature = _safe(event_signature, entry)
        if signature is not None:
            signatures[entry["name"]] = signature
    return signatures


def extract_event_topics(abi: List[Mapping[str, Any]]) -> Dict[str, str]:
    """Event name -> 0x-prefixed topic hash; malformed entries are logged and skipped"""
    topics = {}
    for entry in _event_entries(abi):
        topic = _safe(event_topic, entry)
        if topic is not None:
            topics[entry["name"]] = topic
    return topics


def _safe(derive, entry: Mapping[str, Any]) -> Optional[str]:
    try:
        return derive(entry)
    except (KeyError, TypeError, AttributeError) as e:
        log_with_context(logger, ERROR, "Error processing event descriptor",
                         event_name=entry.get("name", "<unnamed>"),
                         error=f"{type(e).__name__}: {e}")
        return None
