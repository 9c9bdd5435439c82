# termmax_tools/contracts/__init__.py

from .abi_loader import ABILoader, event_abis
from .signatures import (
    build_type_string,
    event_signature,
    canonical_signature,
    event_topic,
    extract_event_signatures,
    extract_event_topics,
)
from .extract import extract_abis

__all__ = [
    'ABILoader',
    'event_abis',
    'build_type_string',
    'event_signature',
    'canonical_signature',
    'event_topic',
    'extract_event_signatures',
    'extract_event_topics',
    'extract_abis',
]
