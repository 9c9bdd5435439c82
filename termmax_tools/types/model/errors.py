# termmax_tools/types/model/errors.py

from typing import Optional, Dict, Any
import hashlib
import msgspec
from msgspec import Struct

from ..new import ErrorId, EvmAddress, EvmHash


class ProcessingError(Struct):
    stage: str  # "query", "decode", "classify", "enrich", "rpc"
    error_type: str  # "query_failed", "decode_failed", "missing_argument", "call_failed"
    message: str
    error_id: Optional[ErrorId] = None
    context: Optional[Dict[str, Any]] = None  # tx_hash, log_index, contract_address, etc.

    def __post_init__(self) -> None:
        if not self.error_id:
            self.error_id = self.generate_error_id()

    def generate_error_id(self) -> ErrorId:
        content_struct = {
            "stage": self.stage,
            "error_type": self.error_type,
            "message": self.message,
            "context": self.context or {},
        }
        content_bytes = msgspec.msgpack.encode(content_struct)
        hash_hex = hashlib.sha256(content_bytes).hexdigest()

        return ErrorId(hash_hex[:12])


class TermMaxToolsError(Exception):
    """Base exception for termmax_tools"""


class ConversionError(TermMaxToolsError):
    """Deployment configuration could not be converted"""

    def __init__(self, message: str, record_index: Optional[int] = None):
        self.record_index = record_index
        super().__init__(message)


'''
Helper functions to create specific error types
'''
def create_query_error(
    error_type: str,
    message: str,
    contract_address: Optional[EvmAddress] = None,
    from_block: Optional[int] = None,
    to_block: Optional[int] = None
) -> ProcessingError:
    context = {}
    if contract_address:
        context["contract_address"] = contract_address
    if from_block is not None:
        context["from_block"] = from_block
    if to_block is not None:
        context["to_block"] = to_block

    return ProcessingError(
        stage="query",
        error_type=error_type,
        message=message,
        context=context if context else None
    )


def create_decode_error(
    error_type: str,
    message: str,
    tx_hash: Optional[EvmHash] = None,
    log_index: Optional[int] = None,
    contract_address: Optional[EvmAddress] = None
) -> ProcessingError:
    context = {}
    if tx_hash:
        context["tx_hash"] = tx_hash
    if log_index is not None:
        context["log_index"] = log_index
    if contract_address:
        context["contract_address"] = contract_address

    return ProcessingError(
        stage="decode",
        error_type=error_type,
        message=message,
        context=context if context else None
    )


def create_classify_error(
    error_type: str,
    message: str,
    event_name: Optional[str] = None,
    tx_hash: Optional[EvmHash] = None,
    log_index: Optional[int] = None
) -> ProcessingError:
    context = {}
    if event_name:
        context["event_name"] = event_name
    if tx_hash:
        context["tx_hash"] = tx_hash
    if log_index is not None:
        context["log_index"] = log_index

    return ProcessingError(
        stage="classify",
        error_type=error_type,
        message=message,
        context=context if context else None
    )


def create_rpc_error(
    error_type: str,
    message: str,
    contract_address: Optional[EvmAddress] = None,
    block_number: Optional[int] = None
) -> ProcessingError:
    context = {}
    if contract_address:
        context["contract_address"] = contract_address
    if block_number is not None:
        context["block_number"] = block_number

    return ProcessingError(
        stage="rpc",
        error_type=error_type,
        message=message,
        context=context if context else None
    )
