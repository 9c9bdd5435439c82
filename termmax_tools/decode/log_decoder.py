# termmax_tools/decode/log_decoder.py

from typing import Any, Dict, Mapping, Optional

from web3 import Web3
from web3._utils.events import get_event_data
from hexbytes import HexBytes
from eth_utils import encode_hex

from ..types import RawEventLog, EvmAddress, EvmHash
from ..core.logging import LoggingMixin


class LogDecoder(LoggingMixin):
    """Decodes raw ledger logs against known event descriptors"""

    def __init__(self, event_abis: Mapping[str, Dict[str, Any]]):
        self.event_abis = dict(event_abis)
        self.w3 = Web3()

    def decode(self, event_name: str, log: Mapping[str, Any]) -> Optional[RawEventLog]:
        event_abi = self.event_abis.get(event_name)
        if event_abi is None:
            self.log_warning("No descriptor for event", event_name=event_name)
            return None

        try:
            event_data = get_event_data(self.w3.codec, event_abi, log)
        except Exception as e:
            self.log_warning("Failed to decode log",
                             event_name=event_name,
                             tx_hash=_hex(log.get("transactionHash")),
                             log_index=log.get("logIndex"),
                             error=f"{type(e).__name__}: {e}")
            return None

        return RawEventLog(
            event=event_data["event"],
            address=EvmAddress(str(event_data["address"])),
            block_number=int(event_data["blockNumber"]),
            transaction_hash=EvmHash(_hex(event_data["transactionHash"])),
            log_index=int(event_data["logIndex"]),
            args=self._normalize_decoded_attributes(dict(event_data["args"])),
        )

    def _normalize_decoded_attributes(self, attributes: dict) -> dict:
        normalized = {}

        for key, value in attributes.items():
            normalized[key] = self._convert_web3_attribute(value)

        return normalized

    def _convert_web3_attribute(self, value):
        if isinstance(value, (bytes, HexBytes)):
            return encode_hex(value)
        if isinstance(value, (list, tuple)):
            return tuple(self._convert_web3_attribute(item) for item in value)
        if isinstance(value, Mapping):
            return {k: self._convert_web3_attribute(v) for k, v in value.items()}
        return value


def _hex(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, HexBytes)):
        return encode_hex(value)
    return str(value)
