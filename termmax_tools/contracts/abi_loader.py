# termmax_tools/contracts/abi_loader.py

import json
from pathlib import Path
from typing import Optional, List, Dict, Any
from ..core.logging import LoggingMixin


DEFAULT_ABI_PATH = Path(__file__).parent / "abis"


class ABILoader(LoggingMixin):
    """Loads contract ABIs from filesystem with caching"""

    def __init__(self, abi_base_path: Optional[Path] = None):
        self.abi_base_path = Path(abi_base_path) if abi_base_path else DEFAULT_ABI_PATH
        self._abi_cache: Dict[str, Optional[List[Dict[str, Any]]]] = {}

        self.log_debug("ABI loader initialized", abi_base_path=str(self.abi_base_path))

    def load_abi(self, contract_name: str) -> Optional[List[Dict[str, Any]]]:
        """Load ABI by contract name (file stem) with caching"""
        if not contract_name:
            return None

        if contract_name in self._abi_cache:
            return self._abi_cache[contract_name]

        abi_path = self.abi_base_path / f"{contract_name}.json"

        try:
            if not abi_path.exists():
                self.log_warning("ABI file not found",
                                 abi_path=str(abi_path),
                                 contract_name=contract_name)
                self._abi_cache[contract_name] = None
                return None

            with open(abi_path, 'r') as f:
                abi_data = json.load(f)

            # Handle different ABI file formats
            if isinstance(abi_data, list):
                abi = abi_data
            elif isinstance(abi_data, dict) and 'abi' in abi_data:
                # Build artifact with an 'abi' key
                abi = abi_data['abi']
            else:
                self.log_error("Unexpected ABI file format",
                               abi_path=str(abi_path),
                               data_type=type(abi_data).__name__)
                self._abi_cache[contract_name] = None
                return None

            if not isinstance(abi, list):
                self.log_error("ABI is not a list",
                               abi_path=str(abi_path),
                               abi_type=type(abi).__name__)
                self._abi_cache[contract_name] = None
                return None

            self._abi_cache[contract_name] = abi

            self.log_debug("ABI loaded successfully",
                           abi_path=str(abi_path),
                           abi_functions=len([item for item in abi if item.get('type') == 'function']),
                           abi_events=len([item for item in abi if item.get('type') == 'event']))

            return abi

        except json.JSONDecodeError as e:
            self.log_error("Invalid JSON in ABI file",
                           abi_path=str(abi_path),
                           error=str(e))
            self._abi_cache[contract_name] = None
            return None

        except OSError as e:
            self.log_error("Failed to load ABI",
                           abi_path=str(abi_path),
                           error=str(e),
                           exception_type=type(e).__name__)
            self._abi_cache[contract_name] = None
            return None

    def require_abi(self, contract_name: str) -> List[Dict[str, Any]]:
        abi = self.load_abi(contract_name)
        if abi is None:
            raise FileNotFoundError(f"No usable ABI for contract '{contract_name}' in {self.abi_base_path}")
        return abi

    def available(self) -> List[str]:
        return sorted(path.stem for path in self.abi_base_path.glob("*.json"))


def event_abis(abi: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return {entry["name"]: entry for entry in abi if entry.get("type") == "event" and entry.get("name")}
