"""
Interfaces for ledger read clients.

The tracker only ever reads: logs over a block range, block headers for
timestamps, and view-function calls.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class LedgerClientInterface(ABC):
    """Interface for async ledger client implementations."""

    @abstractmethod
    async def get_block_number(self) -> int:
        """
        Get the latest block number.

        Returns:
            Latest block number
        """
        pass

    @abstractmethod
    async def get_logs(self, address: str, topics: List[Optional[str]],
                       from_block: int, to_block: int) -> List[Dict[str, Any]]:
        """
        Get raw logs emitted by a contract.

        Args:
            address: Emitting contract address
            topics: Topic filter, topic0 first
            from_block: First block (inclusive)
            to_block: Last block (inclusive)

        Returns:
            Raw log entries as returned by the node
        """
        pass

    @abstractmethod
    async def get_block(self, block_number: int) -> Optional[Dict[str, Any]]:
        """
        Get a block header by number.

        Args:
            block_number: Block number

        Returns:
            Block data (at least `number` and `timestamp`), or None if unknown
        """
        pass

    @abstractmethod
    async def call(self, address: str, abi: List[Dict[str, Any]], function_name: str, *args) -> Any:
        """
        Call a view function.

        Args:
            address: Contract address
            abi: Contract ABI containing the function
            function_name: Function to call
            *args: Function arguments

        Returns:
            Decoded return value (a tuple for multiple outputs)
        """
        pass

    async def close(self) -> None:
        """Release transport resources. No-op unless a client holds connections."""
        return None
