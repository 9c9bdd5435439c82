# termmax_tools/clients/rpc.py

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiohttp
from web3 import AsyncWeb3

from .interfaces import LedgerClientInterface
from ..core.logging import LoggingMixin
from ..types import RpcConfig


class AsyncRpcClient(LedgerClientInterface, LoggingMixin):
    """
    Ledger client over a JSON-RPC endpoint.

    Every request runs under the configured deadline; timeouts and transport
    errors are retried up to `max_retries` attempts before propagating.
    """

    def __init__(self, config: RpcConfig):
        self.config = config
        self.endpoint_url = config.endpoint_url
        self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            config.endpoint_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=config.timeout)},
        ))

    async def _request(self, description: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        attempts = max(1, self.config.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(factory(), timeout=self.config.timeout)
            except (asyncio.TimeoutError, aiohttp.ClientError) as e:
                if attempt == attempts:
                    raise
                self.log_warning("RPC request failed, retrying",
                                 request=description,
                                 attempt=attempt,
                                 error=f"{type(e).__name__}: {e}")

    def _checksum(self, address: str) -> str:
        return AsyncWeb3.to_checksum_address(address)

    async def get_block_number(self) -> int:
        async def fetch():
            return await self.w3.eth.block_number
        return await self._request("eth_blockNumber", fetch)

    async def get_logs(self, address: str, topics: List[Optional[str]],
                       from_block: int, to_block: int) -> List[Dict[str, Any]]:
        filter_params = {
            "address": self._checksum(address),
            "topics": topics,
            "fromBlock": from_block,
            "toBlock": to_block,
        }
        logs = await self._request("eth_getLogs", lambda: self.w3.eth.get_logs(filter_params))
        return [dict(log) for log in logs]

    async def get_block(self, block_number: int) -> Optional[Dict[str, Any]]:
        block = await self._request("eth_getBlockByNumber", lambda: self.w3.eth.get_block(block_number))
        return dict(block) if block else None

    async def call(self, address: str, abi: List[Dict[str, Any]], function_name: str, *args) -> Any:
        contract = self.w3.eth.contract(address=self._checksum(address), abi=abi)
        function = contract.functions[function_name](*args)
        return await self._request(f"eth_call:{function_name}", function.call)

    async def close(self) -> None:
        disconnect = getattr(self.w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
