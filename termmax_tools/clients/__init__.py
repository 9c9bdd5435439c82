# termmax_tools/clients/__init__.py

from .interfaces import LedgerClientInterface
from .rpc import AsyncRpcClient

__all__ = ['LedgerClientInterface', 'AsyncRpcClient']
