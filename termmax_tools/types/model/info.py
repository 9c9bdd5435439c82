# termmax_tools/types/model/info.py

from typing import Optional, Dict, Iterator, Tuple

from msgspec import Struct

from ..new import EvmAddress, DateTimeStr


class TokenInfo(Struct, frozen=True, rename="camel", omit_defaults=True):
    address: EvmAddress
    name: str
    symbol: str
    decimals: int
    error: Optional[str] = None


class GearingTokenRef(Struct, frozen=True):
    address: EvmAddress


class MarketConfig(Struct, frozen=True, rename="camel"):
    treasurer: EvmAddress
    maturity: str
    maturity_date: DateTimeStr


class MarketTokens(Struct, frozen=True, rename="camel"):
    ft: TokenInfo
    xt: TokenInfo
    gt: GearingTokenRef
    collateral: TokenInfo
    debt_token: TokenInfo

    def erc20_tokens(self) -> Iterator[Tuple[str, TokenInfo]]:
        yield "ft", self.ft
        yield "xt", self.xt
        yield "collateral", self.collateral
        yield "debtToken", self.debt_token


class MarketInfo(Struct, frozen=True, rename="camel", omit_defaults=True):
    address: EvmAddress
    config: Optional[MarketConfig] = None
    tokens: Optional[MarketTokens] = None
    error: Optional[str] = None


class OrderConfig(Struct, frozen=True, rename="camel"):
    max_xt_reserve: str
    gt_id: str
    swap_trigger: EvmAddress


class OrderInfo(Struct, frozen=True, rename="camel", omit_defaults=True):
    address: EvmAddress
    market_address: EvmAddress = ""
    market_info: Optional[MarketInfo] = None
    maker_address: EvmAddress = ""
    ft_reserve: str = "0"
    xt_reserve: str = "0"
    order_config: Optional[OrderConfig] = None
    error: Optional[str] = None

    @property
    def tokens(self) -> Optional[MarketTokens]:
        if self.market_info is None:
            return None
        return self.market_info.tokens

    @property
    def maturity(self) -> Optional[int]:
        if self.market_info is None or self.market_info.config is None:
            return None
        return int(self.market_info.config.maturity)


class TokenBook:
    """Lower-cased address lookup of token symbols and decimals"""

    def __init__(self, tokens: Optional[MarketTokens]):
        self.tokens = tokens
        self._by_address: Dict[str, TokenInfo] = {}
        if tokens is not None:
            for _, info in tokens.erc20_tokens():
                self._by_address[info.address.lower()] = info

    def symbol(self, address: str, default: str = "Unknown") -> str:
        info = self._by_address.get((address or "").lower())
        return info.symbol if info else default

    def decimals(self, address: str, default: int = 18) -> int:
        info = self._by_address.get((address or "").lower())
        return info.decimals if info else default

    def decimals_of(self, role: str, default: int = 18) -> int:
        if self.tokens is None:
            return default
        return getattr(self.tokens, role).decimals

    def symbol_of(self, role: str, default: str = "Unknown") -> str:
        if self.tokens is None:
            return default
        return getattr(self.tokens, role).symbol
