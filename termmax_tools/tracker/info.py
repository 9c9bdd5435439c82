# termmax_tools/tracker/info.py
"""
Read-only snapshots of the order, its market and the market tokens.

These lookups never raise: a failed call degrades to a default value, and a
failure that prevents building the snapshot at all is reported through the
snapshot's `error` field.
"""

import asyncio
from typing import Any, Dict, List, Optional

from ..clients.interfaces import LedgerClientInterface
from ..contracts import ABILoader
from ..core.logging import ToolsLogger, log_with_context, DEBUG, INFO, WARNING, ERROR
from ..types import (
    EvmAddress,
    TokenInfo,
    GearingTokenRef,
    MarketConfig,
    MarketTokens,
    MarketInfo,
    OrderConfig,
    OrderInfo,
    DEFAULT_TOKEN_DECIMALS,
    UNKNOWN_TOKEN,
)
from ..utils.amounts import format_units
from ..utils.convert_time import timestamp_to_iso


logger = ToolsLogger.get_logger('tracker.info')

abi_loader = ABILoader()


def _abi(name: str) -> List[Dict[str, Any]]:
    return abi_loader.require_abi(name)


async def _call_or(client: LedgerClientInterface, address: str, abi, function_name: str, default):
    try:
        return await client.call(address, abi, function_name)
    except Exception as e:
        log_with_context(logger, DEBUG, "View call failed, using default",
                         contract_address=address, function=function_name, error=str(e))
        return default


async def get_token_info(client: LedgerClientInterface, token_address: str) -> TokenInfo:
    try:
        abi = _abi("ERC20")
        name, symbol, decimals = await asyncio.gather(
            _call_or(client, token_address, abi, "name", UNKNOWN_TOKEN),
            _call_or(client, token_address, abi, "symbol", UNKNOWN_TOKEN),
            _call_or(client, token_address, abi, "decimals", DEFAULT_TOKEN_DECIMALS),
        )
        return TokenInfo(
            address=EvmAddress(token_address),
            name=str(name),
            symbol=str(symbol),
            decimals=int(decimals),
        )
    except Exception as e:
        return TokenInfo(
            address=EvmAddress(token_address),
            name=UNKNOWN_TOKEN,
            symbol=UNKNOWN_TOKEN,
            decimals=DEFAULT_TOKEN_DECIMALS,
            error=str(e),
        )


def market_config_from_call(config: Any) -> MarketConfig:
    """Build the config snapshot from the `config()` tuple (treasurer, maturity, feeConfig)"""
    treasurer, maturity = config[0], int(config[1])
    return MarketConfig(
        treasurer=EvmAddress(treasurer),
        maturity=str(maturity),
        maturity_date=timestamp_to_iso(maturity),
    )


def order_config_from_call(config: Any) -> OrderConfig:
    """Build the config snapshot from the `orderConfig()` tuple (curveCuts, gtId, maxXtReserve, swapTrigger, feeConfig)"""
    return OrderConfig(
        max_xt_reserve=str(config[2]),
        gt_id=str(config[1]),
        swap_trigger=EvmAddress(config[3]),
    )


async def get_market_info(client: LedgerClientInterface, market_address: str) -> MarketInfo:
    log_with_context(logger, INFO, "Fetching market information", contract_address=market_address)

    try:
        abi = _abi("TermMaxMarket")
        ft, xt, gt, collateral, debt_token = await client.call(market_address, abi, "tokens")

        market_config: Optional[MarketConfig] = None
        try:
            market_config = market_config_from_call(await client.call(market_address, abi, "config"))
            log_with_context(logger, INFO, "Market configuration loaded",
                             contract_address=market_address,
                             maturity=market_config.maturity_date,
                             treasurer=market_config.treasurer)
        except Exception as e:
            log_with_context(logger, WARNING, "Could not fetch market configuration details",
                             contract_address=market_address, error=str(e))

        ft_info, xt_info, collateral_info, debt_info = await asyncio.gather(
            get_token_info(client, ft),
            get_token_info(client, xt),
            get_token_info(client, collateral),
            get_token_info(client, debt_token),
        )

        log_with_context(logger, INFO, "Market tokens resolved",
                         contract_address=market_address,
                         ft=ft_info.symbol, xt=xt_info.symbol,
                         collateral=collateral_info.symbol, debt_token=debt_info.symbol)

        return MarketInfo(
            address=EvmAddress(market_address),
            config=market_config,
            tokens=MarketTokens(
                ft=ft_info,
                xt=xt_info,
                gt=GearingTokenRef(address=EvmAddress(gt)),
                collateral=collateral_info,
                debt_token=debt_info,
            ),
        )
    except Exception as e:
        log_with_context(logger, ERROR, "Error fetching market information",
                         contract_address=market_address, error=str(e))
        return MarketInfo(address=EvmAddress(market_address), error=str(e))


async def get_order_info(client: LedgerClientInterface, order_address: str) -> OrderInfo:
    log_with_context(logger, INFO, "Fetching order information", order_address=order_address)

    try:
        abi = _abi("TermMaxOrder")
        market_address = await client.call(order_address, abi, "market")
        market_info = await get_market_info(client, market_address)
        maker_address = await client.call(order_address, abi, "maker")
        ft_reserve, xt_reserve = await client.call(order_address, abi, "tokenReserves")

        tokens = market_info.tokens
        ft_decimals = tokens.ft.decimals if tokens else DEFAULT_TOKEN_DECIMALS
        xt_decimals = tokens.xt.decimals if tokens else DEFAULT_TOKEN_DECIMALS

        log_with_context(logger, INFO, "Order reserves loaded",
                         order_address=order_address,
                         maker=maker_address,
                         ft_reserve=format_units(ft_reserve, ft_decimals),
                         xt_reserve=format_units(xt_reserve, xt_decimals))

        order_config: Optional[OrderConfig] = None
        try:
            order_config = order_config_from_call(await client.call(order_address, abi, "orderConfig"))
        except Exception as e:
            log_with_context(logger, WARNING, "Could not fetch order configuration details",
                             order_address=order_address, error=str(e))

        return OrderInfo(
            address=EvmAddress(order_address),
            market_address=EvmAddress(market_address),
            market_info=market_info,
            maker_address=EvmAddress(maker_address),
            ft_reserve=str(ft_reserve),
            xt_reserve=str(xt_reserve),
            order_config=order_config,
        )
    except Exception as e:
        log_with_context(logger, ERROR, "Error fetching order information",
                         order_address=order_address, error=str(e))
        return OrderInfo(address=EvmAddress(order_address), error=str(e))
