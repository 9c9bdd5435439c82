# termmax_tools/loadtest/routes.py
"""
Route builders for the TermMax backend API.

Every builder returns a path with its query string; the client joins it
to the environment base URL.
"""

from typing import Any, Dict, List
from urllib.parse import urlencode

ORDER_TYPES = ("hybrid", "lend", "borrow")
TAKER_ACTIONS = ("buy-ft", "buy-xt", "sell-ft", "sell-xt")
DASHBOARD_USER = "0x2a58a3d405c527491daae4c62561b949e7f87efe"


def with_query(path: str, **params) -> str:
    params = {k: v for k, v in params.items() if v is not None}
    if not params:
        return path
    return f"{path}?{urlencode(params)}"


# === General ===

def root() -> str:
    return "/"


def health() -> str:
    return "/health"


# === Market ===

def market_general_config(chain_id: int) -> str:
    return with_query("/market/config/general", chainId=chain_id)


def market_data(chain_id: int, min_low_capacity_value: int = None) -> str:
    return with_query("/market/data", chainId=chain_id, minLowCapacityValue=min_low_capacity_value)


def config_list(chain_id: int, min_low_capacity_value: int = None) -> str:
    return with_query("/market/config/list", chainId=chain_id, minLowCapacityValue=min_low_capacity_value)


def market_list(chain_id: int) -> str:
    return with_query("/market/config/market/list", chainId=chain_id)


def market_item(chain_id: int, market_address: str) -> str:
    return with_query("/market/config/market/item", chainId=chain_id, marketAddress=market_address)


def asset_list(chain_id: int) -> str:
    return with_query("/market/config/asset/list", chainId=chain_id)


def asset_item(chain_id: int, asset_address: str) -> str:
    return with_query("/market/config/asset/item", chainId=chain_id, assetAddress=asset_address)


def gt_list(chain_id: int) -> str:
    return with_query("/market/config/gt/list", chainId=chain_id)


def gt_item(chain_id: int, market_address: str) -> str:
    return with_query("/market/config/gt/item", chainId=chain_id, marketAddress=market_address)


def order_list(chain_id: int) -> str:
    return with_query("/market/config/order/list", chainId=chain_id)


def order_item(chain_id: int, order_address: str) -> str:
    return with_query("/market/config/order/item", chainId=chain_id, orderAddress=order_address)


def orders_info(chain_id: int) -> str:
    return with_query("/market/info/orders", chainId=chain_id)


def order_info(chain_id: int, order_address: str) -> str:
    return with_query("/market/info/order", chainId=chain_id, orderAddress=order_address)


def prices(chain_id: int, market_address: str = None, include_inactive: bool = None) -> str:
    inactive = None if include_inactive is None else str(include_inactive).lower()
    return with_query("/market/info/prices", chainId=chain_id, marketAddress=market_address,
                      includeInactive=inactive)


def price(chain_id: int, asset_address: str) -> str:
    return with_query("/market/info/price", chainId=chain_id, assetAddress=asset_address)


# === Dashboard ===

def position_summary(chain_id: int, user_address: str = DASHBOARD_USER) -> str:
    return with_query("/dashboard/position/summary", chainId=chain_id, userAddress=user_address)


def position_total_usd_value(chain_id: int, user_address: str = DASHBOARD_USER) -> str:
    return with_query("/dashboard/position/total-usd-value", chainId=chain_id, userAddress=user_address)


# === Maker ===

def default_order_params(chain_id: int, order_type: str, market_address: str) -> str:
    return with_query("/maker/order/default-order-params", chainId=chain_id, typ=order_type,
                      marketAddress=market_address)


def create_order_history(chain_id: int, market_address: str) -> str:
    return with_query("/maker/order/create-order-history", chainId=chain_id, marketAddress=market_address)


def update_order_history(chain_id: int, order_address: str) -> str:
    return with_query("/maker/order/update-order-history", chainId=chain_id, orderAddress=order_address)


def debug_create_history() -> str:
    return "/maker/order/debug-create-history"


# === Taker ===

def taker_order(chain_id: int, action: str, market_address: str, aggregator: bool = False) -> str:
    prefix = "/taker/order/aggregator" if aggregator else "/taker/order"
    return with_query(f"{prefix}/{action}", chainId=chain_id, marketAddress=market_address)


# === Response helpers ===

def _items(body: Any) -> List[Dict]:
    data = body.get("data") if isinstance(body, dict) else None
    return [item for item in data or [] if isinstance(item, dict)] if isinstance(data, list) else []


def market_addresses(body: Any) -> List[str]:
    """marketAddr of every entry in a market list response."""
    return [item["contracts"]["marketAddr"] for item in _items(body)
            if isinstance(item.get("contracts"), dict) and item["contracts"].get("marketAddr")]


def order_addresses(body: Any) -> List[str]:
    return [item["contracts"]["orderAddr"] for item in _items(body)
            if isinstance(item.get("contracts"), dict) and item["contracts"].get("orderAddr")]


def asset_addresses(body: Any) -> List[str]:
    return [item["contractAddress"] for item in _items(body) if item.get("contractAddress")]


def config_list_addresses(body: Any):
    """(market addresses, order addresses) from a /market/config/list response."""
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict):
        return [], []
    markets = market_addresses({"data": data.get("markets")})
    orders = order_addresses({"data": data.get("orderConfigs")})
    return markets, orders
