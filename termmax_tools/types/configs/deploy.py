# termmax_tools/types/configs/deploy.py

from typing import Dict, Optional

from msgspec import Struct


class MarketParams(Struct, rename="camel"):
    maturity: str
    lend_taker_fee_ratio: str
    lend_maker_fee_ratio: str
    borrow_taker_fee_ratio: str
    borrow_maker_fee_ratio: str
    mint_gt_fee_ratio: str
    mint_gt_fee_ref: str

class LoanConfig(Struct, rename="camel"):
    liquidation_ltv: str
    max_ltv: str
    liquidatable: bool

class TokenDeployConfig(Struct, rename="camel", omit_defaults=True):
    token_addr: str
    price_feed_addr: str
    heart_beat: str
    name: str
    symbol: str
    decimals: str
    initial_price: str
    backup_price_feed_addr: Optional[str] = None

class CollateralDeployConfig(TokenDeployConfig, kw_only=True):
    gt_key_identifier: str

class MarketData(Struct, rename="camel", omit_defaults=True):
    salt: int
    collateral_cap_for_gt: str
    market_config: MarketParams
    loan_config: LoanConfig
    underlying_config: TokenDeployConfig
    collateral_config: CollateralDeployConfig
    market_name: Optional[str] = None
    market_symbol: Optional[str] = None

class DeployConfig(Struct, rename="camel"):
    config_num: str
    configs: Dict[str, MarketData]
