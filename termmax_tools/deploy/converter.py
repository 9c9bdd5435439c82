# termmax_tools/deploy/converter.py

import math
from pathlib import Path
from typing import Dict, List

import msgspec
import pandas as pd

from ..core.logging import LoggingMixin
from ..types import ConversionError
from ..types.configs.deploy import (
    MarketParams,
    LoanConfig,
    TokenDeployConfig,
    CollateralDeployConfig,
    MarketData,
    DeployConfig,
)
from ..utils.convert_time import maturity_label
from .schema import column_names, has_backup_feeds


PRICE_DECIMALS = 8
DEFAULT_UNDERLYING_HEARTBEAT = "86400"
DEFAULT_COLLATERAL_HEARTBEAT = "3600"
DEFAULT_GT_KEY_IDENTIFIER = "GearingTokenWithERC20"

# Row 1 holds section headers, row 2 column headers; data starts on row 3
HEADER_ROWS = 2


def parse_number_with_commas(value: str) -> str:
    if not value:
        return ""
    return value.replace(",", "").strip()


class DeployConfigConverter(LoggingMixin):
    """Converts the market deployment sheet (CSV) into the deploy script's JSON config"""

    def __init__(self, schema: str = "v1"):
        column_names(schema, 0)
        self.schema = schema
        self.with_backup_feeds = has_backup_feeds(schema)

    def read_records(self, input_path: Path) -> List[Dict[str, str]]:
        frame = pd.read_csv(
            input_path,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        ).fillna("")

        if len(frame) < HEADER_ROWS:
            return []

        frame.columns = column_names(self.schema, frame.shape[1])
        frame = frame.iloc[HEADER_ROWS:].apply(lambda column: column.str.strip())

        records = frame.to_dict(orient="records")
        if records:
            self.log_debug("CSV columns mapped", columns=list(records[0].keys()))
        return records

    def convert_to_base_unit(self, price: str) -> str:
        try:
            value = float(price)
        except ValueError:
            value = math.nan
        if math.isnan(value) or math.isinf(value):
            self.log_warning("Invalid price, using 0", price=price)
            return "0"
        return str(math.floor(value * 10 ** PRICE_DECIMALS))

    def build_market_data(self, record: Dict[str, str]) -> MarketData:
        get = lambda key: record.get(key) or ""

        collateral_cap = parse_number_with_commas(get("collateralCapForGt"))
        underlying_symbol = get("underlyingSymbol")
        collateral_symbol = get("collateralSymbol")
        market_label = f"{underlying_symbol}/{collateral_symbol}-{maturity_label(int(get('maturity')))}"

        underlying = TokenDeployConfig(
            token_addr=get("underlyingTokenAddr"),
            price_feed_addr=get("underlyingPriceFeedAddr"),
            heart_beat=get("underlyingHeartBeat") or DEFAULT_UNDERLYING_HEARTBEAT,
            name=get("underlyingName"),
            symbol=underlying_symbol,
            decimals=get("underlyingDecimals"),
            initial_price=self.convert_to_base_unit(get("underlyingInitialPrice") or "0"),
            backup_price_feed_addr=get("underlyingBackupPriceFeedAddr") if self.with_backup_feeds else None,
        )
        collateral = CollateralDeployConfig(
            token_addr=get("collateralTokenAddr"),
            price_feed_addr=get("collateralPriceFeedAddr"),
            heart_beat=get("collateralHeartBeat") or DEFAULT_COLLATERAL_HEARTBEAT,
            name=get("collateralName"),
            symbol=collateral_symbol,
            decimals=get("collateralDecimals"),
            initial_price=self.convert_to_base_unit(get("collateralInitialPrice") or "0"),
            backup_price_feed_addr=get("collateralBackupPriceFeedAddr") if self.with_backup_feeds else None,
            gt_key_identifier=get("gtKeyIdentifier") or DEFAULT_GT_KEY_IDENTIFIER,
        )

        return MarketData(
            salt=int(get("salt") or "0"),
            collateral_cap_for_gt=collateral_cap,
            market_config=MarketParams(
                maturity=get("maturity"),
                lend_taker_fee_ratio=get("lendTakerFeeRatio"),
                lend_maker_fee_ratio=get("lendMakerFeeRatio"),
                borrow_taker_fee_ratio=get("borrowTakerFeeRatio"),
                borrow_maker_fee_ratio=get("borrowMakerFeeRatio"),
                mint_gt_fee_ratio=get("mintGtFeeRatio"),
                mint_gt_fee_ref=get("mintGtFeeRef"),
            ),
            loan_config=LoanConfig(
                liquidation_ltv=get("liquidationLtv"),
                max_ltv=get("maxLtv"),
                liquidatable=get("liquidatable").upper() == "TRUE",
            ),
            underlying_config=underlying,
            collateral_config=collateral,
            market_name=market_label,
            market_symbol=market_label,
        )

    def log_collateral_caps(self, index: int, data: MarketData) -> None:
        collateral = data.collateral_config
        decimals = int(collateral.decimals or "18")
        cap = int(data.collateral_cap_for_gt or "0")

        self.log_info("Collateral cap",
                      record_index=index,
                      collateral_symbol=collateral.symbol,
                      cap_amount=cap // 10 ** decimals,
                      cap_vault=cap * int(collateral.initial_price) // 10 ** decimals // 10 ** PRICE_DECIMALS)

    def convert_records(self, records: List[Dict[str, str]]) -> DeployConfig:
        configs: Dict[str, MarketData] = {}
        for index, record in enumerate(records):
            try:
                data = self.build_market_data(record)
                self.log_collateral_caps(index, data)
            except Exception as e:
                self.log_error("Error processing record",
                               record_index=index + 1,
                               error=f"{type(e).__name__}: {e}",
                               record=record)
                raise ConversionError(f"Error processing record {index + 1}: {e}", record_index=index + 1) from e
            configs[f"configs_{index}"] = data

        return DeployConfig(config_num=str(len(records)), configs=configs)

    def convert(self, input_path: Path, output_path: Path) -> DeployConfig:
        input_path, output_path = Path(input_path), Path(output_path)
        self.log_info("Reading CSV", path=str(input_path), schema=self.schema)

        try:
            records = self.read_records(input_path)
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise ConversionError(f"Could not read {input_path}: {e}") from e

        deploy_config = self.convert_records(records)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(msgspec.json.format(msgspec.json.encode(deploy_config), indent=2))

        self.log_info("Conversion complete",
                      path=str(output_path), configs=len(deploy_config.configs))
        return deploy_config


def convert_market_configs(input_path: Path, output_path: Path, schema: str = "v1") -> DeployConfig:
    return DeployConfigConverter(schema).convert(input_path, output_path)
