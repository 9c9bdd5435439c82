"""Tests for the market deployment sheet converter."""

import csv
import json

import pytest

from termmax_tools.deploy import (
    SCHEMA_V1,
    SCHEMA_V2,
    DeployConfigConverter,
    column_names,
    convert_market_configs,
    parse_number_with_commas,
)
from termmax_tools.types import ConversionError


V1_ROW = {
    "marketType": "standard",
    "salt": "7",
    "collateralCapForGt": "1,000,000,000,000,000,000,000",
    "maturity": "1735689600",
    "lendTakerFeeRatio": "3000000",
    "lendMakerFeeRatio": "0",
    "borrowTakerFeeRatio": "3000000",
    "borrowMakerFeeRatio": "0",
    "mintGtFeeRatio": "500000",
    "mintGtFeeRef": "50000000",
    "liquidationLtv": "90000000",
    "maxLtv": "85000000",
    "liquidatable": "true",
    "underlyingTokenAddr": "0xa0b8",
    "underlyingPriceFeedAddr": "0xfeed1",
    "underlyingHeartBeat": "",
    "underlyingName": "USD Coin",
    "underlyingSymbol": "USDC",
    "underlyingDecimals": "6",
    "underlyingInitialPrice": "1",
    "collateralTokenAddr": "0xc02a",
    "collateralPriceFeedAddr": "0xfeed2",
    "collateralHeartBeat": "",
    "collateralName": "Wrapped Ether",
    "collateralSymbol": "WETH",
    "collateralDecimals": "18",
    "collateralInitialPrice": "2500.5",
    "gtKeyIdentifier": "",
}


def write_sheet(path, schema, rows, note_column=True):
    width = len(schema) + (1 if note_column else 0)
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Market"] + [""] * (width - 1))
        writer.writerow(list(schema) + (["note"] if note_column else []))
        for row in rows:
            cells = [f" {row.get(name, '')} " for name in schema]
            writer.writerow(cells + (["free text"] if note_column else []))
    return path


class TestSchema:

    def test_v1_has_28_columns(self):
        assert len(SCHEMA_V1) == 28
        assert SCHEMA_V1[-1] == "gtKeyIdentifier"

    def test_v2_inserts_backup_feeds(self):
        assert len(SCHEMA_V2) == 30
        assert SCHEMA_V2[SCHEMA_V2.index("underlyingPriceFeedAddr") + 1] == "underlyingBackupPriceFeedAddr"
        assert SCHEMA_V2[SCHEMA_V2.index("collateralPriceFeedAddr") + 1] == "collateralBackupPriceFeedAddr"

    def test_unmapped_columns(self):
        assert column_names("v1", 30)[28:] == ["column28", "column29"]

    def test_unknown_schema(self):
        with pytest.raises(ValueError):
            column_names("v9", 3)


class TestConversion:

    def test_v1_record(self, tmp_path):
        sheet = write_sheet(tmp_path / "markets.csv", SCHEMA_V1, [V1_ROW])
        output = tmp_path / "deploy" / "markets.json"

        convert_market_configs(sheet, output)
        data = json.loads(output.read_text())

        assert data["configNum"] == "1"
        market = data["configs"]["configs_0"]
        assert market["salt"] == 7
        assert market["collateralCapForGt"] == "1000000000000000000000"
        assert market["marketName"] == "USDC/WETH-01JAN2025"
        assert market["marketSymbol"] == market["marketName"]
        assert market["marketConfig"]["lendTakerFeeRatio"] == "3000000"
        assert market["loanConfig"] == {"liquidationLtv": "90000000", "maxLtv": "85000000", "liquidatable": True}
        assert market["underlyingConfig"]["heartBeat"] == "86400"
        assert market["underlyingConfig"]["initialPrice"] == "100000000"
        assert "backupPriceFeedAddr" not in market["underlyingConfig"]
        assert market["collateralConfig"]["heartBeat"] == "3600"
        assert market["collateralConfig"]["initialPrice"] == "250050000000"
        assert market["collateralConfig"]["gtKeyIdentifier"] == "GearingTokenWithERC20"

    def test_v2_backup_feeds(self, tmp_path):
        row = dict(V1_ROW, underlyingBackupPriceFeedAddr="0xbackup1", collateralBackupPriceFeedAddr="0xbackup2")
        sheet = write_sheet(tmp_path / "markets.csv", SCHEMA_V2, [row, dict(row, salt="8")])

        config = convert_market_configs(sheet, tmp_path / "out.json", schema="v2")

        assert config.config_num == "2"
        assert config.configs["configs_1"].salt == 8
        assert config.configs["configs_0"].underlying_config.backup_price_feed_addr == "0xbackup1"
        assert config.configs["configs_0"].collateral_config.backup_price_feed_addr == "0xbackup2"

    def test_invalid_price_becomes_zero(self):
        assert DeployConfigConverter().convert_to_base_unit("abc") == "0"
        assert DeployConfigConverter().convert_to_base_unit("0.5") == "50000000"

    def test_not_liquidatable(self, tmp_path):
        sheet = write_sheet(tmp_path / "markets.csv", SCHEMA_V1, [dict(V1_ROW, liquidatable="no")])

        config = convert_market_configs(sheet, tmp_path / "out.json")

        assert config.configs["configs_0"].loan_config.liquidatable is False

    def test_bad_record_aborts(self, tmp_path):
        rows = [V1_ROW, dict(V1_ROW, maturity="soon")]
        sheet = write_sheet(tmp_path / "markets.csv", SCHEMA_V1, rows)
        output = tmp_path / "out.json"

        with pytest.raises(ConversionError) as exc_info:
            convert_market_configs(sheet, output)

        assert exc_info.value.record_index == 2
        assert not output.exists()

    def test_missing_input(self, tmp_path):
        with pytest.raises(ConversionError):
            convert_market_configs(tmp_path / "missing.csv", tmp_path / "out.json")

    def test_parse_number_with_commas(self):
        assert parse_number_with_commas("1,234,567") == "1234567"
        assert parse_number_with_commas("") == ""
