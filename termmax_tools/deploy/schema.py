# termmax_tools/deploy/schema.py
"""
Positional column layouts of the market deployment sheet.

The sheet has no reliable header names, so columns are identified purely by
position. Columns past the mapped range (for example the trailing note column)
are named `column<N>` and ignored.
"""

from typing import Dict, List, Tuple


SCHEMA_V1: Tuple[str, ...] = (
    "marketType",
    "salt",
    "collateralCapForGt",
    "maturity",
    "lendTakerFeeRatio",
    "lendMakerFeeRatio",
    "borrowTakerFeeRatio",
    "borrowMakerFeeRatio",
    "mintGtFeeRatio",
    "mintGtFeeRef",
    "liquidationLtv",
    "maxLtv",
    "liquidatable",
    "underlyingTokenAddr",
    "underlyingPriceFeedAddr",
    "underlyingHeartBeat",
    "underlyingName",
    "underlyingSymbol",
    "underlyingDecimals",
    "underlyingInitialPrice",
    "collateralTokenAddr",
    "collateralPriceFeedAddr",
    "collateralHeartBeat",
    "collateralName",
    "collateralSymbol",
    "collateralDecimals",
    "collateralInitialPrice",
    "gtKeyIdentifier",
)


def _insert_after(columns: Tuple[str, ...], anchor: str, name: str) -> Tuple[str, ...]:
    position = columns.index(anchor) + 1
    return columns[:position] + (name,) + columns[position:]


SCHEMA_V2: Tuple[str, ...] = _insert_after(
    _insert_after(SCHEMA_V1, "underlyingPriceFeedAddr", "underlyingBackupPriceFeedAddr"),
    "collateralPriceFeedAddr", "collateralBackupPriceFeedAddr",
)

SCHEMAS: Dict[str, Tuple[str, ...]] = {
    "v1": SCHEMA_V1,
    "v2": SCHEMA_V2,
}


def column_names(schema: str, count: int) -> List[str]:
    """Names for `count` positional columns under the given schema version"""
    try:
        mapped = SCHEMAS[schema]
    except KeyError:
        raise ValueError(f"Unknown schema '{schema}', expected one of: {', '.join(SCHEMAS)}") from None
    return [mapped[index] if index < len(mapped) else f"column{index}" for index in range(count)]


def has_backup_feeds(schema: str) -> bool:
    return "underlyingBackupPriceFeedAddr" in SCHEMAS[schema]
