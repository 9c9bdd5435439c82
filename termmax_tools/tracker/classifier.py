# termmax_tools/tracker/classifier.py

from typing import Any, Dict, List, Optional, Tuple

from ..core.logging import LoggingMixin
from ..types import (
    RawEventLog,
    EvmAddress,
    EvmHash,
    OperationType,
    Event,
    SwapEvent,
    UpdateOrderEvent,
    WithdrawAssetsEvent,
    OrderInitializedEvent,
    EventsCollection,
    ProcessingError,
    create_classify_error,
)
from .query import QueryResult


class MissingArgumentError(ValueError):
    def __init__(self, event_name: str, missing: List[str]):
        self.event_name = event_name
        self.missing = missing
        super().__init__(f"Missing required parameters in {event_name} event: {', '.join(missing)}")


def classify_update_order(ft_change: int, xt_change: int) -> OperationType:
    """
    First match wins: any positive leg makes a Deposit, otherwise any negative
    leg makes a Withdraw, otherwise the update only touched the curve.
    """
    if ft_change > 0 or xt_change > 0:
        return "Deposit"
    if ft_change < 0 or xt_change < 0:
        return "Withdraw"
    return "UpdateCurve"


def _require(log: RawEventLog, *names: str) -> None:
    missing = [name for name in names if not log.args.get(name)]
    if missing:
        raise MissingArgumentError(log.event, missing)


def _require_present(log: RawEventLog, *names: str) -> None:
    missing = [name for name in names if log.args.get(name) is None]
    if missing:
        raise MissingArgumentError(log.event, missing)


def _amount(args: Dict[str, Any], name: str) -> int:
    return int(args.get(name) or 0)


def _address(args: Dict[str, Any], name: str) -> EvmAddress:
    return EvmAddress(args.get(name) or "")


def _header(log: RawEventLog, operation_type: OperationType) -> Dict[str, Any]:
    return {
        "event_type": log.event,
        "operation_type": operation_type,
        "block_number": log.block_number,
        "transaction_hash": EvmHash(log.transaction_hash),
        "log_index": log.log_index,
    }


def swap_from_log(log: RawEventLog) -> SwapEvent:
    _require(log, "tokenIn", "tokenOut")
    args = log.args

    # Exact-in swaps name the input amount, exact-out swaps name the output amount
    if log.event == "SwapTokenToExactToken":
        amount_in, amount_out = _amount(args, "netTokenIn"), _amount(args, "tokenAmtOut")
    else:
        amount_in, amount_out = _amount(args, "tokenAmtIn"), _amount(args, "netTokenOut")

    return SwapEvent(
        **_header(log, "Swap"),
        token_in=_address(args, "tokenIn"),
        token_out=_address(args, "tokenOut"),
        caller=_address(args, "caller"),
        recipient=_address(args, "recipient"),
        token_in_amount=amount_in,
        token_out_amount=amount_out,
        fee_amount=_amount(args, "feeAmt"),
    )


def update_from_log(log: RawEventLog) -> UpdateOrderEvent:
    _require_present(log, "ftChangeAmt", "xtChangeAmt")
    args = log.args
    ft_change = int(args["ftChangeAmt"])
    xt_change = int(args["xtChangeAmt"])

    return UpdateOrderEvent(
        **_header(log, classify_update_order(ft_change, xt_change)),
        ft_change_amt=ft_change,
        xt_change_amt=xt_change,
        gt_id=_amount(args, "gtId"),
        max_xt_reserve=_amount(args, "maxXtReserve"),
        swap_trigger=_address(args, "swapTrigger"),
    )


def withdraw_from_log(log: RawEventLog) -> WithdrawAssetsEvent:
    _require(log, "token")
    _require_present(log, "amount")
    args = log.args

    return WithdrawAssetsEvent(
        **_header(log, "Withdraw"),
        token=_address(args, "token"),
        owner=EvmAddress(args.get("owner") or args.get("caller") or ""),
        recipient=_address(args, "recipient"),
        amount=int(args["amount"]),
    )


def creation_from_log(log: RawEventLog) -> OrderInitializedEvent:
    _require(log, "market", "maker")
    args = log.args

    return OrderInitializedEvent(
        **_header(log, "Create"),
        market=_address(args, "market"),
        maker=_address(args, "maker"),
        max_xt_reserve=_amount(args, "maxXtReserve"),
        swap_trigger=_address(args, "swapTrigger"),
    )


BUILDERS = {
    "SwapExactTokenToToken": swap_from_log,
    "SwapTokenToExactToken": swap_from_log,
    "UpdateOrder": update_from_log,
    "WithdrawAssets": withdraw_from_log,
    "OrderInitialized": creation_from_log,
}


class EventClassifier(LoggingMixin):
    """Turns decoded logs into typed, categorized order events"""

    def classify(self, query_result: QueryResult) -> EventsCollection:
        categories: Dict[str, List[Event]] = {
            "swaps": [], "deposits": [], "withdrawals": [], "update_curves": [], "creations": [],
        }
        errors: List[ProcessingError] = list(query_result.errors)

        for kind, logs in query_result.logs_by_kind.items():
            builder = BUILDERS.get(kind)
            if builder is None:
                self.log_warning("Skipping unsupported event kind", event_name=kind, count=len(logs))
                continue

            for log in logs:
                event, error = self._build(builder, log)
                if event is None:
                    errors.append(error)
                    continue
                categories[self._category(event)].append(event)

        collection = EventsCollection(
            swaps=tuple(categories["swaps"]),
            deposits=tuple(categories["deposits"]),
            withdrawals=tuple(categories["withdrawals"]),
            update_curves=tuple(categories["update_curves"]),
            creations=tuple(categories["creations"]),
            incomplete=query_result.incomplete,
            errors=tuple(errors),
        )

        counts = collection.counts()
        self.log_info("Events classified",
                      total=counts["total"],
                      swaps=counts["swaps"],
                      deposits=counts["deposits"],
                      withdrawals=counts["withdrawals"],
                      update_curves=counts["update_curves"],
                      creations=counts["creations"],
                      skipped=len(errors) - len(query_result.errors))
        return collection

    def _build(self, builder, log: RawEventLog) -> Tuple[Optional[Event], Optional[ProcessingError]]:
        try:
            return builder(log), None
        except (MissingArgumentError, ValueError, TypeError) as e:
            self.log_error("Skipping event",
                           event_name=log.event,
                           tx_hash=log.transaction_hash,
                           log_index=log.log_index,
                           error=str(e))
            error_type = "missing_argument" if isinstance(e, MissingArgumentError) else "invalid_argument"
            return None, create_classify_error(
                error_type,
                str(e),
                event_name=log.event,
                tx_hash=log.transaction_hash,
                log_index=log.log_index,
            )

    @staticmethod
    def _category(event: Event) -> str:
        if isinstance(event, SwapEvent):
            return "swaps"
        if isinstance(event, OrderInitializedEvent):
            return "creations"
        if isinstance(event, WithdrawAssetsEvent):
            return "withdrawals"
        return {
            "Deposit": "deposits",
            "Withdraw": "withdrawals",
            "UpdateCurve": "update_curves",
        }[event.operation_type]
