"""Programmable transactions built and executed through pysui.

Commands are recorded on a pysui ``SuiTransaction``; pysui resolves object
versions, shared-object mutability and the signature when the transaction is
executed. This module adds the argument helpers the Move calls need, gas coin
preparation and a uniform check of the execution effects.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pysui.sui.sui_txn.sync_transaction import SuiTransaction
from pysui.sui.sui_types import SuiAddress
from pysui.sui.sui_types.scalars import ObjectID, SuiString, SuiU8, SuiU64, SuiU256

from .coins import CoinBalance, plan_gas_payment
from .errors import RemoteFailure
from .rpc_client import format_rpc_hint, unwrap

logger = logging.getLogger(__name__)


def new_transaction(client: Any) -> SuiTransaction:
    return SuiTransaction(client=client)


def object_arg(object_id: str) -> ObjectID:
    return ObjectID(object_id)


def address_arg(address: str) -> SuiAddress:
    return SuiAddress(address)


def u64_arg(value: int) -> SuiU64:
    return SuiU64(value)


def u256_arg(value: int) -> SuiU256:
    return SuiU256(value)


def string_arg(value: str) -> SuiString:
    return SuiString(value)


def bytes_arg(data: bytes) -> List[SuiU8]:
    """``vector<u8>`` argument."""

    return [SuiU8(byte) for byte in data]


def single(result: Any) -> Any:
    """First result of a command that may return one argument or a list."""

    if isinstance(result, (list, tuple)):
        if not result:
            raise ValueError("Command produced no results")
        return result[0]
    return result


def prepare_gas(txn: Any, coins: List[CoinBalance], budget: int, reserved: int = 0) -> str:
    """Choose the gas coin and merge extra SUI into it so *reserved* can be split off.

    Must run before any command that splits from ``txn.gas``. Returns the id of
    the coin to pass as the gas payment.
    """

    plan = plan_gas_payment(coins, budget, reserved)
    if plan.merged:
        txn.merge_coins(
            merge_to=txn.gas, merge_from=[object_arg(coin.coin_object_id) for coin in plan.merged]
        )
        logger.info("Merged %d SUI coins into the gas coin", len(plan.merged))
    return plan.primary.coin_object_id


def _as_dict(data: Any) -> Dict[str, Any]:
    if isinstance(data, dict):
        return data
    if hasattr(data, "to_dict"):
        return data.to_dict()
    raise RemoteFailure(f"Unexpected execution response: {data!r}")


def execute(txn: Any, gas_budget: int, gas_coin: str | None = None) -> Dict[str, Any]:
    """Sign and submit *txn* as one unit; raise if the node or the effects report failure.

    Returns the transaction response as a JSON mapping (``digest``,
    ``effects``, ``events``).
    """

    logger.info("Executing transaction with gas budget %d", gas_budget)
    result = txn.execute(gas_budget=str(gas_budget), use_gas_object=gas_coin)
    response = _as_dict(unwrap(result, "Transaction execution"))

    status = (response.get("effects") or {}).get("status") or {}
    if status and status.get("status") != "success":
        error = status.get("error", "unknown error")
        message = f"Transaction {response.get('digest')} failed: {error}"
        hint = format_rpc_hint(error)
        if hint:
            message = f"{message}\nHint: {hint}"
        raise RemoteFailure(message)
    return response
