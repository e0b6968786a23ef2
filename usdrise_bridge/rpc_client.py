"""Sui fullnode access through pysui.

The helpers wrap pysui's ``SyncClient`` so that every failed ``SuiRpcResult``
surfaces as :class:`RPCError` with a remediation hint where one is known. No
retries are attempted.
"""

from __future__ import annotations

import logging
from typing import Any, List

from pysui import SuiConfig, SyncClient
from pysui.sui.sui_types import SuiAddress

from .config import BridgeConfig
from .errors import RemoteFailure
from .keys import SuiKey

logger = logging.getLogger(__name__)


class RPCError(RemoteFailure):
    """Raised when the Sui node rejects or fails a request."""

    def __init__(self, action: str, message: str) -> None:
        hint = format_rpc_hint(message)
        text = f"{action} failed: {message}"
        if hint:
            text = f"{text}\nHint: {hint}"
        super().__init__(text)
        self.action = action
        self.message = message


def format_rpc_hint(message: Any) -> str | None:
    """Return a short remediation hint for common Sui execution failures."""

    if message is None:
        return None
    message = str(message)

    if "FunctionNotFound" in message:
        return (
            "The Move function does not exist in the referenced package. Check the package id "
            "and try another --sequence; deployed ITS wrappers differ between releases."
        )
    if "InsufficientGas" in message or "GasBalanceTooLow" in message:
        return "The gas coin cannot cover the budget. Fund the sender with SUI or lower gas_budget."
    if "InsufficientCoinBalance" in message:
        return "The split amount exceeds the coin balance. Lower the amount or gas_amount."
    if "is not available for consumption" in message or "ObjectVersionUnavailable" in message:
        return "An input object changed while the transaction was built. Re-run the command."
    if "TypeMismatch" in message or "CommandArgumentError" in message:
        return (
            "An argument does not match the Move signature. Verify token_type, token_id and the "
            "object ids for this sequence."
        )
    return None


def sui_config(config: BridgeConfig, key: SuiKey) -> SuiConfig:
    """pysui configuration for the configured network, signing with *key*."""

    return SuiConfig.user_config(rpc_url=config.resolved_rpc_url, prv_keys=[key.keystring])


def create_client(config: BridgeConfig, key: SuiKey) -> SyncClient:
    """Instantiate a client for the configured network."""

    logger.debug("Connecting to %s", config.resolved_rpc_url)
    return SyncClient(sui_config(config, key))


def active_address(client: Any) -> str:
    return str(client.config.active_address)


def unwrap(result: Any, action: str) -> Any:
    """Return ``result.result_data`` or raise :class:`RPCError`."""

    if result.is_ok():
        return result.result_data
    logger.error("%s failed: %s", action, result.result_string)
    raise RPCError(action, str(result.result_string))


def get_all_coins(client: Any, owner: str, coin_type: str) -> List[Any]:
    """Every coin object of *coin_type* owned by *owner*, following pagination."""

    result = client.get_coin(coin_type=coin_type, address=SuiAddress(owner), fetch_all=True)
    return list(unwrap(result, f"Fetching {coin_type} coins").data)


def get_owned_objects(client: Any, owner: str) -> List[Any]:
    """Every object owned by *owner*, following pagination."""

    result = client.get_objects(address=SuiAddress(owner), fetch_all=True)
    return list(unwrap(result, "Fetching owned objects").data)
