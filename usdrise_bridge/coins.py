"""Coin selection for exact-amount token transfers and for gas payment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List

from pysui.sui.sui_types.scalars import ObjectID, SuiU64

from .config import SUI_COIN_TYPE
from .errors import InsufficientBalance
from .rpc_client import get_all_coins

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoinBalance:
    coin_object_id: str
    balance: int

    @classmethod
    def from_sui(cls, coin: Any) -> "CoinBalance":
        return cls(coin_object_id=str(coin.coin_object_id), balance=int(coin.balance))


@dataclass(frozen=True)
class CoinSelection:
    """Which coin to split from (or pay gas with), and which coins to merge into it first."""

    primary: CoinBalance
    merged: tuple[CoinBalance, ...] = ()

    @property
    def requires_merge(self) -> bool:
        return bool(self.merged)


def fetch_coin_balances(client: Any, owner: str, coin_type: str) -> List[CoinBalance]:
    """Return every coin of *coin_type* owned by *owner*, in node order."""

    return [CoinBalance.from_sui(coin) for coin in get_all_coins(client, owner, coin_type)]


def plan_coin_selection(
    coins: Iterable[CoinBalance], amount: int, coin_type: str | None = None
) -> CoinSelection:
    """Choose a split source for *amount*.

    The first coin holding at least *amount* is split directly. Otherwise every
    coin is merged into the first one, provided the total covers *amount*.
    """

    coins = list(coins)
    total = sum(coin.balance for coin in coins)
    if total < amount or not coins:
        raise InsufficientBalance(amount, total, coin_type)

    for coin in coins:
        if coin.balance >= amount:
            logger.info("Found a single coin with sufficient balance: %s", coin.coin_object_id)
            return CoinSelection(primary=coin)

    logger.info("No single coin is large enough; merging %d coins", len(coins))
    return CoinSelection(primary=coins[0], merged=tuple(coins[1:]))


def plan_gas_payment(coins: Iterable[CoinBalance], budget: int, reserved: int = 0) -> CoinSelection:
    """Choose the gas coin for *budget* plus *reserved* SUI split from it during execution.

    The gas coin alone must cover *budget*. When it does not also cover
    *reserved*, further coins are merged into it, in node order, until it does.
    """

    coins = list(coins)
    needed = budget + reserved
    total = sum(coin.balance for coin in coins)

    for coin in coins:
        if coin.balance >= needed:
            return CoinSelection(primary=coin)

    primary = next((coin for coin in coins if coin.balance >= budget), None)
    if primary is None or total < needed:
        raise InsufficientBalance(needed, total, SUI_COIN_TYPE)

    merged = []
    covered = primary.balance
    for coin in coins:
        if covered >= needed:
            break
        if coin is primary:
            continue
        merged.append(coin)
        covered += coin.balance
    return CoinSelection(primary=primary, merged=tuple(merged))


def select_transfer_coin(
    txn: Any,
    coins: Iterable[CoinBalance],
    amount: int,
    coin_type: str | None = None,
) -> Any:
    """Add the split (and merge, if needed) commands yielding a coin worth *amount*."""

    selection = plan_coin_selection(coins, amount, coin_type)
    primary = ObjectID(selection.primary.coin_object_id)
    if selection.requires_merge:
        txn.merge_coins(
            merge_to=primary,
            merge_from=[ObjectID(coin.coin_object_id) for coin in selection.merged],
        )
        logger.info(
            "Merged %d coins into %s",
            len(selection.merged) + 1,
            selection.primary.coin_object_id,
        )
    result = txn.split_coin(coin=primary, amounts=[SuiU64(amount)])
    return result[0] if isinstance(result, (list, tuple)) else result
