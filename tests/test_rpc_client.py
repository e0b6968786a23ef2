from types import SimpleNamespace

import pytest

from usdrise_bridge.rpc_client import (
    RPCError,
    active_address,
    format_rpc_hint,
    get_all_coins,
    get_owned_objects,
    unwrap,
)

OWNER = "0x" + "ab" * 32


class StubResult:
    def __init__(self, data=None, ok=True, message="") -> None:
        self.result_data = data
        self.result_string = message
        self._ok = ok

    def is_ok(self) -> bool:
        return self._ok


class StubClient:
    def __init__(self, coins=(), objects=(), ok=True) -> None:
        self.config = SimpleNamespace(active_address=OWNER)
        self.coins = list(coins)
        self.objects = list(objects)
        self.ok = ok
        self.calls: list[tuple] = []

    def get_coin(self, coin_type, address=None, fetch_all=False):
        self.calls.append(("get_coin", coin_type, fetch_all))
        if not self.ok:
            return StubResult(ok=False, message="Invalid params")
        return StubResult(SimpleNamespace(data=self.coins))

    def get_objects(self, address=None, fetch_all=False):
        self.calls.append(("get_objects", fetch_all))
        return StubResult(SimpleNamespace(data=self.objects))


def test_unwrap_returns_result_data() -> None:
    assert unwrap(StubResult({"a": 1}), "Lookup") == {"a": 1}


def test_unwrap_failure_raises_rpc_error() -> None:
    with pytest.raises(RPCError) as excinfo:
        unwrap(StubResult(ok=False, message="boom"), "Lookup")

    assert excinfo.value.action == "Lookup"
    assert excinfo.value.message == "boom"
    assert str(excinfo.value) == "Lookup failed: boom"


def test_get_all_coins_fetches_every_page() -> None:
    client = StubClient(coins=["c1", "c2"])

    assert get_all_coins(client, OWNER, "0x2::sui::SUI") == ["c1", "c2"]
    assert client.calls == [("get_coin", "0x2::sui::SUI", True)]


def test_get_all_coins_failure_names_the_coin_type() -> None:
    with pytest.raises(RPCError) as excinfo:
        get_all_coins(StubClient(ok=False), OWNER, "0x2::sui::SUI")

    assert "0x2::sui::SUI" in str(excinfo.value)


def test_get_owned_objects_fetches_every_page() -> None:
    client = StubClient(objects=["o1"])

    assert get_owned_objects(client, OWNER) == ["o1"]
    assert client.calls == [("get_objects", True)]


def test_active_address_reads_client_config() -> None:
    assert active_address(StubClient()) == OWNER


def test_format_rpc_hint_recognises_missing_function() -> None:
    assert "package id" in format_rpc_hint("MoveAbort FunctionNotFound")
    assert format_rpc_hint("something else") is None
    assert format_rpc_hint(None) is None


def test_rpc_error_appends_hint() -> None:
    error = RPCError("Transaction execution", "InsufficientCoinBalance in command 1")

    assert "Hint: The split amount exceeds the coin balance" in str(error)
