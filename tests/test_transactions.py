import pytest

from usdrise_bridge.errors import RemoteFailure
from usdrise_bridge.rpc_client import RPCError
from usdrise_bridge.transactions import execute, single


class StubResult:
    def __init__(self, data=None, ok=True, message="") -> None:
        self.result_data = data
        self.result_string = message
        self._ok = ok

    def is_ok(self) -> bool:
        return self._ok


class StubTransaction:
    def __init__(self, result) -> None:
        self.result = result
        self.calls: list[dict] = []

    def execute(self, *, gas_budget, use_gas_object=None):
        self.calls.append({"gas_budget": gas_budget, "use_gas_object": use_gas_object})
        return self.result


class SerializableResponse:
    def __init__(self, payload) -> None:
        self.payload = payload

    def to_dict(self):
        return self.payload


def _response(status: str = "success", **extra) -> dict:
    body = {"digest": "digest-1", "effects": {"status": {"status": status, **extra}}, "events": []}
    return body


def test_execute_passes_budget_and_gas_coin() -> None:
    txn = StubTransaction(StubResult(_response()))

    response = execute(txn, 200_000_000, "0x51")

    assert response["digest"] == "digest-1"
    assert txn.calls == [{"gas_budget": "200000000", "use_gas_object": "0x51"}]


def test_execute_accepts_pysui_response_objects() -> None:
    txn = StubTransaction(StubResult(SerializableResponse(_response())))

    assert execute(txn, 1)["digest"] == "digest-1"


def test_failed_effects_raise_remote_failure_with_hint() -> None:
    txn = StubTransaction(
        StubResult(_response("failure", error="MoveAbort ... FunctionNotFound in command 2"))
    )

    with pytest.raises(RemoteFailure) as excinfo:
        execute(txn, 1)

    assert "digest-1 failed" in str(excinfo.value)
    assert "Hint:" in str(excinfo.value)


def test_rejected_submission_raises_rpc_error() -> None:
    txn = StubTransaction(StubResult(ok=False, message="InsufficientGas"))

    with pytest.raises(RPCError) as excinfo:
        execute(txn, 1)

    assert "Transaction execution failed" in str(excinfo.value)
    assert "Fund the sender" in str(excinfo.value)


def test_single_unwraps_list_results() -> None:
    assert single(["a", "b"]) == "a"
    assert single("a") == "a"
    with pytest.raises(ValueError):
        single([])
