import json

import pytest
import requests

from usdrise_bridge.errors import InvalidInput, NotFound, RemoteFailure
from usdrise_bridge.status import GMPState, fetch_gmp_status, format_gmp_report

BASE_URL = "https://testnet.axelarscan.io"


def _response(status_code: int, body: bytes) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.encoding = "utf-8"
    response.url = "https://testnet.axelarscan.io/api/gmp/abc"
    return response


class StubSession:
    def __init__(self, response: requests.Response | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.urls: list[str] = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


def _fetch(status_code: int, body) -> tuple:
    raw = body if isinstance(body, bytes) else json.dumps(body).encode()
    session = StubSession(_response(status_code, raw))
    status = fetch_gmp_status("abc", BASE_URL, session=session)
    return status, session


def test_single_request_to_gmp_endpoint() -> None:
    _, session = _fetch(200, {"status": "called"})

    assert session.urls == ["https://testnet.axelarscan.io/api/gmp/abc"]


@pytest.mark.parametrize("body", [b"", b"null"])
def test_empty_body_is_not_yet_indexed(body) -> None:
    status, _ = _fetch(200, body)

    assert status.state is GMPState.NOT_INDEXED
    assert "propagating" in format_gmp_report(status)[0]


def test_status_and_call_only_is_pending_execution() -> None:
    status, _ = _fetch(
        200,
        {"status": "called", "call": {"chain": "sui", "transactionHash": "abc"}},
    )

    assert status.state is GMPState.PENDING
    report = "\n".join(format_gmp_report(status))
    assert "pending execution" in report
    assert "https://testnet.axelarscan.io/gmp/abc" in report
    assert "Executed" not in report
    assert "Gas Paid: N/A" in report


def test_executed_body_reports_destination_details() -> None:
    status, _ = _fetch(
        200,
        {
            "status": "executed",
            "executed": {"chain": "neutron", "transactionHash": "DEST"},
            "gas_used": {"amount": "120"},
        },
    )

    assert status.state is GMPState.EXECUTED
    report = "\n".join(format_gmp_report(status))
    assert "Executed on Destination Chain: neutron" in report
    assert "Transaction Hash: DEST" in report
    assert "Gas Used: 120" in report


def test_executed_body_falls_back_to_na() -> None:
    status, _ = _fetch(200, {"executed": {"chain": "neutron"}})

    report = "\n".join(format_gmp_report(status))
    assert "Transaction Hash: N/A" in report
    assert "Gas Used: N/A" in report


def test_error_body_prints_payload_verbatim() -> None:
    error = {"message": "execution reverted", "code": 3}
    status, _ = _fetch(200, {"status": "error", "error": error})

    assert status.state is GMPState.FAILED
    report = "\n".join(format_gmp_report(status))
    assert json.dumps(error, indent=2) in report


def test_http_404_is_not_found() -> None:
    with pytest.raises(NotFound) as excinfo:
        _fetch(404, b"")

    assert "not found" in str(excinfo.value)


def test_http_500_is_remote_failure() -> None:
    with pytest.raises(RemoteFailure):
        _fetch(500, b"oops")


def test_connection_error_is_remote_failure() -> None:
    session = StubSession(error=requests.ConnectionError("boom"))

    with pytest.raises(RemoteFailure):
        fetch_gmp_status("abc", BASE_URL, session=session)


def test_malformed_json_is_remote_failure() -> None:
    with pytest.raises(RemoteFailure):
        _fetch(200, b"{not json")


def test_missing_hash_is_rejected() -> None:
    with pytest.raises(InvalidInput):
        fetch_gmp_status("", BASE_URL, session=StubSession())
