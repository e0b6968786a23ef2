"""Axelarscan GMP status lookup.

A single GET is issued per invocation; there is no polling loop. The response
is classified into one of the :class:`GMPState` values and rendered as a short
report for the terminal.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

import requests
from requests import RequestException

from .errors import InvalidInput, NotFound, RemoteFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class GMPState(str, Enum):
    NOT_INDEXED = "not_indexed"
    PENDING = "pending"
    EXECUTED = "executed"
    FAILED = "failed"


@dataclass
class GMPStatus:
    tx_hash: str
    state: GMPState
    body: Dict[str, Any] = field(default_factory=dict)
    tracking_url: str | None = None


def gmp_api_url(base_url: str, tx_hash: str) -> str:
    return f"{base_url.rstrip('/')}/api/gmp/{tx_hash}"


def gmp_tracking_url(base_url: str, tx_hash: str) -> str:
    return f"{base_url.rstrip('/')}/gmp/{tx_hash}"


def classify_gmp_body(tx_hash: str, body: Any, base_url: str) -> GMPStatus:
    """Map a decoded Axelarscan body onto a :class:`GMPStatus`."""

    tracking_url = gmp_tracking_url(base_url, tx_hash)
    if body is None or body == "":
        return GMPStatus(tx_hash, GMPState.NOT_INDEXED, tracking_url=tracking_url)
    if not isinstance(body, dict):
        raise RemoteFailure(f"Unexpected GMP response payload: {body!r}")
    if body.get("executed"):
        state = GMPState.EXECUTED
    elif body.get("error"):
        state = GMPState.FAILED
    else:
        state = GMPState.PENDING
    return GMPStatus(tx_hash, state, body=body, tracking_url=tracking_url)


def fetch_gmp_status(
    tx_hash: str,
    base_url: str,
    *,
    session: requests.Session | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> GMPStatus:
    """Query Axelarscan once for the GMP status of *tx_hash*."""

    tx_hash = (tx_hash or "").strip()
    if not tx_hash:
        raise InvalidInput("Transaction hash not provided. Usage: usdrise monitor <SUI_TRANSACTION_HASH>")

    url = gmp_api_url(base_url, tx_hash)
    logger.info("Querying Axelar GMP API: %s", url)
    http = session or requests.Session()
    try:
        response = http.get(url, timeout=timeout)
    except RequestException as exc:
        logger.error(
            "GMP status request failed: %s", exc, exc_info=logger.isEnabledFor(logging.DEBUG)
        )
        raise RemoteFailure(f"An error occurred while monitoring the transfer: {exc}") from exc

    if response.status_code == 404:
        raise NotFound(
            "Transaction hash not found on Axelar. It might not have been indexed yet; "
            "verify the hash and try again in a few moments."
        )
    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        logger.error("GMP API HTTP error %s from %s", response.status_code, url)
        raise RemoteFailure(f"An error occurred while monitoring the transfer: {exc}") from exc

    if not response.text.strip():
        body: Any = None
    else:
        try:
            body = response.json()
        except ValueError as exc:
            logger.debug("GMP JSON parse error: %s", response.text, exc_info=True)
            raise RemoteFailure("Axelarscan returned malformed JSON") from exc
    return classify_gmp_body(tx_hash, body, base_url)


def _amount(section: Any) -> str:
    if not isinstance(section, dict):
        return "N/A"
    amount = section.get("amount") or "N/A"
    denom = section.get("denom") or ""
    return f"{amount} {denom}".rstrip()


def format_gmp_report(status: GMPStatus) -> List[str]:
    """Return the human-readable lines describing *status*."""

    if status.state is GMPState.NOT_INDEXED:
        return [
            "No data found yet. The transaction may still be propagating. Try again in a moment."
        ]

    body = status.body
    lines = ["--- GMP Transfer Status ---", f"Status: {body.get('status', 'N/A')}"]

    call = body.get("call")
    if isinstance(call, dict):
        lines.append(f"Source Chain: {call.get('chain', 'N/A')}")
        lines.append(f"   - Transaction Hash: {call.get('transactionHash', 'N/A')}")
        lines.append(f"   - Gas Paid: {_amount(body.get('gas_paid'))}")

    if status.state is GMPState.EXECUTED:
        executed = body.get("executed")
        executed = executed if isinstance(executed, dict) else {}
        lines.append(f"Executed on Destination Chain: {executed.get('chain', 'N/A')}")
        lines.append(f"   - Transaction Hash: {executed.get('transactionHash', 'N/A')}")
        lines.append(f"   - Gas Used: {_amount(body.get('gas_used'))}")
    elif status.state is GMPState.FAILED:
        lines.append("Error during execution:")
        lines.append(json.dumps(body.get("error"), indent=2))
    else:
        lines.append("Transfer is still pending execution on the destination chain.")
        lines.append(f"You can track the live status here: {status.tracking_url}")
    return lines
