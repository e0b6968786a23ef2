"""Input validation for transfer requests.

Everything here runs before any network call so malformed amounts and
addresses never reach the node.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from bech32 import bech32_decode, convertbits

from .errors import InvalidInput

_AMOUNT_RE = re.compile(r"^\d+$")
_EVM_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

U64_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class TransferRequest:
    amount: int
    destination: str
    destination_bytes: bytes


def parse_amount(raw: str | int) -> int:
    """Parse a base-unit amount; it must be a positive integer that fits in u64."""

    text = str(raw).strip()
    if not _AMOUNT_RE.match(text):
        raise InvalidInput(f"Invalid amount {raw!r}. Must be a positive integer string.")
    amount = int(text)
    if amount <= 0:
        raise InvalidInput(f"Invalid amount {raw!r}. Must be a positive integer string.")
    if amount > U64_MAX:
        raise InvalidInput(f"Invalid amount {raw!r}. Exceeds the u64 coin balance range.")
    return amount


def decode_bech32_destination(address: str, prefix: str) -> bytes:
    if not address.startswith(prefix + "1"):
        raise InvalidInput(f"Invalid destination address. Must start with '{prefix}1'.")
    hrp, words = bech32_decode(address)
    if hrp != prefix or words is None:
        raise InvalidInput(f"Invalid destination address {address!r}: bad bech32 checksum")
    decoded = convertbits(words, 5, 8, False)
    if not decoded:
        raise InvalidInput(f"Invalid destination address {address!r}: bad bech32 payload")
    return bytes(decoded)


def decode_evm_destination(address: str) -> bytes:
    if not _EVM_ADDRESS_RE.match(address):
        raise InvalidInput(
            f"Invalid destination address {address!r}. Expected 0x followed by 40 hex characters."
        )
    return bytes.fromhex(address[2:])


def decode_destination(address: str, destination_format: str, prefix: str = "neutron") -> bytes:
    """Return the raw address bytes ITS forwards to the destination chain."""

    address = address.strip()
    if destination_format == "bech32":
        return decode_bech32_destination(address, prefix)
    if destination_format == "evm":
        return decode_evm_destination(address)
    raise InvalidInput(f"Unsupported destination format {destination_format!r}")


def build_transfer_request(
    amount: str | int, destination: str, destination_format: str, prefix: str = "neutron"
) -> TransferRequest:
    return TransferRequest(
        amount=parse_amount(amount),
        destination=destination.strip(),
        destination_bytes=decode_destination(destination, destination_format, prefix),
    )
