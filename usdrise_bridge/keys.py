"""Sui signing key loading.

Sui exports private keys as bech32 strings under the ``suiprivkey`` prefix. The
decoded payload is a one byte signature-scheme flag followed by the 32 byte
secret. Older keystores hold the same 33 bytes as plain base64; both forms are
normalised to the bech32 decode path so that checksum and length checks are
shared. The result is handed to pysui as the base64 keystring its keystores
use.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

from bech32 import bech32_decode, bech32_encode, convertbits
from pysui.sui.sui_crypto import SuiKeyPair, keypair_from_keystring

from .errors import InvalidKey

logger = logging.getLogger(__name__)

SUI_PRIVATE_KEY_PREFIX = "suiprivkey"
PLACEHOLDER_KEY = "YOUR_SUI_PRIVATE_KEY_IN_BASE64"

ED25519_FLAG = 0x00
SECRET_KEY_LENGTH = 32


@dataclass(frozen=True)
class SuiKey:
    """Ed25519 secret in the form pysui accepts for signing."""

    secret: bytes
    flag: int = ED25519_FLAG

    @property
    def keystring(self) -> str:
        return base64.b64encode(bytes([self.flag]) + self.secret).decode("ascii")

    def to_keypair(self) -> SuiKeyPair:
        return keypair_from_keystring(self.keystring)


def encode_private_key(secret: bytes, flag: int = ED25519_FLAG) -> str:
    """Encode a raw 32-byte secret as a ``suiprivkey1...`` bech32 string."""

    if len(secret) != SECRET_KEY_LENGTH:
        raise InvalidKey(f"Expected a {SECRET_KEY_LENGTH}-byte secret, got {len(secret)} bytes")
    words = convertbits(bytes([flag]) + secret, 8, 5)
    return bech32_encode(SUI_PRIVATE_KEY_PREFIX, words)


def _decode_bech32_payload(value: str) -> bytes:
    hrp, words = bech32_decode(value)
    if hrp != SUI_PRIVATE_KEY_PREFIX or words is None:
        raise InvalidKey("Failed to decode private key: invalid suiprivkey bech32 string")
    payload = convertbits(words, 5, 8, False)
    if payload is None:
        raise InvalidKey("Failed to decode private key: invalid bech32 padding")
    return bytes(payload)


def decode_private_key(value: str) -> tuple[int, bytes]:
    """Return ``(scheme_flag, secret)`` for a bech32 or base64 encoded key."""

    if not value or value.strip() == PLACEHOLDER_KEY:
        raise InvalidKey(
            "Invalid private key. Set USDRISE_PRIVATE_KEY (or bridge.private_key) to your Sui key."
        )
    value = value.strip()

    if not value.startswith(SUI_PRIVATE_KEY_PREFIX + "1"):
        try:
            raw = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidKey(f"Failed to decode private key: {exc}") from exc
        value = bech32_encode(SUI_PRIVATE_KEY_PREFIX, convertbits(raw, 8, 5))

    payload = _decode_bech32_payload(value)
    if len(payload) != SECRET_KEY_LENGTH + 1:
        raise InvalidKey(
            f"Failed to decode private key: expected {SECRET_KEY_LENGTH + 1} bytes "
            f"(flag + secret), got {len(payload)}"
        )
    return payload[0], payload[1:]


def load_key(value: str | None) -> SuiKey:
    """Decode *value* into a :class:`SuiKey`; only Ed25519 keys are accepted."""

    flag, secret = decode_private_key(value or "")
    if flag != ED25519_FLAG:
        raise InvalidKey(f"Unsupported key scheme flag {flag:#04x}; only Ed25519 keys are supported")
    logger.debug("Loaded Ed25519 signing key")
    return SuiKey(secret=secret, flag=flag)
