"""Exception taxonomy shared by the USDRise bridge tooling."""

from __future__ import annotations


class BridgeError(RuntimeError):
    """Base class for failures surfaced to the CLI."""


class InvalidKey(BridgeError):
    """Raised when the configured signing secret cannot be used."""


class InvalidInput(BridgeError):
    """Raised when an amount, address or required object is malformed or missing."""


class InsufficientBalance(BridgeError):
    """Raised when the owned coins cannot cover a transfer amount."""

    def __init__(self, required: int, available: int, coin_type: str | None = None) -> None:
        label = coin_type.rsplit("::", 1)[-1] if coin_type else "token"
        super().__init__(
            f"Insufficient {label} balance. Required: {required}, Total available: {available}."
        )
        self.required = required
        self.available = available


class NotFound(BridgeError):
    """Raised when a remote API reports that a resource does not exist (HTTP 404)."""


class RemoteFailure(BridgeError):
    """Raised when a node or HTTP API fails or rejects a request."""
