"""Registration and transfer transactions for the Axelar Interchain Token Service.

Each operation assembles one programmable transaction, signs it with the
configured key and submits it as a single unit. After execution the event list
is scanned for the one event type the operation is expected to emit; a missing
event is logged as a warning because the node already accepted the
transaction.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .coins import CoinBalance, fetch_coin_balances, select_transfer_coin
from .config import SUI_CLOCK_ID, SUI_COIN_TYPE, BridgeConfig
from .errors import InvalidInput
from .rpc_client import active_address, get_owned_objects
from .transactions import (
    address_arg,
    bytes_arg,
    execute,
    new_transaction,
    object_arg,
    prepare_gas,
    single,
    string_arg,
    u64_arg,
    u256_arg,
)
from .validation import TransferRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpectedEvent:
    """Event emitted by a successful operation and the payload field to report."""

    type_fragment: str
    field: str
    suffix_only: bool = False

    def matches(self, event_type: str) -> bool:
        if self.suffix_only:
            return event_type.endswith(self.type_fragment)
        return self.type_fragment in event_type


COIN_REGISTERED_WITH_CAP = ExpectedEvent("interchain_token_service::CoinRegistered", "token_id")
COIN_REGISTERED = ExpectedEvent("::events::CoinRegistered", "token_id", suffix_only=True)
INTERCHAIN_TRANSFER = ExpectedEvent("::events::InterchainTransfer", "amount")


@dataclass
class SubmissionResult:
    digest: str
    events: List[Dict[str, Any]] = field(default_factory=list)
    event: Optional[Dict[str, Any]] = None
    value: Any = None
    raw: Dict[str, Any] = field(default_factory=dict)


def extract_event_field(
    events: List[Dict[str, Any]], expected: ExpectedEvent
) -> tuple[Optional[Dict[str, Any]], Any]:
    """Return the first matching event and its *expected.field* value (or ``None``)."""

    for event in events:
        if expected.matches(str(event.get("type", ""))):
            parsed = event.get("parsedJson") or {}
            value = parsed.get(expected.field) if isinstance(parsed, dict) else None
            return event, value
    return None, None


# Transfer call sequences ------------------------------------------------------


@dataclass
class TransferContext:
    """State shared by the steps of one transfer transaction."""

    txn: Any
    client: Any
    config: BridgeConfig
    request: TransferRequest
    sender: str
    coin: Any = None


@dataclass(frozen=True)
class TransferSequence:
    """Named ordering of Move calls that moves a coin through ITS."""

    name: str
    description: str
    required: tuple[str, ...]
    obtain_coin: Callable[[TransferContext], Any]
    send: Callable[[TransferContext], None]


def _mint_coin(ctx: TransferContext) -> Any:
    config = ctx.config
    return single(
        ctx.txn.move_call(
            target=f"{config.package_id}::usdrise::mint",
            arguments=[
                object_arg(config.treasury_cap_id),
                u64_arg(ctx.request.amount),
                address_arg(ctx.sender),
            ],
        )
    )


def _wallet_coin(ctx: TransferContext) -> Any:
    coin_type = ctx.config.resolved_token_type
    logger.info("Searching for %s coins owned by %s", coin_type, ctx.sender)
    coins = fetch_coin_balances(ctx.client, ctx.sender, coin_type)
    return select_transfer_coin(ctx.txn, coins, ctx.request.amount, coin_type)


def _token_id_arg(ctx: TransferContext) -> Any:
    config = ctx.config
    try:
        token_id = int(config.token_id, 16)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"token_id must be a hex string, got {config.token_id!r}") from exc
    return single(
        ctx.txn.move_call(
            target=f"{config.its_package_id}::token_id::from_u256",
            arguments=[u256_arg(token_id)],
        )
    )


def _gas_coin(ctx: TransferContext) -> Any:
    return single(ctx.txn.split_coin(coin=ctx.txn.gas, amounts=[u64_arg(ctx.config.gas_amount)]))


def _send_via_integration(ctx: TransferContext) -> None:
    config = ctx.config
    gas = _gas_coin(ctx)
    ctx.txn.move_call(
        target=f"{config.package_id}::its_integration::transfer_usdrise_to_neutron",
        arguments=[
            object_arg(config.its_id),
            object_arg(config.gateway_id),
            object_arg(config.gas_service_id),
            object_arg(config.channel_id),
            address_arg(config.token_id),
            ctx.coin,
            bytes_arg(ctx.request.destination_bytes),
            gas,
            object_arg(SUI_CLOCK_ID),
        ],
    )


def _send_via_example(ctx: TransferContext) -> None:
    config = ctx.config
    token_id = _token_id_arg(ctx)
    gas = _gas_coin(ctx)
    ctx.txn.move_call(
        target=f"{config.example_package_id}::its::send_interchain_transfer_call",
        arguments=[
            object_arg(config.singleton_id),
            object_arg(config.its_id),
            object_arg(config.gateway_id),
            object_arg(config.gas_service_id),
            token_id,
            ctx.coin,
            string_arg(config.destination_chain),
            bytes_arg(ctx.request.destination_bytes),
            bytes_arg(b""),  # metadata
            address_arg(ctx.sender),  # refund address
            gas,
            bytes_arg(b""),  # gas params
            object_arg(SUI_CLOCK_ID),
        ],
        type_arguments=[config.resolved_token_type],
    )


def _send_direct(ctx: TransferContext) -> None:
    txn, config = ctx.txn, ctx.config
    coin_type = config.resolved_token_type
    token_id = _token_id_arg(ctx)
    ticket = single(
        txn.move_call(
            target=f"{config.its_package_id}::interchain_token_service::prepare_interchain_transfer",
            arguments=[
                token_id,
                ctx.coin,
                string_arg(config.destination_chain),
                bytes_arg(ctx.request.destination_bytes),
                bytes_arg(b""),
                object_arg(config.channel_id),
            ],
            type_arguments=[coin_type],
        )
    )
    message_ticket = single(
        txn.move_call(
            target=f"{config.its_package_id}::interchain_token_service::send_interchain_transfer",
            arguments=[object_arg(config.its_id), ticket, object_arg(SUI_CLOCK_ID)],
            type_arguments=[coin_type],
        )
    )
    gas = _gas_coin(ctx)
    txn.move_call(
        target=f"{config.gas_service_package_id}::gas_service::pay_gas",
        arguments=[
            object_arg(config.gas_service_id),
            message_ticket,
            gas,
            address_arg(ctx.sender),
            bytes_arg(b""),
        ],
        type_arguments=[SUI_COIN_TYPE],
    )
    txn.move_call(
        target=f"{config.gateway_package_id}::gateway::send_message",
        arguments=[object_arg(config.gateway_id), message_ticket],
    )


TRANSFER_SEQUENCES: Dict[str, TransferSequence] = {
    sequence.name: sequence
    for sequence in (
        TransferSequence(
            name="integration",
            description="mint, then its_integration::transfer_usdrise_to_neutron",
            required=(
                "package_id",
                "treasury_cap_id",
                "its_id",
                "gateway_id",
                "gas_service_id",
                "channel_id",
                "token_id",
            ),
            obtain_coin=_mint_coin,
            send=_send_via_integration,
        ),
        TransferSequence(
            name="example",
            description="owned coins, then example::its::send_interchain_transfer_call",
            required=(
                "example_package_id",
                "its_package_id",
                "singleton_id",
                "its_id",
                "gateway_id",
                "gas_service_id",
                "token_id",
            ),
            obtain_coin=_wallet_coin,
            send=_send_via_example,
        ),
        TransferSequence(
            name="direct",
            description="owned coins, then prepare/send transfer, pay_gas and send_message",
            required=(
                "its_package_id",
                "gas_service_package_id",
                "gateway_package_id",
                "its_id",
                "gateway_id",
                "gas_service_id",
                "channel_id",
                "token_id",
            ),
            obtain_coin=_wallet_coin,
            send=_send_direct,
        ),
    )
}
DEFAULT_SEQUENCE = "example"


def _normalize_type(type_string: str) -> str:
    address, _, rest = type_string.strip().partition("::")
    hex_part = address.lower()
    if hex_part.startswith("0x"):
        hex_part = hex_part[2:]
    return f"0x{hex_part.zfill(64)}::{rest}"


def _coin_wrapper(object_type: str) -> tuple[str, str] | None:
    """Split ``0x2::coin::TreasuryCap<T>`` into ``("TreasuryCap", T)``."""

    outer, sep, inner = object_type.partition("<")
    if not sep or not inner.endswith(">"):
        return None
    module_path = outer.split("::")
    if len(module_path) != 3 or module_path[1] != "coin":
        return None
    return module_path[2], inner[:-1]


class BridgeOperations:
    """Setup, registration and transfer flows bound to one key and network."""

    def __init__(
        self,
        client: Any,
        config: BridgeConfig,
        transaction_factory: Callable[[Any], Any] = new_transaction,
    ) -> None:
        self.client = client
        self.config = config
        self.transaction_factory = transaction_factory

    @property
    def sender(self) -> str:
        return active_address(self.client)

    def _new_transaction(self, reserved: int = 0) -> tuple[Any, str]:
        """Fresh transaction with its gas coin prepared to cover *reserved* SUI splits."""

        txn = self.transaction_factory(self.client)
        sui_coins = fetch_coin_balances(self.client, self.sender, SUI_COIN_TYPE)
        gas_coin = prepare_gas(txn, sui_coins, self.config.gas_budget, reserved)
        return txn, gas_coin

    def _submit(self, txn: Any, gas_coin: str, expected: ExpectedEvent) -> SubmissionResult:
        response = execute(txn, self.config.gas_budget, gas_coin)
        events = response.get("events") or []
        event, value = extract_event_field(events, expected)
        if event is None:
            logger.warning(
                "Transaction %s executed, but no %s event was found. Check the events manually.",
                response.get("digest"),
                expected.type_fragment,
            )
            logger.debug("Full events: %s", json.dumps(events, indent=2, default=str))
        elif value is None:
            logger.warning(
                "%s event found, but it has no %s field: %s",
                expected.type_fragment,
                expected.field,
                event.get("parsedJson"),
            )
        return SubmissionResult(
            digest=response.get("digest", ""),
            events=events,
            event=event,
            value=value,
            raw=response,
        )

    def balances(self) -> List[CoinBalance]:
        return fetch_coin_balances(self.client, self.sender, self.config.resolved_token_type)

    def find_token_objects(self) -> tuple[str, str]:
        """Return ``(treasury_cap_id, coin_metadata_id)`` owned by the sender."""

        coin_type = self.config.resolved_token_type
        wanted = _normalize_type(coin_type)
        treasury_cap = self.config.treasury_cap_id
        metadata = self.config.token_metadata_id
        if treasury_cap is None or metadata is None:
            for obj in get_owned_objects(self.client, self.sender):
                wrapper = _coin_wrapper(str(getattr(obj, "object_type", "") or ""))
                if wrapper is None or _normalize_type(wrapper[1]) != wanted:
                    continue
                if treasury_cap is None and wrapper[0] == "TreasuryCap":
                    treasury_cap = str(obj.object_id)
                elif metadata is None and wrapper[0] == "CoinMetadata":
                    metadata = str(obj.object_id)

        if treasury_cap is None:
            raise InvalidInput(
                f"Could not find TreasuryCap for {coin_type} owned by {self.sender}. "
                "Ensure the package is published correctly."
            )
        if metadata is None:
            raise InvalidInput(f"Could not find CoinMetadata for {coin_type} owned by {self.sender}.")
        logger.info("Found Treasury Cap ID: %s", treasury_cap)
        logger.info("Found Coin Metadata ID: %s", metadata)
        return treasury_cap, metadata

    def setup(self) -> SubmissionResult:
        """Register the coin with ITS through ``its_integration::register_usdrise_with_cap``."""

        self.config.require("package_id", "its_id")
        treasury_cap, metadata = self.find_token_objects()
        txn, gas_coin = self._new_transaction()
        txn.move_call(
            target=f"{self.config.package_id}::its_integration::register_usdrise_with_cap",
            arguments=[
                object_arg(self.config.its_id),
                object_arg(metadata),
                object_arg(treasury_cap),
            ],
        )
        logger.info("Executing transaction to register %s with ITS", self.config.resolved_token_type)
        return self._submit(txn, gas_coin, COIN_REGISTERED_WITH_CAP)

    def register(self) -> SubmissionResult:
        """Register the coin with ITS through ``example::its::register_coin``."""

        self.config.require("example_package_id", "its_id", "token_metadata_id")
        coin_type = self.config.resolved_token_type
        txn, gas_coin = self._new_transaction()
        txn.move_call(
            target=f"{self.config.example_package_id}::its::register_coin",
            arguments=[
                object_arg(self.config.its_id),
                object_arg(self.config.token_metadata_id),
            ],
            type_arguments=[coin_type],
        )
        logger.info("Registering token %s with ITS from %s", coin_type, self.sender)
        return self._submit(txn, gas_coin, COIN_REGISTERED)

    def transfer(self, request: TransferRequest, sequence: str = DEFAULT_SEQUENCE) -> SubmissionResult:
        """Send ``request.amount`` to ``request.destination`` using the named call sequence."""

        try:
            descriptor = TRANSFER_SEQUENCES[sequence]
        except KeyError as exc:
            raise InvalidInput(
                f"Unknown transfer sequence {sequence!r}; choose from {', '.join(TRANSFER_SEQUENCES)}"
            ) from exc
        self.config.require(*descriptor.required)

        logger.info(
            "Initiating transfer of %s to %s on %s via %s",
            request.amount,
            request.destination,
            self.config.destination_chain,
            descriptor.description,
        )
        txn, gas_coin = self._new_transaction(reserved=self.config.gas_amount)
        ctx = TransferContext(
            txn=txn,
            client=self.client,
            config=self.config,
            request=request,
            sender=self.sender,
        )
        ctx.coin = descriptor.obtain_coin(ctx)
        descriptor.send(ctx)
        return self._submit(txn, gas_coin, INTERCHAIN_TRANSFER)
