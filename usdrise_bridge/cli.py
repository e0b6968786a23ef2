"""Command line interface for the USDRise bridge tooling."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from .builders import DEFAULT_SEQUENCE, TRANSFER_SEQUENCES, BridgeOperations, SubmissionResult
from .config import (
    AXELARSCAN_URLS,
    NETWORKS,
    BridgeConfig,
    ConfigurationError,
    load_bridge_config,
    set_default_config_path,
)
from .errors import BridgeError
from .keys import load_key
from .rpc_client import create_client, sui_config
from .status import fetch_gmp_status, format_gmp_report, gmp_tracking_url
from .validation import build_transfer_request

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI arguments are invalid."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="usdrise", description="Move USDRise from Sui through the Axelar Interchain Token Service"
    )
    parser.add_argument("--config", default=None, help="YAML config file (default: ~/.usdrise.yaml)")
    parser.add_argument("--network", choices=NETWORKS, default=None, help="Sui network to use")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("address", help="print the Sui address of the configured key")
    subparsers.add_parser("balances", help="list owned coin objects for the token type")
    subparsers.add_parser(
        "setup", help="register the coin with ITS using its TreasuryCap (its_integration)"
    )
    subparsers.add_parser(
        "register", help="register the coin with ITS through example::its::register_coin"
    )

    transfer_parser = subparsers.add_parser(
        "transfer", help="send tokens to the destination chain in one transaction"
    )
    transfer_parser.add_argument("amount", help="Amount in base units (e.g. 1000000 for 1 USDRISE)")
    transfer_parser.add_argument("destination", help="Destination chain address")
    transfer_parser.add_argument(
        "--sequence",
        choices=sorted(TRANSFER_SEQUENCES),
        default=DEFAULT_SEQUENCE,
        help="Move call sequence used for the transfer (default: %(default)s)",
    )
    transfer_parser.add_argument(
        "--destination-chain", default=None, help="Axelar name of the destination chain"
    )

    monitor_parser = subparsers.add_parser(
        "monitor", help="query Axelarscan once for the GMP status of a Sui transaction"
    )
    monitor_parser.add_argument("tx_hash", help="Sui transaction digest")
    return parser


def _load_config(args: argparse.Namespace) -> BridgeConfig:
    overrides: dict[str, Any] = {}
    if args.network:
        overrides["network"] = args.network
    if getattr(args, "destination_chain", None):
        overrides["destination_chain"] = args.destination_chain
    return load_bridge_config(overrides=overrides)


def _operations(config: BridgeConfig) -> BridgeOperations:
    key = load_key(config.private_key)
    return BridgeOperations(create_client(config, key), config)


def _print_submission(result: SubmissionResult, label: str, value_label: str) -> None:
    print(f"{label} transaction successful.")
    print(f"   Transaction Digest: {result.digest}")
    if result.value is not None:
        print(f"   {value_label}: {result.value}")


def cmd_address(config: BridgeConfig) -> None:
    key = load_key(config.private_key)
    print(sui_config(config, key).active_address)


def cmd_balances(config: BridgeConfig) -> None:
    ops = _operations(config)
    coins = ops.balances()
    for coin in coins:
        print(f"{coin.coin_object_id} {coin.balance}")
    print(
        json.dumps(
            {"coins": len(coins), "total": sum(coin.balance for coin in coins)},
            separators=(",", ":"),
        )
    )


def cmd_setup(config: BridgeConfig) -> None:
    ops = _operations(config)
    logger.info("Using sender address: %s", ops.sender)
    result = ops.setup()
    _print_submission(result, "Coin registration", "Token ID")


def cmd_register(config: BridgeConfig) -> None:
    ops = _operations(config)
    logger.info("Signer address: %s", ops.sender)
    result = ops.register()
    _print_submission(result, "Token registration", "Registered Token ID")
    if result.value is not None:
        print("You can now use this Token ID in your transfer commands.")


def cmd_transfer(config: BridgeConfig, args: argparse.Namespace) -> None:
    request = build_transfer_request(
        args.amount, args.destination, config.destination_format, config.destination_prefix
    )
    ops = _operations(config)
    result = ops.transfer(request, sequence=args.sequence)
    _print_submission(result, "Transfer", "Transferred amount")
    explorer = config.axelarscan_url or AXELARSCAN_URLS.get(config.network)
    if explorer:
        print(f"   Track on Axelarscan: {gmp_tracking_url(explorer, result.digest)}")


def cmd_monitor(config: BridgeConfig, args: argparse.Namespace) -> None:
    print(f"Monitoring transfer for transaction: {args.tx_hash}")
    status = fetch_gmp_status(args.tx_hash, config.resolved_axelarscan_url)
    for line in format_gmp_report(status):
        print(line)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    try:
        if args.config:
            set_default_config_path(args.config)
        config = _load_config(args)
        if args.command == "address":
            cmd_address(config)
        elif args.command == "balances":
            cmd_balances(config)
        elif args.command == "setup":
            cmd_setup(config)
        elif args.command == "register":
            cmd_register(config)
        elif args.command == "transfer":
            cmd_transfer(config, args)
        elif args.command == "monitor":
            cmd_monitor(config, args)
        else:  # pragma: no cover - argparse enforces choices
            raise CLIError(f"Unknown command: {args.command}")
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")
        parser.exit(1)
    except (CLIError, ConfigurationError, BridgeError) as exc:
        parser.exit(1, f"error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
