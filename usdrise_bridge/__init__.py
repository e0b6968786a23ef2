"""USDRise bridge tooling for Sui and the Axelar Interchain Token Service."""

from .builders import (
    BridgeOperations,
    SubmissionResult,
    TRANSFER_SEQUENCES,
    extract_event_field,
)
from .coins import (
    CoinBalance,
    CoinSelection,
    plan_coin_selection,
    plan_gas_payment,
    select_transfer_coin,
)
from .config import BridgeConfig, ConfigurationError, load_bridge_config
from .errors import (
    BridgeError,
    InsufficientBalance,
    InvalidInput,
    InvalidKey,
    NotFound,
    RemoteFailure,
)
from .keys import SuiKey, encode_private_key, load_key
from .rpc_client import RPCError, create_client
from .status import GMPState, GMPStatus, fetch_gmp_status, format_gmp_report
from .transactions import execute, prepare_gas
from .validation import TransferRequest, build_transfer_request, parse_amount

__all__ = [
    "BridgeConfig",
    "BridgeError",
    "BridgeOperations",
    "CoinBalance",
    "CoinSelection",
    "ConfigurationError",
    "GMPState",
    "GMPStatus",
    "InsufficientBalance",
    "InvalidInput",
    "InvalidKey",
    "NotFound",
    "RPCError",
    "RemoteFailure",
    "SubmissionResult",
    "SuiKey",
    "TRANSFER_SEQUENCES",
    "TransferRequest",
    "build_transfer_request",
    "create_client",
    "encode_private_key",
    "execute",
    "extract_event_field",
    "fetch_gmp_status",
    "format_gmp_report",
    "load_bridge_config",
    "load_key",
    "parse_amount",
    "plan_coin_selection",
    "plan_gas_payment",
    "prepare_gas",
    "select_transfer_coin",
]
