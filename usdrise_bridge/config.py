"""Shared configuration loader for the USDRise bridge tooling."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".usdrise.yaml"
_CONFIG_PATH_OVERRIDE: Path | None = None

ENV_PREFIX = "USDRISE_"
PLACEHOLDER_PREFIX = "YOUR_"

NETWORKS = ("mainnet", "testnet", "devnet")
AXELARSCAN_URLS = {
    "mainnet": "https://axelarscan.io",
    "testnet": "https://testnet.axelarscan.io",
}
DESTINATION_FORMATS = ("bech32", "evm")

SUI_CLOCK_ID = "0x6"
SUI_COIN_TYPE = "0x2::sui::SUI"

# 0.1 SUI forwarded to the Axelar gas service.
DEFAULT_GAS_AMOUNT = 100_000_000
DEFAULT_GAS_BUDGET = 200_000_000


def fullnode_url(network: str) -> str:
    """Return the public Sui fullnode URL for *network*."""

    if network not in NETWORKS:
        raise ConfigurationError(
            f"Unknown network {network!r}; expected one of {', '.join(NETWORKS)}"
        )
    return f"https://fullnode.{network}.sui.io:443"


@dataclass(frozen=True)
class BridgeConfig:
    """Network, object identifiers and signing secret for one invocation."""

    network: str = "testnet"
    rpc_url: str | None = None
    axelarscan_url: str | None = None
    private_key: str | None = None

    # Move packages
    package_id: str | None = None
    example_package_id: str | None = None
    its_package_id: str | None = None
    gas_service_package_id: str | None = None
    gateway_package_id: str | None = None

    # Shared and owned objects
    its_id: str | None = None
    gateway_id: str | None = None
    gas_service_id: str | None = None
    channel_id: str | None = None
    singleton_id: str | None = None
    treasury_cap_id: str | None = None
    token_metadata_id: str | None = None

    # Token and destination
    token_type: str | None = None
    token_id: str | None = None
    destination_chain: str = "neutron"
    destination_format: str = "bech32"
    destination_prefix: str = "neutron"

    gas_amount: int = DEFAULT_GAS_AMOUNT
    gas_budget: int = DEFAULT_GAS_BUDGET

    @property
    def resolved_rpc_url(self) -> str:
        return self.rpc_url or fullnode_url(self.network)

    @property
    def resolved_axelarscan_url(self) -> str:
        url = self.axelarscan_url or AXELARSCAN_URLS.get(self.network)
        if not url:
            raise ConfigurationError(
                f"No public Axelarscan instance for {self.network}; set axelarscan_url "
                f"or {ENV_PREFIX}AXELARSCAN_URL"
            )
        return url.rstrip("/")

    @property
    def resolved_token_type(self) -> str:
        """Full coin type, defaulting to ``<package_id>::usdrise::USDRISE``."""

        if self.token_type:
            return self.token_type
        self.require("package_id")
        return f"{self.package_id}::usdrise::USDRISE"

    def require(self, *names: str) -> None:
        """Raise ``ConfigurationError`` listing every unset field in *names*."""

        missing = [name for name in names if getattr(self, name) in (None, "")]
        if missing:
            hints = ", ".join(f"{name} ({ENV_PREFIX}{name.upper()})" for name in missing)
            raise ConfigurationError(f"Missing configuration: {hints}")


_STRING_FIELDS = tuple(
    f.name for f in fields(BridgeConfig) if f.name not in {"gas_amount", "gas_budget"}
)
_INT_FIELDS = ("gas_amount", "gas_budget")


def set_default_config_path(path: str | Path | None) -> None:
    """Remember a user-supplied config path for future loads."""

    global _CONFIG_PATH_OVERRIDE
    _CONFIG_PATH_OVERRIDE = Path(path).expanduser() if path else None


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML object with a 'bridge' section")
    return loaded


def _coerce_int(raw: Any, *, name: str, source: str) -> int | None:
    if raw is None:
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid {name} in {source}: {raw}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} in {source} must be positive, got {raw}")
    return value


def _clean(value: Any) -> Any:
    """Treat empty strings and unreplaced ``YOUR_...`` placeholders as unset."""

    if isinstance(value, str):
        value = value.strip()
        if not value or value.startswith(PLACEHOLDER_PREFIX):
            return None
    return value


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def _validate_url(raw: str | None, *, name: str) -> str | None:
    if raw is None:
        return None
    parsed = urlparse(raw)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise ConfigurationError(f"Invalid {name}: {raw}")
    return raw


def load_bridge_config(
    *,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> BridgeConfig:
    """Load bridge configuration from overrides, environment variables and optional YAML."""

    env_map = os.environ if env is None else env
    explicit_path = config_path is not None or _CONFIG_PATH_OVERRIDE is not None
    path = (
        Path(config_path).expanduser()
        if config_path is not None
        else _CONFIG_PATH_OVERRIDE or DEFAULT_CONFIG_PATH
    )

    file_config = _load_config_file(path, required=explicit_path)
    section = file_config.get("bridge", {})
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Expected 'bridge' to be a mapping in {path}")

    override_map = dict(overrides or {})
    resolved: dict[str, Any] = {}

    for name in _STRING_FIELDS:
        value = _first_value(
            _clean(override_map.get(name)),
            _clean(env_map.get(f"{ENV_PREFIX}{name.upper()}")),
            _clean(section.get(name)),
        )
        if value is None:
            continue
        if not isinstance(value, str):
            # YAML reads unquoted 0x... ids as integers
            raise ConfigurationError(f"{name} must be a string; quote hex ids in {path}")
        resolved[name] = value

    for name in _INT_FIELDS:
        value = _first_value(
            _coerce_int(_clean(override_map.get(name)), name=name, source="overrides"),
            _coerce_int(
                _clean(env_map.get(f"{ENV_PREFIX}{name.upper()}")), name=name, source="environment"
            ),
            _coerce_int(_clean(section.get(name)), name=name, source=str(path)),
        )
        if value is not None:
            resolved[name] = value

    network = resolved.get("network", BridgeConfig.network).lower()
    if network not in NETWORKS:
        raise ConfigurationError(
            f"Unknown network {network!r}; expected one of {', '.join(NETWORKS)}"
        )
    resolved["network"] = network

    destination_format = resolved.get("destination_format", BridgeConfig.destination_format).lower()
    if destination_format not in DESTINATION_FORMATS:
        raise ConfigurationError(
            f"Unknown destination_format {destination_format!r}; expected one of "
            f"{', '.join(DESTINATION_FORMATS)}"
        )
    resolved["destination_format"] = destination_format

    resolved["rpc_url"] = _validate_url(resolved.get("rpc_url"), name="rpc_url")
    resolved["axelarscan_url"] = _validate_url(
        resolved.get("axelarscan_url"), name="axelarscan_url"
    )

    return BridgeConfig(**resolved)
