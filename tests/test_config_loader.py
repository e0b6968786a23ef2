from pathlib import Path

import pytest

from usdrise_bridge import config as config_module
from usdrise_bridge.config import BridgeConfig, ConfigurationError, load_bridge_config


@pytest.fixture(autouse=True)
def isolate_default_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml")
    config_module.set_default_config_path(None)


def test_load_bridge_config_prefers_environment_over_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
        bridge:
          network: mainnet
          package_id: "0xfile"
          its_id: "0xits"
          gas_budget: 1000
        """
    )

    env_map = {
        "USDRISE_NETWORK": "devnet",
        "USDRISE_PACKAGE_ID": "0xenv",
        "USDRISE_GAS_BUDGET": "2000",
    }

    config = load_bridge_config(config_path=config_path, env=env_map)

    assert isinstance(config, BridgeConfig)
    assert config.network == "devnet"
    assert config.package_id == "0xenv"
    assert config.its_id == "0xits"
    assert config.gas_budget == 2000


def test_overrides_win_over_environment() -> None:
    config = load_bridge_config(
        env={"USDRISE_NETWORK": "mainnet", "USDRISE_DESTINATION_CHAIN": "neutron"},
        overrides={"network": "testnet", "destination_chain": "ethereum-sepolia"},
    )

    assert config.network == "testnet"
    assert config.destination_chain == "ethereum-sepolia"


def test_placeholders_are_treated_as_missing() -> None:
    config = load_bridge_config(
        env={
            "USDRISE_PRIVATE_KEY": "YOUR_SUI_PRIVATE_KEY_IN_BASE64",
            "USDRISE_PACKAGE_ID": "YOUR_PUBLISHED_PACKAGE_ID",
        }
    )

    assert config.private_key is None
    assert config.package_id is None
    with pytest.raises(ConfigurationError) as excinfo:
        config.require("package_id", "its_id")
    assert "USDRISE_PACKAGE_ID" in str(excinfo.value)
    assert "USDRISE_ITS_ID" in str(excinfo.value)


def test_defaults_resolve_network_urls() -> None:
    config = load_bridge_config(env={})

    assert config.network == "testnet"
    assert config.resolved_rpc_url == "https://fullnode.testnet.sui.io:443"
    assert config.resolved_axelarscan_url == "https://testnet.axelarscan.io"


def test_devnet_requires_explicit_axelarscan_url() -> None:
    config = load_bridge_config(env={"USDRISE_NETWORK": "devnet"})

    with pytest.raises(ConfigurationError):
        config.resolved_axelarscan_url


def test_unknown_network_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        load_bridge_config(env={"USDRISE_NETWORK": "moonnet"})


def test_invalid_gas_budget_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        load_bridge_config(env={"USDRISE_GAS_BUDGET": "lots"})


def test_explicit_config_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_bridge_config(config_path=tmp_path / "nope.yaml", env={})


def test_token_type_defaults_to_package_module() -> None:
    config = BridgeConfig(package_id="0xabc")

    assert config.resolved_token_type == "0xabc::usdrise::USDRISE"


def test_unquoted_hex_ids_in_yaml_are_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("bridge:\n  its_id: 0x55\n")

    with pytest.raises(ConfigurationError):
        load_bridge_config(config_path=config_path, env={})
