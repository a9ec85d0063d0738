"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from liquidation_harness.config import (
    AppConfig,
    ContractsConfig,
    MonitorConfig,
    NetworkConfig,
    NotificationsConfig,
    PositionConfig,
    ScenarioConfig,
    TelegramConfig,
)
from liquidation_harness.history import NO_DEBT

POOL = "0x7d2768dE32b0b80b7a3454c06BdAc94A69DDc7A9"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
ORACLE = "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419"
WRAPPER = "0x00000000000000000000000000000000000000a1"


def word(value: int) -> str:
    return f"{value:064x}"


def account_data_hex(
    health_factor: int,
    collateral: int = 1_200_000_000_000,
    debt: int = 10_000_000_000,
) -> str:
    """ABI-encoded getUserAccountData return value."""
    return "0x" + "".join(
        word(v) for v in (collateral, debt, 800_000_000_000, 8250, 8000, health_factor)
    )


@pytest.fixture()
def make_account_data():
    return account_data_hex


@pytest.fixture()
def addresses() -> dict[str, str]:
    return {"pool": POOL, "weth": WETH, "oracle": ORACLE, "wrapper": WRAPPER}


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_network_config() -> NetworkConfig:
    return NetworkConfig(
        name="stagenet",
        chain_id=73350,
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
    )


@pytest.fixture()
def sample_contracts_config() -> ContractsConfig:
    return ContractsConfig(
        pool=POOL, oracle=ORACLE, collateral_asset=WETH
    )


@pytest.fixture()
def sample_app_config(
    sample_network_config: NetworkConfig,
    sample_contracts_config: ContractsConfig,
) -> AppConfig:
    return AppConfig(
        monitor=MonitorConfig(poll_interval_seconds=5),
        network=sample_network_config,
        contracts=sample_contracts_config,
        positions=(PositionConfig(label="test-wrapper", address=WRAPPER),),
        scenario=ScenarioConfig(price_drop_percentage=50),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Health factor fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def lifecycle_values() -> list[tuple[int, int, int]]:
    """(block, timestamp, health factor) for supply → borrow → price crash."""
    return [
        (100, 1000, NO_DEBT),
        (101, 1010, 2_500_000_000_000_000_000),
        (105, 1200, 900_000_000_000_000_000),
    ]


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent(f"""\
    monitor:
      poll_interval_seconds: 5
    network:
      name: stagenet
      chain_id: 73350
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    contracts:
      pool: "{POOL}"
      oracle: "{ORACLE}"
      collateral_asset: "{WETH}"
    positions:
      - label: test-wrapper
        address: "{WRAPPER}"
    scenario:
      price_drop_percentage: 30
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: "999"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
