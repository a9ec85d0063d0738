"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .chains.evm.abi import is_address

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonitorConfig:
    poll_interval_seconds: int = 60


@dataclass(frozen=True)
class NetworkConfig:
    name: str = "stagenet"
    chain_id: int = 73350
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 60


@dataclass(frozen=True)
class ContractsConfig:
    pool: str = ""
    oracle: str = ""
    collateral_asset: str = ""


@dataclass(frozen=True)
class PositionConfig:
    label: str = ""
    address: str = ""


@dataclass(frozen=True)
class ScenarioConfig:
    price_drop_percentage: int = 50


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    contracts: ContractsConfig = field(default_factory=ContractsConfig)
    positions: tuple[PositionConfig, ...] = ()
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        poll_interval_seconds=int(raw.get("poll_interval_seconds", 60)),
    )


def _build_network(raw: dict[str, Any]) -> NetworkConfig:
    return NetworkConfig(
        name=raw.get("name", "stagenet"),
        chain_id=int(raw.get("chain_id", 73350)),
        rpc_endpoints=tuple(e for e in raw.get("rpc_endpoints", []) if e),
        rpc_timeout=int(raw.get("rpc_timeout", 60)),
    )


def _build_contracts(raw: dict[str, Any]) -> ContractsConfig:
    return ContractsConfig(
        pool=raw.get("pool", ""),
        oracle=raw.get("oracle", ""),
        collateral_asset=raw.get("collateral_asset", ""),
    )


def _build_positions(raw: list[dict[str, Any]]) -> tuple[PositionConfig, ...]:
    return tuple(
        PositionConfig(label=p.get("label", ""), address=p.get("address", ""))
        for p in raw
    )


def _build_scenario(raw: dict[str, Any]) -> ScenarioConfig:
    return ScenarioConfig(
        price_drop_percentage=int(raw.get("price_drop_percentage", 50)),
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from the package directory).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        monitor=_build_monitor(raw.get("monitor", {})),
        network=_build_network(raw.get("network", {})),
        contracts=_build_contracts(raw.get("contracts", {})),
        positions=_build_positions(raw.get("positions", [])),
        scenario=_build_scenario(raw.get("scenario", {})),
        notifications=_build_notifications(raw.get("notifications", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.positions:
        raise ValueError("At least one position must be configured")

    for position in cfg.positions:
        if not position.address:
            raise ValueError(f"Position '{position.label}' has no address")
        if not is_address(position.address):
            raise ValueError(
                f"Position '{position.label}' has malformed address "
                f"'{position.address}'"
            )

    if not cfg.network.rpc_endpoints:
        raise ValueError(f"Network '{cfg.network.name}' has no rpc_endpoints")

    required = {
        "pool": cfg.contracts.pool,
        "collateral_asset": cfg.contracts.collateral_asset,
    }
    for name, address in required.items():
        if not address:
            raise ValueError(f"Missing contract address: {name}")
        if not is_address(address):
            raise ValueError(f"Contract '{name}' has malformed address '{address}'")

    # The oracle is optional; without it crash-price planning is unavailable.
    if cfg.contracts.oracle and not is_address(cfg.contracts.oracle):
        raise ValueError(
            f"Contract 'oracle' has malformed address '{cfg.contracts.oracle}'"
        )

    if not 0 < cfg.scenario.price_drop_percentage < 100:
        raise ValueError(
            "price_drop_percentage must be between 0 and 100 (exclusive), got "
            f"{cfg.scenario.price_drop_percentage}"
        )