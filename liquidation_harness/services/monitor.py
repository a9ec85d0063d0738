"""Monitoring orchestration — observes every configured position and alerts."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ..chains.evm.client import EvmClient
from ..config import AppConfig
from ..history import (
    HealthHistory,
    HealthObservation,
    HealthStatus,
    OrderingViolation,
    format_health_factor,
)
from ..interfaces.notifier import Notifier
from ..interfaces.price_oracle import PriceOracle
from ..notifications import TelegramNotifier
from ..oracles import MockOracleReader
from ..oracles.mock_oracle import crashed_price, format_price
from ..protocols.aave import AaveV3Adapter
from ..protocols.wrapper import WrapperHistoryReader
from .tracker import PositionAction, PositionTracker

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    HealthStatus.HEALTHY: "✅ Healthy",
    HealthStatus.AT_RISK: "⚠️ At Risk",
}


class Monitor:
    """Tracks health factor history for each configured position and alerts on changes."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._client = EvmClient(config.network)
        self._adapter = AaveV3Adapter(self._client, config.contracts.pool)
        self._wrapper_reader = WrapperHistoryReader(self._client)

        self._oracle: PriceOracle | None = None
        if config.contracts.oracle:
            self._oracle = MockOracleReader(self._client, config.contracts.oracle)

        self._trackers: list[PositionTracker] = [
            PositionTracker(p.label, p.address, self._adapter, self._client)
            for p in config.positions
        ]

        self._notifiers: list[Notifier] = []
        if config.notifications.telegram.enabled:
            self._notifiers.append(TelegramNotifier(config.notifications.telegram))

    @property
    def trackers(self) -> list[PositionTracker]:
        return list(self._trackers)

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_address(address: str) -> str:
        if len(address) > 16:
            return f"{address[:10]}...{address[-6:]}"
        return address

    @staticmethod
    def _status_label(status: HealthStatus) -> str:
        return _STATUS_LABELS[status]

    @staticmethod
    def _format_time(timestamp: int) -> str:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S"
        )

    def _build_log_message(
        self, tracker: PositionTracker, observation: HealthObservation
    ) -> str:
        return (
            f"📊 {tracker.label} · {self._config.network.name.upper()}\n"
            f"\n"
            f"{self._status_label(observation.status)}\n"
            f"HF: {format_health_factor(observation.health_factor)}"
            f" · Block {observation.block_height}\n"
            f"\n"
            f"{self._format_time(observation.timestamp)} UTC"
        )

    def _build_at_risk_alert(
        self, tracker: PositionTracker, observation: HealthObservation
    ) -> str:
        return (
            f"🚨 AT RISK — HF {format_health_factor(observation.health_factor)}\n"
            f"\n"
            f"{tracker.label} · {self._config.network.name.upper()}\n"
            f"Block {observation.block_height}"
            f" · Observation #{observation.sequence_index}\n"
            f"\n"
            f"Position is eligible for liquidation at or below 1.0.\n"
            f"\n"
            f"Account: {self._format_address(tracker.address)}\n"
            f"{self._format_time(observation.timestamp)} UTC"
        )

    def _build_history_section(
        self, label: str, address: str, history: HealthHistory
    ) -> str:
        header = f"━━ {label} ({self._format_address(address)}) ━━"
        if not len(history):
            return f"{header}\n\nNo observations recorded."

        lines = [
            f"#{obs.sequence_index} · Block {obs.block_height}"
            f" · {self._format_time(obs.timestamp)}"
            f" · HF {format_health_factor(obs.health_factor)}"
            f" · {self._status_label(obs.status)}"
            for obs in history
        ]
        lowest = history.lowest()
        summary = (
            f"Entries: {len(history)} · "
            f"Status changes: {len(history.transitions())} · "
            f"Lowest HF: {format_health_factor(lowest.health_factor)}"
        )
        return header + "\n\n" + "\n".join(lines) + "\n\n" + summary

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _send_log(self, message: str, silent: bool = False) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=silent)
            except Exception as e:
                logger.error("Notifier send_log failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    # ------------------------------------------------------------------
    # Core workflows
    # ------------------------------------------------------------------

    async def verify_network(self) -> bool:
        """Warn when the RPC endpoint serves a different chain than configured."""
        expected = self._config.network.chain_id
        actual = await self._client.chain_id()
        if actual != expected:
            logger.warning(
                "Connected to chain %d but %s expects %d",
                actual,
                self._config.network.name,
                expected,
            )
            return False
        logger.info("Connected to %s (chain %d)", self._config.network.name, actual)
        return True

    async def check_and_alert(
        self, action: PositionAction = PositionAction.POLL
    ) -> None:
        """Observe every position once; alert on a transition into AT_RISK."""
        for tracker in self._trackers:
            try:
                observation = await tracker.observe(action)
            except OrderingViolation:
                raise
            except Exception as e:
                logger.error("Failed to observe position '%s': %s", tracker.label, e)
                continue

            await self._send_log(self._build_log_message(tracker, observation))

            if not tracker.status_changed:
                continue

            if observation.status is HealthStatus.AT_RISK:
                await self._send_alert(
                    self._build_at_risk_alert(tracker, observation),
                    subject="🚨 AT RISK: Liquidation eligible",
                )
            elif tracker.previous_status is HealthStatus.AT_RISK:
                await self._send_log(
                    f"✅ {tracker.label} recovered — HF "
                    f"{format_health_factor(observation.health_factor)}",
                    silent=False,
                )

    async def generate_report(self) -> str:
        """Send (and return) the health factor history of every position."""
        sections = [
            self._build_history_section(t.label, t.address, t.history)
            for t in self._trackers
        ]
        body = "\n\n".join(sections) if sections else "No positions configured."
        report = f"📋 Health Factor History\n\n{body}"

        await self._send_alert(report)
        logger.info("History report sent")
        return report

    async def generate_onchain_report(self) -> str:
        """Send (and return) the history each wrapper contract recorded itself.

        Raises:
            OrderingViolation: a wrapper's log is out of block or time order.
        """
        sections = []
        for tracker in self._trackers:
            try:
                history = await self._wrapper_reader.load(tracker.address)
            except OrderingViolation:
                raise
            except Exception as e:
                logger.error(
                    "Failed to read on-chain history of '%s': %s", tracker.label, e
                )
                sections.append(
                    f"━━ {tracker.label} ({self._format_address(tracker.address)}) ━━"
                    f"\n\nHistory unavailable: {e}"
                )
                continue
            sections.append(
                self._build_history_section(tracker.label, tracker.address, history)
            )

        body = "\n\n".join(sections) if sections else "No positions configured."
        report = f"📋 On-chain Health Factor History\n\n{body}"

        await self._send_alert(report)
        logger.info("On-chain history report sent")
        return report

    async def plan_price_crash(self) -> tuple[int, int]:
        """Return the collateral's current oracle price and its crashed price."""
        if self._oracle is None:
            raise RuntimeError("No oracle configured; set contracts.oracle")

        drop = self._config.scenario.price_drop_percentage
        current = await self._oracle.get_price(self._config.contracts.collateral_asset)
        target = crashed_price(current, drop)
        logger.info(
            "Collateral price %s → %s after a %d%% drop",
            format_price(current),
            format_price(target),
            drop,
        )
        return current, target

    async def run_continuous(self, interval_seconds: int | None = None) -> None:
        """Run the observation loop until cancelled."""
        interval = (
            self._config.monitor.poll_interval_seconds
            if interval_seconds is None
            else interval_seconds
        )
        logger.info(
            "Starting continuous monitoring (observing every %d seconds)", interval
        )

        while True:
            try:
                await self.check_and_alert()
                await asyncio.sleep(interval)
            except OrderingViolation as e:
                logger.error("Chain reported out-of-order block: %s", e)
                raise
            except Exception as e:
                logger.error("Error in monitoring loop: %s", e)
                await asyncio.sleep(interval)
