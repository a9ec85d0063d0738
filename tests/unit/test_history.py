"""Unit tests for the health factor history recorder."""
from __future__ import annotations

import pytest

from liquidation_harness.history import (
    HF_ONE,
    NO_DEBT,
    HealthHistory,
    HealthObservation,
    HealthStatus,
    HistoryError,
    IndexOutOfRange,
    OrderingViolation,
    classify,
    format_health_factor,
)


@pytest.fixture()
def history() -> HealthHistory:
    return HealthHistory()


@pytest.fixture()
def lifecycle_history(lifecycle_values: list[tuple[int, int, int]]) -> HealthHistory:
    h = HealthHistory()
    for block, ts, hf in lifecycle_values:
        h.record(block, ts, hf)
    return h


def _obs(hf: int) -> HealthObservation:
    return HealthObservation(
        sequence_index=0, block_height=1, timestamp=1, health_factor=hf
    )


class TestClassify:
    def test_sentinel_is_healthy(self) -> None:
        assert classify(_obs(NO_DEBT)) is HealthStatus.HEALTHY

    def test_exactly_one_is_at_risk(self) -> None:
        assert classify(_obs(HF_ONE)) is HealthStatus.AT_RISK

    def test_just_above_one_is_healthy(self) -> None:
        assert classify(_obs(1_000_000_000_000_000_001)) is HealthStatus.HEALTHY

    def test_zero_is_at_risk(self) -> None:
        assert classify(_obs(0)) is HealthStatus.AT_RISK

    def test_accepts_raw_integer(self) -> None:
        assert classify(NO_DEBT) is HealthStatus.HEALTHY
        assert classify(HF_ONE) is HealthStatus.AT_RISK

    def test_observation_status_property(self) -> None:
        assert _obs(3 * HF_ONE).status is HealthStatus.HEALTHY
        assert _obs(HF_ONE // 2).status is HealthStatus.AT_RISK

    def test_has_debt(self) -> None:
        assert _obs(NO_DEBT).has_debt is False
        assert _obs(HF_ONE).has_debt is True


class TestRecord:
    def test_starts_empty(self, history: HealthHistory) -> None:
        assert history.length() == 0
        assert len(history) == 0
        assert history.latest() is None
        assert history.latest_health_factor() is None

    def test_returns_sequential_indices(self, history: HealthHistory) -> None:
        assert history.record(1, 10, HF_ONE) == 0
        assert history.record(2, 20, HF_ONE) == 1
        assert history.record(3, 30, HF_ONE) == 2

    def test_same_block_allowed(self, history: HealthHistory) -> None:
        history.record(7, 70, NO_DEBT)
        history.record(7, 70, 2 * HF_ONE)
        assert history.length() == 2

    def test_earlier_block_rejected(self, history: HealthHistory) -> None:
        history.record(5, 100, HF_ONE)
        with pytest.raises(OrderingViolation):
            history.record(4, 100, HF_ONE)
        assert history.length() == 1

    def test_earlier_timestamp_rejected(self, history: HealthHistory) -> None:
        history.record(5, 100, HF_ONE)
        with pytest.raises(OrderingViolation, match="timestamp"):
            history.record(6, 99, HF_ONE)
        assert history.length() == 1
        assert history.at(0).timestamp == 100

    def test_ordering_violation_is_history_error(self) -> None:
        assert issubclass(OrderingViolation, HistoryError)
        assert issubclass(OrderingViolation, ValueError)

    @pytest.mark.parametrize(
        "block, ts, hf",
        [(0, 1, HF_ONE), (1, 0, HF_ONE), (-3, 1, HF_ONE), (1, 1, -1), (1, 1, NO_DEBT + 1)],
    )
    def test_out_of_domain_inputs_rejected(
        self, history: HealthHistory, block: int, ts: int, hf: int
    ) -> None:
        with pytest.raises(ValueError):
            history.record(block, ts, hf)
        assert history.length() == 0

    @pytest.mark.parametrize(
        "block, ts, hf",
        [(1, 1, 1.5), (1.0, 1, HF_ONE), (1, "1", HF_ONE), (True, 1, HF_ONE), (1, 1, True)],
    )
    def test_non_integer_inputs_rejected(
        self, history: HealthHistory, block: object, ts: object, hf: object
    ) -> None:
        with pytest.raises(ValueError, match="must be an integer"):
            history.record(block, ts, hf)  # type: ignore[arg-type]
        assert history.length() == 0

    def test_entries_are_immutable(self, history: HealthHistory) -> None:
        history.record(1, 1, HF_ONE)
        with pytest.raises(AttributeError):
            history.at(0).health_factor = 0  # type: ignore[misc]

    def test_append_only_values_preserved(self, history: HealthHistory) -> None:
        supplied = [(10, 100, NO_DEBT), (10, 105, 3 * HF_ONE), (12, 130, HF_ONE)]
        for block, ts, hf in supplied:
            history.record(block, ts, hf)

        assert history.length() == len(supplied)
        for k, (block, ts, hf) in enumerate(supplied):
            assert history.at(k) == HealthObservation(k, block, ts, hf)

    def test_monotonic_across_history(self, lifecycle_history: HealthHistory) -> None:
        obs = lifecycle_history.observations()
        for i in range(len(obs)):
            for j in range(i + 1, len(obs)):
                assert obs[i].block_height <= obs[j].block_height
                assert obs[i].timestamp <= obs[j].timestamp


class TestAt:
    def test_out_of_range(self, lifecycle_history: HealthHistory) -> None:
        with pytest.raises(IndexOutOfRange):
            lifecycle_history.at(3)

    def test_negative_index_rejected(self, lifecycle_history: HealthHistory) -> None:
        with pytest.raises(IndexOutOfRange):
            lifecycle_history.at(-1)

    def test_empty_history(self, history: HealthHistory) -> None:
        with pytest.raises(IndexError):
            history.at(0)

    def test_last_valid_index(self, lifecycle_history: HealthHistory) -> None:
        c = lifecycle_history.at(2)
        assert (c.block_height, c.timestamp, c.health_factor) == (
            105,
            1200,
            900_000_000_000_000_000,
        )


class TestLifecycleScenario:
    def test_supply_borrow_crash(self, history: HealthHistory) -> None:
        assert history.length() == 0

        a = history.record(100, 1000, NO_DEBT)
        assert a == 0
        assert classify(history.at(a)) is HealthStatus.HEALTHY

        b = history.record(101, 1010, 2_500_000_000_000_000_000)
        assert b == 1
        assert classify(history.at(b)) is HealthStatus.HEALTHY

        c = history.record(105, 1200, 900_000_000_000_000_000)
        assert c == 2
        assert classify(history.at(c)) is HealthStatus.AT_RISK

        assert history.latest_health_factor() == 900_000_000_000_000_000
        assert history.length() == 3


class TestQueries:
    def test_iteration_in_order(self, lifecycle_history: HealthHistory) -> None:
        assert [o.sequence_index for o in lifecycle_history] == [0, 1, 2]

    def test_observations_snapshot(self, lifecycle_history: HealthHistory) -> None:
        snapshot = lifecycle_history.observations()
        lifecycle_history.record(106, 1300, HF_ONE)
        assert len(snapshot) == 3
        assert lifecycle_history.length() == 4

    def test_lowest(self, lifecycle_history: HealthHistory) -> None:
        assert lifecycle_history.lowest().sequence_index == 2

    def test_lowest_empty(self, history: HealthHistory) -> None:
        assert history.lowest() is None

    def test_transitions(self, lifecycle_history: HealthHistory) -> None:
        lifecycle_history.record(110, 1300, 3 * HF_ONE)
        indices = [o.sequence_index for o in lifecycle_history.transitions()]
        assert indices == [0, 2, 3]

    def test_transitions_empty(self, history: HealthHistory) -> None:
        assert history.transitions() == []


class TestFormatHealthFactor:
    def test_sentinel(self) -> None:
        assert format_health_factor(NO_DEBT) == "∞"

    def test_fixed_point(self) -> None:
        assert format_health_factor(2_500_000_000_000_000_000) == "2.5000"
        assert format_health_factor(0) == "0.0000"
