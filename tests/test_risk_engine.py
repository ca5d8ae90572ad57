"""
Risk Engine Tests

Tests verify:
- Piecewise sub-score curves hit their breakpoints and are monotonic
- Probability stays in [0, 100] and the tier follows the 70/40 thresholds
- Anomaly flag is set iff a critical raw threshold is crossed
- Recommendation ordering and fallbacks
- Determinism with an explicit noise term or seeded rng
"""

import random

import pytest

from fleet_monitor.services.risk_engine import (
    COMBINED_RISK_RECOMMENDATION,
    DEFAULT_RECOMMENDATION,
    RiskLevel,
    bonus_score,
    classify_risk,
    gaussian_noise,
    score_inputs,
    temperature_score,
    usage_score,
    vibration_score,
)


class TestSubScores:
    """Breakpoints of the three-segment curves."""

    @pytest.mark.parametrize("temperature,expected", [
        (20, 0.0), (75, 30.0), (85, 65.0), (95, 90.0), (105, 100.0), (200, 100.0),
    ])
    def test_temperature_breakpoints(self, temperature, expected):
        assert temperature_score(temperature) == pytest.approx(expected)

    @pytest.mark.parametrize("vibration,expected", [
        (0, 0.0), (4.5, 25.0), (7.0, 65.0), (10.0, 90.0), (15.0, 100.0),
    ])
    def test_vibration_breakpoints(self, vibration, expected):
        assert vibration_score(vibration) == pytest.approx(expected)

    @pytest.mark.parametrize("usage,expected", [
        (0, 0.0), (8000, 40.0), (12000, 80.0), (16000, 100.0), (50000, 100.0),
    ])
    def test_usage_breakpoints(self, usage, expected):
        assert usage_score(usage) == pytest.approx(expected)

    def test_cold_machine_clamps_to_zero(self):
        assert temperature_score(-40) == 0.0

    def test_monotonic_in_each_dimension(self):
        temps = [t / 2 for t in range(-20, 300)]
        vibs = [v / 10 for v in range(0, 200)]
        usages = range(0, 20000, 50)
        for curve, xs in ((temperature_score, temps), (vibration_score, vibs), (usage_score, usages)):
            scores = [curve(x) for x in xs]
            assert all(b >= a for a, b in zip(scores, scores[1:])), curve.__name__

    def test_bonus_absent_sensors_add_nothing(self):
        assert bonus_score(None, None) == 0.0
        assert bonus_score(50, 85) == 0.0

    def test_bonus_scales_and_caps(self):
        assert bonus_score(75, None) == pytest.approx(25.0)
        assert bonus_score(None, 100) == pytest.approx(25.0)
        assert bonus_score(500, 500) == 100.0


class TestRiskTier:
    @pytest.mark.parametrize("probability,expected", [
        (0.0, RiskLevel.LOW), (39.9, RiskLevel.LOW), (40.0, RiskLevel.MEDIUM),
        (69.9, RiskLevel.MEDIUM), (70.0, RiskLevel.HIGH), (100.0, RiskLevel.HIGH),
    ])
    def test_thresholds(self, probability, expected):
        assert classify_risk(probability) == expected

    def test_probability_bounded_and_tier_consistent(self):
        rng = random.Random(3)
        for _ in range(500):
            result = score_inputs(
                rng.uniform(-50, 500),
                rng.uniform(0, 100),
                rng.uniform(0, 100000),
                power_consumption=rng.uniform(0, 1000),
                noise_level=rng.uniform(0, 200),
                rng=rng,
            )
            assert 0.0 <= result.failure_probability <= 100.0
            assert result.risk_level == classify_risk(result.failure_probability)


class TestAnomalyDetection:
    def test_hot_machine_example(self):
        result = score_inputs(96, 2, 500, noise=0.0)

        assert result.sub_scores["temperature"] >= 90
        assert result.is_anomaly is True
        assert "critically high" in result.anomaly_details[0]
        assert "Temperature" in result.anomaly_details[0]
        assert "cooling system" in result.recommendations[0]

    def test_normal_machine_example(self):
        result = score_inputs(50, 1, 100, noise=0.0)

        assert result.risk_level == RiskLevel.LOW
        assert result.is_anomaly is False
        assert result.anomaly_details == []
        assert result.recommendations == [DEFAULT_RECOMMENDATION]
        assert all(score < 20 for score in result.sub_scores.values())

    def test_flag_iff_critical_threshold(self):
        temps = [60, 75.5, 85, 85.1, 99]
        vibs = [1.0, 4.6, 7.0, 7.01, 12]
        usages = [100, 8000.5, 12000, 12000.1, 15000]
        for t in temps:
            for v in vibs:
                for u in usages:
                    result = score_inputs(t, v, u, noise=0.0)
                    assert result.is_anomaly == (t > 85 or v > 7.0 or u > 12000), (t, v, u)

    def test_elevated_values_do_not_flag(self):
        result = score_inputs(80, 5.0, 9000, noise=0.0)

        assert result.is_anomaly is False
        assert [d.split(":")[0] for d in result.anomaly_details] == [
            "Temperature elevated", "Vibration elevated", "Usage hours high",
        ]
        assert len(result.recommendations) == 3

    def test_detail_order_temperature_vibration_usage(self):
        result = score_inputs(100, 12, 13000, noise=0.0)

        assert result.anomaly_details[0].startswith("Temperature critically high")
        assert result.anomaly_details[1].startswith("Vibration critically high")
        assert result.anomaly_details[2].startswith("Usage hours excessive")
        assert "overhaul" in result.recommendations[2]

    def test_detail_formatting(self):
        result = score_inputs(90, 8, 100, noise=0.0)

        assert result.anomaly_details[0] == "Temperature critically high: 90.0°C (threshold: 85°C)"
        assert result.anomaly_details[1] == "Vibration critically high: 8.00 mm/s (threshold: 7 mm/s)"

    def test_combined_pattern_without_threshold_breach(self):
        # Every reading under its own threshold, loud and power hungry
        result = score_inputs(75, 4.5, 8000, power_consumption=100, noise_level=115, noise=30.0)

        assert result.anomaly_details == []
        assert result.failure_probability >= 60
        assert COMBINED_RISK_RECOMMENDATION in result.recommendations
        assert result.is_anomaly is False

    def test_high_risk_without_anomaly_is_possible(self):
        result = score_inputs(75, 4.5, 8000, power_consumption=100, noise_level=115, noise=40.0)

        assert result.risk_level == RiskLevel.HIGH
        assert result.is_anomaly is False


class TestDeterminism:
    def test_same_noise_same_probability(self):
        first = score_inputs(82, 5.5, 9500, power_consumption=60, noise_level=90, noise=0.7)
        second = score_inputs(82, 5.5, 9500, power_consumption=60, noise_level=90, noise=0.7)

        assert first.failure_probability == second.failure_probability
        assert first == second

    def test_seeded_rng_reproducible(self):
        a = score_inputs(70, 3, 5000, rng=random.Random(11))
        b = score_inputs(70, 3, 5000, rng=random.Random(11))

        assert a.failure_probability == b.failure_probability

    def test_zero_noise_matches_weighted_sum(self):
        result = score_inputs(75, 0, 8000, noise=0.0)
        # 0.35*30 + 0.35*0 + 0.20*40
        assert result.failure_probability == pytest.approx(18.5)

    def test_noise_is_clamped(self):
        assert score_inputs(20, 0, 0, noise=-5.0).failure_probability == 0.0
        assert score_inputs(200, 50, 50000, power_consumption=500, noise_level=500, noise=5.0).failure_probability == 100.0

    def test_gaussian_noise_roughly_standard(self):
        rng = random.Random(5)
        samples = [gaussian_noise(rng) for _ in range(5000)]
        mean = sum(samples) / len(samples)
        var = sum((s - mean) ** 2 for s in samples) / len(samples)

        assert abs(mean) < 0.1
        assert 0.85 < var < 1.15
