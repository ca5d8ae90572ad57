"""
Risk Engine: Sensor Values to Failure Probability

Rules-based scoring, no trained model. Each sensor dimension maps through a
three-segment piecewise-linear curve to a 0-100 sub-score; the weighted sum
plus one Gaussian noise sample is the failure probability.

Anomaly flags are computed from the raw sensor thresholds, NOT from the
composite score, so a reading can be high risk without being anomalous.
"""

import math
import random
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# THRESHOLD CONSTANTS
# ============================================================================

TEMP_FLOOR = 20.0         # °C, score 0 at or below
TEMP_NORMAL_MAX = 75.0
TEMP_WARNING = 85.0
TEMP_CRITICAL = 95.0

VIB_NORMAL_MAX = 4.5      # mm/s
VIB_WARNING = 7.0
VIB_CRITICAL = 10.0

USAGE_WARNING = 8000.0    # hours
USAGE_CRITICAL = 12000.0

POWER_BONUS_START = 50.0  # kW
NOISE_BONUS_START = 85.0  # dB

HIGH_RISK_THRESHOLD = 70.0
MEDIUM_RISK_THRESHOLD = 40.0
COMBINED_RISK_THRESHOLD = 60.0

WEIGHTS: Dict[str, float] = {
    "temperature": 0.35,
    "vibration": 0.35,
    "usage": 0.20,
    "bonus": 0.10,
}

DEFAULT_RECOMMENDATION = "All readings within normal parameters. Continue routine monitoring."
COMBINED_RISK_RECOMMENDATION = "Elevated risk from combined sensor patterns. Schedule general inspection."

_default_rng = random.Random()


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ScoreResult(BaseModel):
    """Output of score_inputs, returned verbatim by the predict endpoint."""
    failure_probability: float = Field(..., ge=0.0, le=100.0)
    risk_level: RiskLevel
    is_anomaly: bool
    anomaly_details: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    sub_scores: Dict[str, float] = Field(default_factory=dict)


# ============================================================================
# Helpers
# ============================================================================

def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(value, high))


def gaussian_noise(rng=None, mean: float = 0.0, std: float = 1.0) -> float:
    """One Box-Muller sample drawn from rng."""
    rng = rng or _default_rng
    u1 = 1.0 - rng.random()  # (0, 1], keeps log finite
    u2 = rng.random()
    return mean + std * math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def _segment(x: float, x0: float, x1: float, y0: float, y1: float) -> float:
    return y0 + (x - x0) / (x1 - x0) * (y1 - y0)


# ============================================================================
# Sub-scores
# ============================================================================

def temperature_score(temperature: float) -> float:
    if temperature <= TEMP_NORMAL_MAX:
        score = _segment(temperature, TEMP_FLOOR, TEMP_NORMAL_MAX, 0.0, 30.0)
    elif temperature <= TEMP_WARNING:
        score = _segment(temperature, TEMP_NORMAL_MAX, TEMP_WARNING, 30.0, 65.0)
    elif temperature <= TEMP_CRITICAL:
        score = _segment(temperature, TEMP_WARNING, TEMP_CRITICAL, 65.0, 90.0)
    else:
        score = 90.0 + min((temperature - TEMP_CRITICAL) / 10.0 * 10.0, 10.0)
    return clamp(score)


def vibration_score(vibration: float) -> float:
    if vibration <= VIB_NORMAL_MAX:
        score = _segment(vibration, 0.0, VIB_NORMAL_MAX, 0.0, 25.0)
    elif vibration <= VIB_WARNING:
        score = _segment(vibration, VIB_NORMAL_MAX, VIB_WARNING, 25.0, 65.0)
    elif vibration <= VIB_CRITICAL:
        score = _segment(vibration, VIB_WARNING, VIB_CRITICAL, 65.0, 90.0)
    else:
        score = 90.0 + min((vibration - VIB_CRITICAL) / 5.0 * 10.0, 10.0)
    return clamp(score)


def usage_score(usage_hours: float) -> float:
    if usage_hours <= USAGE_WARNING:
        score = _segment(usage_hours, 0.0, USAGE_WARNING, 0.0, 40.0)
    elif usage_hours <= USAGE_CRITICAL:
        score = _segment(usage_hours, USAGE_WARNING, USAGE_CRITICAL, 40.0, 80.0)
    else:
        score = 80.0 + min((usage_hours - USAGE_CRITICAL) / 4000.0 * 20.0, 20.0)
    return clamp(score)


def bonus_score(power_consumption: Optional[float] = None, noise_level: Optional[float] = None) -> float:
    """Up to 50 points each for high power draw and high noise; absent sensors add nothing."""
    score = 0.0
    if power_consumption is not None and power_consumption > POWER_BONUS_START:
        score += min((power_consumption - POWER_BONUS_START) / 50.0 * 50.0, 50.0)
    if noise_level is not None and noise_level > NOISE_BONUS_START:
        score += min((noise_level - NOISE_BONUS_START) / 30.0 * 50.0, 50.0)
    return clamp(score)


def classify_risk(failure_probability: float) -> RiskLevel:
    if failure_probability >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    elif failure_probability >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


# ============================================================================
# Anomaly rules
# ============================================================================

def detect_anomalies(temperature: float, vibration: float, usage_hours: float):
    """
    Threshold checks on raw values, in temperature, vibration, usage order.

    Returns (is_anomaly, anomaly_details, recommendations). Elevated-but-not-
    critical readings add a detail and a recommendation without setting the flag.
    """
    is_anomaly = False
    details: List[str] = []
    recommendations: List[str] = []

    if temperature > TEMP_WARNING:
        is_anomaly = True
        details.append(f"Temperature critically high: {temperature:.1f}°C (threshold: {TEMP_WARNING:g}°C)")
        recommendations.append("Immediate inspection required. Check cooling system and lubrication.")
    elif temperature > TEMP_NORMAL_MAX:
        details.append(f"Temperature elevated: {temperature:.1f}°C (normal max: {TEMP_NORMAL_MAX:g}°C)")
        recommendations.append("Schedule cooling system inspection within 48 hours.")

    if vibration > VIB_WARNING:
        is_anomaly = True
        details.append(f"Vibration critically high: {vibration:.2f} mm/s (threshold: {VIB_WARNING:g} mm/s)")
        recommendations.append("Check bearing alignment and balance. Immediate maintenance recommended.")
    elif vibration > VIB_NORMAL_MAX:
        details.append(f"Vibration elevated: {vibration:.2f} mm/s (normal max: {VIB_NORMAL_MAX:g} mm/s)")
        recommendations.append("Monitor vibration trends. Schedule bearing inspection.")

    if usage_hours > USAGE_CRITICAL:
        is_anomaly = True
        details.append(f"Usage hours excessive: {usage_hours:.0f}h (critical: {USAGE_CRITICAL:.0f}h)")
        recommendations.append("Machine overdue for major overhaul. Plan replacement parts procurement.")
    elif usage_hours > USAGE_WARNING:
        details.append(f"Usage hours high: {usage_hours:.0f}h (warning: {USAGE_WARNING:.0f}h)")
        recommendations.append("Schedule preventive maintenance. Review wear components.")

    return is_anomaly, details, recommendations


# ============================================================================
# Main scoring function
# ============================================================================

def score_inputs(
    temperature: float,
    vibration: float,
    usage_hours: float,
    power_consumption: Optional[float] = None,
    noise_level: Optional[float] = None,
    rng=None,
    noise: Optional[float] = None,
) -> ScoreResult:
    """
    Score one sensor tuple.

    Args:
        temperature: °C
        vibration: mm/s
        usage_hours: cumulative operating hours
        power_consumption: kW, optional
        noise_level: dB, optional
        rng: random.Random used for the noise sample
        noise: explicit noise term; skips the draw when given

    Returns:
        ScoreResult with a probability in [0, 100] rounded to one decimal
    """
    sub_scores = {
        "temperature": temperature_score(temperature),
        "vibration": vibration_score(vibration),
        "usage": usage_score(usage_hours),
        "bonus": bonus_score(power_consumption, noise_level),
    }
    raw = sum(sub_scores[name] * weight for name, weight in WEIGHTS.items())

    if noise is None:
        noise = gaussian_noise(rng)
    failure_probability = round(clamp(raw + noise), 1)

    is_anomaly, details, recommendations = detect_anomalies(temperature, vibration, usage_hours)

    if failure_probability >= COMBINED_RISK_THRESHOLD and not details:
        recommendations.append(COMBINED_RISK_RECOMMENDATION)

    if not recommendations:
        recommendations.append(DEFAULT_RECOMMENDATION)

    return ScoreResult(
        failure_probability=failure_probability,
        risk_level=classify_risk(failure_probability),
        is_anomaly=is_anomaly,
        anomaly_details=details,
        recommendations=recommendations,
        sub_scores={name: round(value, 2) for name, value in sub_scores.items()},
    )
