"""
Sensor Simulator: Synthetic Readings per Machine Type

Draws plausible sensor values from the machine-type profile and
occasionally injects an out-of-envelope temperature and/or vibration value
so the anomaly path is exercised regularly.

This is a SIMULATOR. No real sensors are attached.
"""

import logging
import random
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from fleet_monitor.services.profiles import get_profile
from fleet_monitor.services.risk_engine import score_inputs
from fleet_monitor.services.state_updater import apply_reading

logger = logging.getLogger("sensor_simulator")

ANOMALY_CHANCE = 0.12
ANOMALY_KINDS = ("temperature", "vibration", "both")
ANOMALOUS_TEMPERATURE_RANGE = (80.0, 110.0)  # °C
ANOMALOUS_VIBRATION_RANGE = (6.0, 15.0)      # mm/s

# Physical floors
MIN_TEMPERATURE = 15.0
MIN_VIBRATION = 0.1
MIN_POWER = 1.0
MIN_NOISE = 30.0

_default_rng = random.Random()


@dataclass(frozen=True)
class SensorValues:
    """One synthesized (or externally supplied) sensor tuple."""
    temperature: float
    vibration: float
    usage_hours: float
    power_consumption: Optional[float] = None
    noise_level: Optional[float] = None
    injected_anomaly: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def synthesize(machine_type: Optional[str], last_usage_hours: Optional[float], rng=None) -> SensorValues:
    """
    Draw a new reading for a machine of the given type.

    Args:
        machine_type: key into the profile table, unknown types use the default
        last_usage_hours: latest persisted cumulative usage, None for a new machine
        rng: random.Random; pass a seeded one for deterministic output

    Returns:
        SensorValues rounded to 2 decimals (usage to 1)
    """
    rng = rng or _default_rng
    profile = get_profile(machine_type)

    if last_usage_hours is None:
        last_usage_hours = profile.usage_base

    temperature = max(MIN_TEMPERATURE, rng.gauss(profile.temp_mean, profile.temp_std))
    vibration = max(MIN_VIBRATION, rng.gauss(profile.vib_mean, profile.vib_std))
    usage_hours = last_usage_hours + rng.randint(*profile.usage_increment)
    power = max(MIN_POWER, rng.gauss(profile.power_mean, profile.power_std))
    noise = max(MIN_NOISE, rng.gauss(profile.noise_mean, profile.noise_std))

    injected = None
    if rng.random() < ANOMALY_CHANCE:
        injected = rng.choice(ANOMALY_KINDS)
        if injected in ("temperature", "both"):
            temperature = rng.uniform(*ANOMALOUS_TEMPERATURE_RANGE)
        if injected in ("vibration", "both"):
            vibration = rng.uniform(*ANOMALOUS_VIBRATION_RANGE)

    return SensorValues(
        temperature=round(temperature, 2),
        vibration=round(vibration, 2),
        usage_hours=round(usage_hours, 1),
        power_consumption=round(power, 2),
        noise_level=round(noise, 2),
        injected_anomaly=injected,
    )


def generate_reading(store, machine: Dict[str, Any], rng=None) -> Dict[str, Any]:
    """
    Synthesize, score and persist one reading for a machine.

    Always continues from the most recent persisted usage, so callers must
    not run this concurrently for the same machine.

    Raises:
        StorageError: if any write fails
    """
    last_usage = store.get_latest_usage(machine["id"])
    values = synthesize(machine.get("type"), last_usage, rng)
    result = score_inputs(
        values.temperature,
        values.vibration,
        values.usage_hours,
        power_consumption=values.power_consumption,
        noise_level=values.noise_level,
        rng=rng,
    )
    if values.injected_anomaly:
        logger.debug("sensor_simulator: injected %s anomaly for machine %s", values.injected_anomaly, machine["id"])
    return apply_reading(store, machine, values, result)


def generate_all_readings(store, rng=None) -> List[Dict[str, Any]]:
    """One new reading for every machine, ordered by machine id."""
    return [generate_reading(store, m, rng) for m in store.list_machines()]
