"""
Machine-type baseline profiles for the sensor simulator.

Each profile describes the healthy operating envelope of one machine type:
normal distributions for temperature, vibration, power and noise, the
cumulative usage a machine starts from, and how many hours one simulation
tick adds.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class MachineTypeProfile:
    temp_mean: float          # °C
    temp_std: float
    vib_mean: float           # mm/s
    vib_std: float
    usage_base: float         # starting cumulative hours when no reading exists
    usage_increment: Tuple[int, int]  # inclusive hours added per tick
    power_mean: float         # kW
    power_std: float
    noise_mean: float         # dB
    noise_std: float


PROFILES: Dict[str, MachineTypeProfile] = {
    "CNC Mill": MachineTypeProfile(
        temp_mean=45, temp_std=8,
        vib_mean=2.5, vib_std=1.0,
        usage_base=5000, usage_increment=(1, 5),
        power_mean=25, power_std=5,
        noise_mean=72, noise_std=4,
    ),
    "Conveyor Belt": MachineTypeProfile(
        temp_mean=35, temp_std=5,
        vib_mean=1.8, vib_std=0.8,
        usage_base=7000, usage_increment=(2, 8),
        power_mean=15, power_std=3,
        noise_mean=65, noise_std=3,
    ),
    "Hydraulic Press": MachineTypeProfile(
        temp_mean=55, temp_std=10,
        vib_mean=3.0, vib_std=1.2,
        usage_base=4000, usage_increment=(1, 4),
        power_mean=40, power_std=8,
        noise_mean=80, noise_std=5,
    ),
    "Industrial Robot": MachineTypeProfile(
        temp_mean=40, temp_std=6,
        vib_mean=1.5, vib_std=0.6,
        usage_base=6000, usage_increment=(2, 6),
        power_mean=20, power_std=4,
        noise_mean=55, noise_std=3,
    ),
    "Compressor": MachineTypeProfile(
        temp_mean=60, temp_std=12,
        vib_mean=3.5, vib_std=1.5,
        usage_base=9000, usage_increment=(3, 10),
        power_mean=35, power_std=7,
        noise_mean=85, noise_std=5,
    ),
}

DEFAULT_PROFILE = MachineTypeProfile(
    temp_mean=45, temp_std=8,
    vib_mean=2.0, vib_std=1.0,
    usage_base=5000, usage_increment=(1, 5),
    power_mean=20, power_std=5,
    noise_mean=70, noise_std=4,
)


def get_profile(machine_type: Optional[str]) -> MachineTypeProfile:
    """Profile for a machine type, DEFAULT_PROFILE when the type is unknown."""
    return PROFILES.get(machine_type, DEFAULT_PROFILE)
