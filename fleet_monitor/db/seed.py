# fleet_monitor/db/seed.py
import logging
import random
from datetime import datetime, timedelta, timezone

logger = logging.getLogger("seed")

SEED_MACHINES = [
    {"name": "CNC Mill Alpha-1", "type": "CNC Mill", "location": "Building A - Floor 1"},
    {"name": "Conveyor Line B-3", "type": "Conveyor Belt", "location": "Building A - Floor 2"},
    {"name": "Hydraulic Press HP-7", "type": "Hydraulic Press", "location": "Building B - Floor 1"},
    {"name": "Robot Arm R-12", "type": "Industrial Robot", "location": "Building B - Floor 2"},
    {"name": "Compressor Unit C-5", "type": "Compressor", "location": "Building C - Utility Room"},
    {"name": "CNC Mill Alpha-2", "type": "CNC Mill", "location": "Building A - Floor 1"},
    {"name": "Conveyor Line B-7", "type": "Conveyor Belt", "location": "Building A - Floor 3"},
    {"name": "Hydraulic Press HP-12", "type": "Hydraulic Press", "location": "Building B - Floor 1"},
]


def _days_ago(rng, low: int, high: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=rng.randint(low, high))


def seed_machines(store, rng=None) -> int:
    """Insert the demo fleet when the machines table is empty. Returns rows inserted."""
    rng = rng or random.Random()
    if store.count_machines() > 0:
        return 0

    for m in SEED_MACHINES:
        store.insert_machine({
            **m,
            "status": "operational",
            "install_date": _days_ago(rng, 365, 2000),
            "last_maintenance": _days_ago(rng, 7, 180),
        })

    logger.info("Seeded %d machines", len(SEED_MACHINES))
    return len(SEED_MACHINES)
