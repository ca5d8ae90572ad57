# fleet_monitor/services/state_updater.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fleet_monitor.services.alert_service import create_alert
from fleet_monitor.services.risk_engine import RiskLevel, ScoreResult

logger = logging.getLogger("state_updater")

# offline is never derived here, only set externally
STATUS_BY_RISK = {
    RiskLevel.HIGH: "critical",
    RiskLevel.MEDIUM: "warning",
    RiskLevel.LOW: "operational",
}


def status_for_risk(risk_level) -> str:
    return STATUS_BY_RISK[RiskLevel(risk_level)]


def apply_reading(
    store,
    machine: Dict[str, Any],
    values,
    result: ScoreResult,
    recorded_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Persist a scored reading and move the machine to its new state.

    Inserts the reading, updates the machine's status, failure probability
    and risk level, and creates one alert when the reading is anomalous.
    Writes are not wrapped in a single transaction; a StorageError can leave
    the reading stored without the machine update or alert.

    Returns:
        The persisted reading row
    """
    recorded_at = recorded_at or datetime.now(timezone.utc)
    risk_level = RiskLevel(result.risk_level).value

    reading_id = store.insert_reading({
        "machine_id": machine["id"],
        "temperature": values.temperature,
        "vibration": values.vibration,
        "usage_hours": values.usage_hours,
        "power_consumption": values.power_consumption,
        "noise_level": values.noise_level,
        "failure_probability": result.failure_probability,
        "risk_level": risk_level,
        "is_anomaly": result.is_anomaly,
        "recorded_at": recorded_at,
    })

    status = status_for_risk(risk_level)
    store.update_machine(machine["id"], {
        "failure_probability": result.failure_probability,
        "risk_level": risk_level,
        "status": status,
        "updated_at": recorded_at,
    })
    logger.debug(
        "state_updater: machine %s -> %s (p=%.1f, anomaly=%s)",
        machine["id"], status, result.failure_probability, result.is_anomaly,
    )

    if result.is_anomaly:
        create_alert(store, machine, result, created_at=recorded_at)

    return store.get_reading(reading_id)
