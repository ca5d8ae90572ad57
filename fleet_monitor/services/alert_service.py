# fleet_monitor/services/alert_service.py
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fleet_monitor.core.errors import NotFoundError
from fleet_monitor.services.risk_engine import HIGH_RISK_THRESHOLD

logger = logging.getLogger("alert_service")


def alert_severity(failure_probability: float) -> str:
    return "critical" if failure_probability >= HIGH_RISK_THRESHOLD else "high"


def create_alert(store, machine: Dict[str, Any], result, created_at: Optional[datetime] = None) -> int:
    """Persist one alert for an anomalous score result. No deduplication against open alerts."""
    alert = {
        "machine_id": machine["id"],
        "severity": alert_severity(result.failure_probability),
        "title": f"Anomaly detected on {machine['name']}",
        "message": "; ".join(result.anomaly_details),
        "recommendation": "; ".join(result.recommendations),
        "failure_probability": result.failure_probability,
        "created_at": created_at,
    }
    alert_id = store.insert_alert(alert)
    logger.info(
        "Alert %s created for machine %s (severity=%s, p=%.1f)",
        alert_id, machine["id"], alert["severity"], result.failure_probability,
    )
    return alert_id


def resolve_alert(store, alert_id: int) -> Dict[str, Any]:
    if not store.resolve_alert(alert_id):
        raise NotFoundError(f"Alert {alert_id} not found")
    logger.info("Alert %s resolved", alert_id)
    return store.get_alert(alert_id)
