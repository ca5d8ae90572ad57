# fleet_monitor/api/v1/dashboard.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from fleet_monitor.api.v1.deps import get_store
from fleet_monitor.api.v1.schemas import DashboardSummary
from fleet_monitor.services.db_service import SqlStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# ============================================================
# GET /dashboard/summary
# ============================================================
@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(store: SqlStore = Depends(get_store)):
    machines = store.list_machines(order_by="name")
    total = len(machines)

    counts = {"operational": 0, "warning": 0, "critical": 0, "offline": 0}
    for m in machines:
        if m["status"] in counts:
            counts[m["status"]] += 1

    avg_prob = round(sum(m["failure_probability"] or 0.0 for m in machines) / total, 1) if total else 0.0

    today_start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    return {
        "total_machines": total,
        "operational_count": counts["operational"],
        "warning_count": counts["warning"],
        "critical_count": counts["critical"],
        "offline_count": counts["offline"],
        "average_failure_probability": avg_prob,
        "high_risk_machines": [m for m in machines if m["risk_level"] == "high"],
        "recent_alerts": store.list_alerts(resolved=False, limit=10),
        "total_anomalies_today": store.count_anomalies_since(today_start),
    }
