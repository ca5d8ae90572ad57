# fleet_monitor/api/v1/alerts.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from fleet_monitor.api.v1.deps import get_store
from fleet_monitor.api.v1.schemas import AlertOut
from fleet_monitor.services import alert_service
from fleet_monitor.services.db_service import SqlStore

router = APIRouter(prefix="/alerts", tags=["alerts"])
logger = logging.getLogger("alerts")


@router.get("/", response_model=List[AlertOut])
def list_alerts(
    severity: Optional[str] = Query(None),
    resolved: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    store: SqlStore = Depends(get_store),
):
    return store.list_alerts(severity=severity, resolved=resolved, limit=limit)


@router.get("/unresolved", response_model=List[AlertOut])
def list_unresolved(limit: int = Query(50, ge=1, le=200), store: SqlStore = Depends(get_store)):
    return store.list_alerts(resolved=False, limit=limit)


@router.patch("/{alert_id}/resolve", response_model=AlertOut)
def resolve(alert_id: int, store: SqlStore = Depends(get_store)):
    return alert_service.resolve_alert(store, alert_id)
