# fleet_monitor/api/v1/sensors.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fleet_monitor.api.v1.deps import get_rng, get_simulation_lock, get_store, require_machine
from fleet_monitor.api.v1.schemas import ReadingOut
from fleet_monitor.services.db_service import SqlStore
from fleet_monitor.services.sensor_simulator import generate_all_readings, generate_reading

router = APIRouter(prefix="/sensors", tags=["sensors"])
LOGGER = logging.getLogger("sensors")


# ------------------- GET /sensors/readings -------------------
@router.get("/readings", response_model=List[ReadingOut])
def list_readings(
    machine_id: Optional[int] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    store: SqlStore = Depends(get_store),
):
    """
    Recent sensor readings, newest first.

    - GET /sensors/readings → last 50 rows across the fleet
    - GET /sensors/readings?machine_id=3 → filter by machine
    """
    return store.list_readings(machine_id=machine_id, limit=limit)


@router.get("/readings/{machine_id}/latest", response_model=ReadingOut)
def latest_reading(machine_id: int, store: SqlStore = Depends(get_store)):
    row = store.latest_reading(machine_id)
    if row is None:
        raise HTTPException(404, "No readings found for this machine")
    return row


@router.get("/anomalies", response_model=List[ReadingOut])
def list_anomalies(limit: int = Query(50, ge=1, le=200), store: SqlStore = Depends(get_store)):
    return store.list_anomalies(limit=limit)


# ------------------- POST /sensors/simulate -------------------
@router.post("/simulate", response_model=List[ReadingOut])
def simulate_all(
    store: SqlStore = Depends(get_store),
    rng=Depends(get_rng),
    lock=Depends(get_simulation_lock),
):
    """One new simulated reading for every machine."""
    with lock:
        readings = generate_all_readings(store, rng)
    LOGGER.info("Simulated %d readings", len(readings))
    return readings


@router.post("/simulate/{machine_id}", response_model=ReadingOut)
def simulate_one(
    machine_id: int,
    store: SqlStore = Depends(get_store),
    rng=Depends(get_rng),
    lock=Depends(get_simulation_lock),
):
    with lock:
        machine = require_machine(store, machine_id)
        return generate_reading(store, machine, rng)
