# fleet_monitor/api/v1/machines.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from fleet_monitor.api.v1.deps import get_store, require_machine
from fleet_monitor.api.v1.schemas import MachineOut, MachineStatusUpdate
from fleet_monitor.services.db_service import SqlStore

router = APIRouter(prefix="/machines", tags=["machines"])
logger = logging.getLogger("machines")


# ============================================================
# GET /machines
# ============================================================
@router.get("/", response_model=List[MachineOut])
def list_machines(store: SqlStore = Depends(get_store)):
    return store.list_machines(order_by="name")


# ============================================================
# GET /machines/{machine_id}
# ============================================================
@router.get("/{machine_id}", response_model=MachineOut)
def get_machine(machine_id: int, store: SqlStore = Depends(get_store)):
    return require_machine(store, machine_id)


# ============================================================
# PATCH /machines/{machine_id}/status
# ============================================================
@router.patch("/{machine_id}/status", response_model=MachineOut)
def set_status(machine_id: int, payload: MachineStatusUpdate, store: SqlStore = Depends(get_store)):
    """Manual override, the only way a machine becomes offline. The next reading recomputes status."""
    require_machine(store, machine_id)
    store.update_machine(machine_id, {"status": payload.status.value})
    logger.info("Machine %s status set to %s", machine_id, payload.status.value)
    return store.get_machine(machine_id)
