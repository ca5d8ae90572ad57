# fleet_monitor/api/v1/deps.py
from fastapi import HTTPException, Request

from fleet_monitor.services.db_service import SqlStore


# ============================================================
# Handles opened in the app lifespan, shared by all routers
# ============================================================
def get_store(request: Request) -> SqlStore:
    return request.app.state.store


def get_rng(request: Request):
    return request.app.state.rng


def get_simulation_lock(request: Request):
    return request.app.state.simulation_lock


def require_machine(store: SqlStore, machine_id: int) -> dict:
    machine = store.get_machine(machine_id)
    if machine is None:
        raise HTTPException(404, "Machine not found")
    return machine
