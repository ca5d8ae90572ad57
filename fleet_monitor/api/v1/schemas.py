# fleet_monitor/api/v1/schemas.py
from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field


class MachineStatus(str, Enum):
    OPERATIONAL = "operational"
    WARNING = "warning"
    CRITICAL = "critical"
    OFFLINE = "offline"


# ==== Machines ====
class MachineOut(BaseModel):
    id: int
    name: str
    type: str
    location: str
    status: MachineStatus
    install_date: Optional[datetime] = None
    last_maintenance: Optional[datetime] = None
    failure_probability: float   # 0-100
    risk_level: str              # low | medium | high
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MachineStatusUpdate(BaseModel):
    status: MachineStatus


# ==== Sensor readings ====
class ReadingOut(BaseModel):
    id: int
    machine_id: int
    temperature: float
    vibration: float
    usage_hours: float
    power_consumption: Optional[float] = None
    noise_level: Optional[float] = None
    failure_probability: float
    risk_level: str
    is_anomaly: bool
    recorded_at: Optional[datetime] = None


class SensorInput(BaseModel):
    """Physically plausible bounds; anything outside is rejected before scoring."""
    temperature: float = Field(..., ge=-50, le=500, allow_inf_nan=False, description="°C")
    vibration: float = Field(..., ge=0, le=100, allow_inf_nan=False, description="mm/s")
    usage_hours: float = Field(..., ge=0, le=100000, allow_inf_nan=False, description="cumulative hours")
    power_consumption: Optional[float] = Field(None, ge=0, le=1000, allow_inf_nan=False, description="kW")
    noise_level: Optional[float] = Field(None, ge=0, le=200, allow_inf_nan=False, description="dB")


# ==== Alerts ====
class AlertOut(BaseModel):
    id: int
    machine_id: int
    severity: str                # low | high | critical
    title: str
    message: str
    recommendation: Optional[str] = None
    failure_probability: Optional[float] = None
    is_resolved: bool
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


# ==== Dashboard ====
class DashboardSummary(BaseModel):
    total_machines: int
    operational_count: int
    warning_count: int
    critical_count: int
    offline_count: int
    average_failure_probability: float
    high_risk_machines: List[MachineOut]
    recent_alerts: List[AlertOut]
    total_anomalies_today: int


# ==== Errors ====
class ErrorDetail(BaseModel):
    loc: list
    msg: str
    type: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[List[ErrorDetail]] = None
