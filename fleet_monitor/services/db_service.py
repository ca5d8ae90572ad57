# fleet_monitor/services/db_service.py
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Any, Optional, List

from sqlalchemy import create_engine, func, select, insert, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from fleet_monitor.core.errors import StorageError
from fleet_monitor.db.models import Base, Machine, SensorReading, Alert

logger = logging.getLogger("db_service")

_machines = Machine.__table__
_readings = SensorReading.__table__
_alerts = Alert.__table__


def resolve_database_url(settings) -> str:
    """
    Pick the SQLAlchemy URL from settings.
    A full DATABASE_URL wins, then a Postgres URL built from DB_* parts
    (only when DB_HOST is set), then the local SQLite file.
    """
    url = getattr(settings, "DATABASE_URL", None)
    if url and "://" in url:
        return url

    host = getattr(settings, "DB_HOST", None)
    if host:
        port = getattr(settings, "DB_PORT", None)
        user = getattr(settings, "DB_USER", None)
        pwd = getattr(settings, "DB_PASS", None)
        dbname = getattr(settings, "DB_NAME", None)
        port_part = f":{port}" if port else ""
        # include password only if provided (non-empty)
        auth_part = f"{user}:{pwd}" if pwd else f"{user}"
        return f"postgresql+psycopg2://{auth_part}@{host}{port_part}/{dbname}"

    return f"sqlite:///{settings.DB_PATH}"


def row_to_dict_safe(r) -> Optional[Dict[str, Any]]:
    if r is None:
        return None
    if isinstance(r, dict):
        return r
    mapping = getattr(r, "_mapping", None)
    if mapping is not None:
        return dict(mapping)
    raise TypeError("Unknown row type for conversion")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlStore:
    """
    Relational store for machines, sensor readings and alerts.

    Owns one SQLAlchemy engine. Open it at process start, close() it at
    shutdown. Every SQLAlchemyError is logged and re-raised as StorageError.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "SqlStore":
        connect_args = {}
        if url.startswith("sqlite"):
            # FastAPI runs sync endpoints on a threadpool
            connect_args["check_same_thread"] = False
        engine = create_engine(url, echo=echo, future=True, connect_args=connect_args)
        logger.info("db_service: engine created for %s", engine.url.render_as_string(hide_password=True))
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def init_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            logger.exception("db_service: failed to create tables")
            raise StorageError(f"Schema creation failed: {e}") from e
        logger.info("db_service: ensured tables exist.")

    def close(self) -> None:
        self._engine.dispose()
        logger.info("db_service: engine disposed")

    @contextmanager
    def _connect(self, write: bool = False):
        try:
            ctx = self._engine.begin() if write else self._engine.connect()
            with ctx as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.exception("db_service: query failed: %s", e)
            raise StorageError(str(e)) from e

    # ============================================================
    # Machines
    # ============================================================
    def insert_machine(self, machine: Dict[str, Any]) -> int:
        values = {
            "name": machine["name"],
            "type": machine["type"],
            "location": machine["location"],
            "status": machine.get("status", "operational"),
            "install_date": machine.get("install_date"),
            "last_maintenance": machine.get("last_maintenance"),
            "failure_probability": machine.get("failure_probability", 0.0),
            "risk_level": machine.get("risk_level", "low"),
        }
        with self._connect(write=True) as conn:
            result = conn.execute(insert(_machines).values(**values))
            return result.inserted_primary_key[0]

    def get_machine(self, machine_id: int) -> Optional[Dict[str, Any]]:
        stmt = select(_machines).where(_machines.c.id == machine_id)
        with self._connect() as conn:
            return row_to_dict_safe(conn.execute(stmt).fetchone())

    def list_machines(self, order_by: str = "id") -> List[Dict[str, Any]]:
        column = _machines.c.name if order_by == "name" else _machines.c.id
        stmt = select(_machines).order_by(column)
        with self._connect() as conn:
            return [row_to_dict_safe(r) for r in conn.execute(stmt).fetchall()]

    def count_machines(self) -> int:
        stmt = select(func.count()).select_from(_machines)
        with self._connect() as conn:
            return conn.execute(stmt).scalar_one()

    def update_machine(self, machine_id: int, fields: Dict[str, Any]) -> bool:
        values = dict(fields)
        values.setdefault("updated_at", _utcnow())
        stmt = update(_machines).where(_machines.c.id == machine_id).values(**values)
        with self._connect(write=True) as conn:
            return conn.execute(stmt).rowcount > 0

    # ============================================================
    # Sensor readings
    # ============================================================
    def get_latest_usage(self, machine_id: int) -> Optional[float]:
        stmt = (
            select(_readings.c.usage_hours)
            .where(_readings.c.machine_id == machine_id)
            .order_by(_readings.c.id.desc())  # insert order, not wall clock
            .limit(1)
        )
        with self._connect() as conn:
            return conn.execute(stmt).scalar()

    def insert_reading(self, reading: Dict[str, Any]) -> int:
        values = {
            "machine_id": reading["machine_id"],
            "temperature": reading["temperature"],
            "vibration": reading["vibration"],
            "usage_hours": reading["usage_hours"],
            "power_consumption": reading.get("power_consumption"),
            "noise_level": reading.get("noise_level"),
            "failure_probability": reading["failure_probability"],
            "risk_level": reading["risk_level"],
            "is_anomaly": bool(reading["is_anomaly"]),
            "recorded_at": reading.get("recorded_at") or _utcnow(),
        }
        with self._connect(write=True) as conn:
            result = conn.execute(insert(_readings).values(**values))
            inserted_id = result.inserted_primary_key[0]
        logger.debug("db_service: inserted reading %s: %s", inserted_id, values)
        return inserted_id

    def get_reading(self, reading_id: int) -> Optional[Dict[str, Any]]:
        stmt = select(_readings).where(_readings.c.id == reading_id)
        with self._connect() as conn:
            return row_to_dict_safe(conn.execute(stmt).fetchone())

    def latest_reading(self, machine_id: int) -> Optional[Dict[str, Any]]:
        stmt = (
            select(_readings)
            .where(_readings.c.machine_id == machine_id)
            .order_by(_readings.c.id.desc())
            .limit(1)
        )
        with self._connect() as conn:
            return row_to_dict_safe(conn.execute(stmt).fetchone())

    def list_readings(self, machine_id: Optional[int] = None, limit: int = 50) -> List[Dict[str, Any]]:
        """Most recent first."""
        stmt = select(_readings).order_by(_readings.c.recorded_at.desc(), _readings.c.id.desc()).limit(limit)
        if machine_id is not None:
            stmt = stmt.where(_readings.c.machine_id == machine_id)
        with self._connect() as conn:
            return [row_to_dict_safe(r) for r in conn.execute(stmt).fetchall()]

    def list_anomalies(self, limit: int = 50) -> List[Dict[str, Any]]:
        stmt = (
            select(_readings)
            .where(_readings.c.is_anomaly.is_(True))
            .order_by(_readings.c.recorded_at.desc(), _readings.c.id.desc())
            .limit(limit)
        )
        with self._connect() as conn:
            return [row_to_dict_safe(r) for r in conn.execute(stmt).fetchall()]

    def count_anomalies_since(self, since: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(_readings)
            .where(_readings.c.is_anomaly.is_(True))
            .where(_readings.c.recorded_at >= since)
        )
        with self._connect() as conn:
            return conn.execute(stmt).scalar_one()

    # ============================================================
    # Alerts
    # ============================================================
    def insert_alert(self, alert: Dict[str, Any]) -> int:
        values = {
            "machine_id": alert["machine_id"],
            "severity": alert["severity"],
            "title": alert["title"],
            "message": alert["message"],
            "recommendation": alert.get("recommendation"),
            "failure_probability": alert.get("failure_probability"),
            "is_resolved": False,
            "created_at": alert.get("created_at") or _utcnow(),
        }
        with self._connect(write=True) as conn:
            result = conn.execute(insert(_alerts).values(**values))
            return result.inserted_primary_key[0]

    def get_alert(self, alert_id: int) -> Optional[Dict[str, Any]]:
        stmt = select(_alerts).where(_alerts.c.id == alert_id)
        with self._connect() as conn:
            return row_to_dict_safe(conn.execute(stmt).fetchone())

    def list_alerts(
        self,
        severity: Optional[str] = None,
        resolved: Optional[bool] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        """Most recent first, optionally filtered by severity and resolution."""
        stmt = select(_alerts).order_by(_alerts.c.created_at.desc(), _alerts.c.id.desc()).limit(limit)
        if severity:
            stmt = stmt.where(_alerts.c.severity == severity)
        if resolved is not None:
            stmt = stmt.where(_alerts.c.is_resolved.is_(resolved))
        with self._connect() as conn:
            return [row_to_dict_safe(r) for r in conn.execute(stmt).fetchall()]

    def resolve_alert(self, alert_id: int, resolved_at: Optional[datetime] = None) -> bool:
        stmt = (
            update(_alerts)
            .where(_alerts.c.id == alert_id)
            .values(is_resolved=True, resolved_at=resolved_at or _utcnow())
        )
        with self._connect(write=True) as conn:
            return conn.execute(stmt).rowcount > 0
