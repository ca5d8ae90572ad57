# fleet_monitor/db/models.py
from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    Float,
    Boolean,
    ForeignKey,
    TIMESTAMP,
    Text,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# SQLite only autoincrements INTEGER PRIMARY KEY
BigIntId = BigInteger().with_variant(Integer, "sqlite")


class Machine(Base):
    __tablename__ = "machines"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    type = Column(String(100), nullable=False)
    location = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="operational")  # operational | warning | critical | offline
    install_date = Column(TIMESTAMP(timezone=True))
    last_maintenance = Column(TIMESTAMP(timezone=True))
    failure_probability = Column(Float, nullable=False, default=0.0)
    risk_level = Column(String(20), nullable=False, default="low")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


class SensorReading(Base):
    __tablename__ = "sensor_readings"

    id = Column(BigIntId, primary_key=True, index=True, autoincrement=True)
    machine_id = Column(Integer, ForeignKey("machines.id"), nullable=False, index=True)
    temperature = Column(Float, nullable=False)
    vibration = Column(Float, nullable=False)
    usage_hours = Column(Float, nullable=False)
    power_consumption = Column(Float)
    noise_level = Column(Float)
    failure_probability = Column(Float, nullable=False, default=0.0)
    risk_level = Column(String(20), nullable=False, default="low")
    is_anomaly = Column(Boolean, nullable=False, default=False)
    recorded_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True)


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(BigIntId, primary_key=True, index=True, autoincrement=True)
    machine_id = Column(Integer, ForeignKey("machines.id"), nullable=False, index=True)
    severity = Column(String(20), nullable=False)  # low | high | critical
    title = Column(String(300), nullable=False)
    message = Column(Text, nullable=False)
    recommendation = Column(Text)
    failure_probability = Column(Float)
    is_resolved = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True)
    resolved_at = Column(TIMESTAMP(timezone=True))
