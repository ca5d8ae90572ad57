"""
State Updater Tests

Tests verify:
- Readings are persisted and the machine moves to the status of its risk tier
- Anomalous readings create exactly one alert, critical at >= 70 else high
- No deduplication against open alerts
- Storage failures surface as StorageError
"""

import pytest

from fleet_monitor.core.errors import NotFoundError, StorageError
from fleet_monitor.db.models import Base
from fleet_monitor.services import alert_service
from fleet_monitor.services.risk_engine import score_inputs
from fleet_monitor.services.sensor_simulator import SensorValues
from fleet_monitor.services.state_updater import STATUS_BY_RISK, apply_reading, status_for_risk


def _apply(store, machine, temperature, vibration, usage, noise=0.0, **optional):
    values = SensorValues(temperature=temperature, vibration=vibration, usage_hours=usage, **optional)
    result = score_inputs(temperature, vibration, usage, noise=noise, **optional)
    return apply_reading(store, machine, values, result), result


class TestStatusMapping:
    @pytest.mark.parametrize("risk,status", [
        ("high", "critical"), ("medium", "warning"), ("low", "operational"),
    ])
    def test_status_for_risk(self, risk, status):
        assert status_for_risk(risk) == status

    def test_offline_is_never_derived(self):
        assert "offline" not in STATUS_BY_RISK.values()


class TestApplyReading:
    def test_normal_reading_updates_machine_without_alert(self, store, machine):
        reading, result = _apply(store, machine, 50, 1, 100)

        assert reading["machine_id"] == machine["id"]
        assert reading["is_anomaly"] is False
        assert reading["risk_level"] == "low"
        assert store.get_machine(machine["id"])["status"] == "operational"
        assert store.list_alerts() == []

    def test_medium_risk_sets_warning(self, store, machine):
        reading, result = _apply(store, machine, 80, 5.0, 9000, noise=5.0)

        assert result.risk_level.value == "medium"
        assert store.get_machine(machine["id"])["status"] == "warning"
        assert store.list_alerts() == []

    def test_critical_alert_when_probability_high(self, store, machine):
        reading, result = _apply(store, machine, 110, 15, 13000, power_consumption=30.0, noise_level=70.0)

        assert result.failure_probability >= 70
        alerts = store.list_alerts()
        assert len(alerts) == 1
        alert = alerts[0]
        assert alert["severity"] == "critical"
        assert alert["title"] == "Anomaly detected on CNC Mill Alpha-1"
        assert alert["message"] == "; ".join(result.anomaly_details)
        assert alert["recommendation"] == "; ".join(result.recommendations)
        assert alert["failure_probability"] == result.failure_probability
        assert alert["is_resolved"] is False
        assert store.get_machine(machine["id"])["status"] == "critical"

    def test_high_alert_when_probability_below_threshold(self, store, machine):
        reading, result = _apply(store, machine, 90, 1, 100)

        assert result.is_anomaly is True
        assert result.failure_probability < 70
        alerts = store.list_alerts()
        assert [a["severity"] for a in alerts] == ["high"]
        # status follows the composite score, not the anomaly flag
        assert store.get_machine(machine["id"])["status"] == "operational"

    def test_alerts_are_not_deduplicated(self, store, machine):
        _apply(store, machine, 100, 2, 100)
        _apply(store, machine, 100, 2, 110)

        assert len(store.list_alerts(resolved=False)) == 2

    def test_reading_overrides_manual_status(self, store, machine):
        store.update_machine(machine["id"], {"status": "offline"})
        _apply(store, machine, 50, 1, 100)

        assert store.get_machine(machine["id"])["status"] == "operational"

    def test_storage_error_propagates(self, store, machine):
        Base.metadata.drop_all(store.engine)

        with pytest.raises(StorageError):
            _apply(store, machine, 50, 1, 100)


class TestAlertService:
    def test_severity(self):
        assert alert_service.alert_severity(70.0) == "critical"
        assert alert_service.alert_severity(69.9) == "high"

    def test_resolve_alert(self, store, machine):
        _apply(store, machine, 100, 2, 100)
        alert_id = store.list_alerts()[0]["id"]

        resolved = alert_service.resolve_alert(store, alert_id)

        assert resolved["is_resolved"] is True
        assert resolved["resolved_at"] is not None
        assert store.list_alerts(resolved=False) == []

    def test_resolve_unknown_alert(self, store):
        with pytest.raises(NotFoundError):
            alert_service.resolve_alert(store, 999)
