# fleet_monitor/core/errors.py


class FleetMonitorError(Exception):
    """Base class for errors raised by the engine and its store."""


class NotFoundError(FleetMonitorError):
    """A machine, reading or alert id does not exist."""


class StorageError(FleetMonitorError):
    """Persistence failed. Not safe to retry blindly: earlier writes may have landed."""
