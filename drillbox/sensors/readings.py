"""Sensor readings, alerts and the anomaly rules applied to them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SensorType(str, Enum):
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    MOTION = "motion"
    PRESSURE = "pressure"
    LIGHT = "light"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


def _local_time(timestamp: float) -> datetime:
    """Turn a Unix timestamp (truncated to whole seconds) into local, aware time."""
    return datetime.fromtimestamp(int(timestamp)).astimezone()


@dataclass
class Alert:
    sensor_id: float
    type: SensorType
    message: str
    severity: Severity
    time: datetime
    severe_timestamp: Optional[datetime] = None


@dataclass
class Stats:
    """Running sum and count of the values seen for one sensor type."""

    sum: float = 0.0
    count: int = 0
    severe_timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class SensorReading:
    sensor_id: float
    type: SensorType
    value: float
    timestamp: float = 0.0
    location: str = ""

    def validate(self) -> bool:
        """Reject negative values (except temperature) and readings with no location."""
        if self.value < 0 and self.type != SensorType.TEMPERATURE:
            return False
        return self.location != ""

    def check_anomalies(self) -> Optional[Alert]:
        """Return an alert if the reading breaks a rule for its type, else None."""
        if self.type == SensorType.TEMPERATURE and self.value > 50:
            return Alert(
                sensor_id=self.sensor_id,
                type=self.type,
                message=f"High Temperature detected! Value: {self.value:.2f}°C at {self.location}",
                severity=Severity.WARNING,
                time=_local_time(self.timestamp),
            )
        if self.type == SensorType.HUMIDITY and self.value > 95:
            return Alert(
                sensor_id=self.sensor_id,
                type=self.type,
                message=f"Critical Humidity! Value: {self.value:.2f}% at {self.location}",
                severity=Severity.CRITICAL,
                time=_local_time(self.timestamp),
            )
        if self.type == SensorType.MOTION:
            moment = _local_time(self.timestamp)
            if moment.hour >= 22 or moment.hour < 6:
                return Alert(
                    sensor_id=self.sensor_id,
                    type=self.type,
                    message=(
                        f"Restricted Motion detected! Time: {moment.hour:02d}:{moment.minute:02d}"
                        f" at {self.location}"
                    ),
                    severity=Severity.WARNING,
                    time=moment,
                )
        return None