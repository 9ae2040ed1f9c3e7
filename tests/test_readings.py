from datetime import datetime

import pytest

from drillbox.sensors.readings import SensorReading, SensorType, Severity


def _local_ts(hour):
    return datetime(2023, 10, 27, hour, 0, 0).timestamp()


@pytest.mark.parametrize(
    "reading, expects, severity",
    [
        (SensorReading(0, SensorType.TEMPERATURE, 25.0, location="Living Room"), False, None),
        (SensorReading(0, SensorType.TEMPERATURE, 55.0, location="Kitchen"), True, Severity.WARNING),
        (SensorReading(0, SensorType.HUMIDITY, 45.0, location="Basement"), False, None),
        (SensorReading(0, SensorType.HUMIDITY, 98.0, location="Basement"), True, Severity.CRITICAL),
        (SensorReading(0, SensorType.MOTION, 1.0, _local_ts(12), "Patio"), False, None),
        (SensorReading(0, SensorType.MOTION, 1.0, _local_ts(23), "Patio"), True, Severity.WARNING),
    ],
    ids=[
        "normal-temperature",
        "high-temperature",
        "normal-humidity",
        "critical-humidity",
        "motion-normal-hours",
        "motion-restricted-11pm",
    ],
)
def test_check_anomalies(reading, expects, severity):
    alert = reading.check_anomalies()
    assert (alert is not None) == expects
    if expects:
        assert alert.severity == severity
        assert alert.type == reading.type


def test_temperature_alert_message():
    alert = SensorReading(3, SensorType.TEMPERATURE, 55.0, location="Kitchen").check_anomalies()
    assert alert.message == "High Temperature detected! Value: 55.00°C at Kitchen"
    assert alert.sensor_id == 3


def test_motion_alert_message_has_time():
    alert = SensorReading(1, SensorType.MOTION, 1.0, _local_ts(23), "Patio").check_anomalies()
    assert alert.message == "Restricted Motion detected! Time: 23:00 at Patio"
    assert alert.time.hour == 23


def test_pressure_never_alerts():
    assert SensorReading(1, SensorType.PRESSURE, 99.0, location="Lab").check_anomalies() is None


def test_validate_rules():
    assert SensorReading(1, SensorType.TEMPERATURE, -5.0, location="Attic").validate() is True
    assert SensorReading(1, SensorType.HUMIDITY, -5.0, location="Attic").validate() is False
    assert SensorReading(1, SensorType.LIGHT, 5.0, location="").validate() is False
    assert SensorReading(1, SensorType.LIGHT, 5.0, location="Hall").validate() is True