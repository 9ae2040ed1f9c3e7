"""Counters for processed readings, latency, queue use and alerts."""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from typing import Union

from drillbox.sensors.readings import SensorType


class Metrics:
    """Thread-safe processing statistics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._readings_processed = 0
        self._total_latency_us = 0
        self._queue_size = 0
        self._queue_capacity = 0
        self._alerts: dict[SensorType, int] = {}
        self._start = time.monotonic()

    def record_reading(self, latency: Union[float, timedelta]) -> None:
        """Count one processed reading that took ``latency`` (seconds or timedelta)."""
        seconds = latency.total_seconds() if isinstance(latency, timedelta) else float(latency)
        with self._lock:
            self._readings_processed += 1
            self._total_latency_us += int(seconds * 1_000_000)

    def update_queue_status(self, size: int, capacity: int) -> None:
        with self._lock:
            self._queue_size = size
            self._queue_capacity = capacity

    def record_alert(self, sensor_type: SensorType) -> None:
        with self._lock:
            self._alerts[sensor_type] = self._alerts.get(sensor_type, 0) + 1

    @property
    def readings_processed(self) -> int:
        with self._lock:
            return self._readings_processed

    @property
    def average_latency_us(self) -> float:
        with self._lock:
            if not self._readings_processed:
                return 0.0
            return self._total_latency_us / self._readings_processed

    @property
    def alerts_per_sensor(self) -> dict[SensorType, int]:
        with self._lock:
            return dict(self._alerts)

    def report(self) -> str:
        """Return a multi-line statistics report."""
        with self._lock:
            processed = self._readings_processed
            latency = self._total_latency_us
            size = self._queue_size
            capacity = self._queue_capacity
            alerts = dict(self._alerts)
        elapsed = time.monotonic() - self._start
        rate = processed / elapsed if elapsed > 0 else 0.0
        average = latency / processed if processed else 0.0
        utilisation = size / capacity * 100 if capacity else 0.0

        lines = [
            "--- 📊 Statistics Report ---",
            f"⏱️  Readings Processed: {processed} ({rate:.2f} ops/sec)",
            f"🧪 Average Latency: {average:.2f} µs",
            f"📦 Queue Utilization: {utilisation:.2f}% ({size}/{capacity})",
            "🚨 Alerts per Sensor Type:",
        ]
        lines.extend(
            f"   - {sensor_type.value}: {count} alerts" for sensor_type, count in alerts.items()
        )
        lines.append("---------------------------")
        return "\n".join(lines)