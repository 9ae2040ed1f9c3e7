"""Generate, validate, aggregate and alert on sensor readings in worker threads."""

from __future__ import annotations

import argparse
import queue
import random
import threading
import time
from datetime import datetime, timedelta
from typing import Optional

from drillbox.sensors.metrics import Metrics
from drillbox.sensors.readings import Alert, SensorReading, SensorType, Stats

_TYPES = list(SensorType)
_GENERATE_INTERVAL = 0.1
_DEDUP_WINDOW = timedelta(seconds=60)
_REPORT_INTERVAL = 2.0


class SensorHub:
    """Shared state for the reading pipeline: per-type stats and alert deduplication."""

    def __init__(self, metrics: Optional[Metrics] = None) -> None:
        self.metrics = metrics if metrics is not None else Metrics()
        self._lock = threading.Lock()
        self._data: dict[SensorType, list[SensorReading]] = {}
        self._stats: dict[SensorType, Stats] = {t: Stats() for t in _TYPES}
        self._last_alert: dict[float, datetime] = {}

    def make_reading(self, rng: random.Random, now: Optional[float] = None) -> SensorReading:
        """Build one random reading stamped with ``now`` (seconds since the epoch)."""
        if now is None:
            now = time.time()
        return SensorReading(
            sensor_id=float(rng.randint(1, 5)),
            type=rng.choice(_TYPES),
            value=float(rng.randrange(100)),
            timestamp=float(int(now)),
            location="Room " + str(rng.randrange(10)),
        )

    def generate_readings(
        self,
        stop: threading.Event,
        readings: queue.Queue,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Offer a new reading every 100 ms until ``stop`` is set, skipping when full."""
        rng = rng or random.Random()
        while not stop.wait(_GENERATE_INTERVAL):
            if readings.maxsize > 0 and readings.qsize() >= readings.maxsize * 0.85:
                print("Queue 85% full — applying backpressure")
            reading = self.make_reading(rng)
            try:
                readings.put_nowait(reading)
            except queue.Full:
                print("Channel is full, skipping reading")
                continue
            with self._lock:
                self._data.setdefault(reading.type, []).append(reading)
        print("Generator stopping...")

    def process_reading(self, reading: SensorReading, alerts: queue.Queue) -> Optional[float]:
        """Validate, alert on and aggregate one reading; return its type's new average."""
        start = time.perf_counter()
        if not reading.validate():
            print(f"❌ Invalid reading received: {reading!r}")
            return None

        alert = reading.check_anomalies()
        if alert is not None:
            alerts.put(alert)

        with self._lock:
            stats = self._stats.setdefault(reading.type, Stats())
            stats.sum += reading.value
            stats.count += 1
            average = stats.sum / stats.count
        self.metrics.record_reading(time.perf_counter() - start)
        print(
            f"✅ Processed {reading.type.value}: Value={reading.value:.2f}, "
            f"Rolling Average={average:.2f}"
        )
        return average

    def process_readings(self, readings: queue.Queue, alerts: queue.Queue) -> None:
        """Process readings until a None sentinel is taken from the queue."""
        for reading in iter(readings.get, None):
            self.process_reading(reading, alerts)

    def handle_alert(self, alert: Alert) -> bool:
        """Log ``alert`` unless its sensor alerted within the last minute; tell whether logged."""
        with self._lock:
            last = self._last_alert.get(alert.sensor_id)
            if last is not None and alert.time - last < _DEDUP_WINDOW:
                return False
            self._last_alert[alert.sensor_id] = datetime.now().astimezone()
        self.metrics.record_alert(alert.type)
        print(
            f"🚨 ALERT [{alert.severity.value}] Sensor ID {alert.sensor_id:.0f}: "
            f"{alert.message} at {alert.time.strftime('%d %b %y %H:%M %Z')}"
        )
        return True

    def handle_alerts(self, stop: threading.Event, alerts: queue.Queue) -> None:
        """Handle alerts until a None sentinel arrives or ``stop`` is set while idle."""
        while True:
            try:
                alert = alerts.get(timeout=0.1)
            except queue.Empty:
                if stop.is_set():
                    print("Alert handler stopping due to context cancellation...")
                    return
                continue
            if alert is None:
                print("Alert channel closed, handler stopping...")
                return
            self.handle_alert(alert)

    def rolling_average(self, sensor_type: SensorType) -> float:
        """Return the mean value seen for ``sensor_type``, or 0.0 if none yet."""
        with self._lock:
            stats = self._stats.get(sensor_type)
            if stats is None or stats.count == 0:
                return 0.0
            return stats.sum / stats.count


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the sensor reading pipeline.")
    parser.add_argument(
        "--duration", type=float, default=None, help="seconds to run (default: until Ctrl+C)"
    )
    args = parser.parse_args(argv)

    hub = SensorHub()
    stop = threading.Event()
    readings: queue.Queue = queue.Queue(maxsize=10)
    alerts: queue.Queue = queue.Queue(maxsize=100)

    generators = [
        threading.Thread(target=hub.generate_readings, args=(stop, readings), daemon=True)
        for _ in range(5)
    ]
    processors = [
        threading.Thread(target=hub.process_readings, args=(readings, alerts), daemon=True)
        for _ in range(2)
    ]

    def report_loop() -> None:
        while not stop.wait(_REPORT_INTERVAL):
            hub.metrics.update_queue_status(readings.qsize(), readings.maxsize)
            print("\n" + hub.metrics.report())

    handlers = [
        threading.Thread(target=hub.handle_alerts, args=(stop, alerts), daemon=True),
        threading.Thread(target=report_loop, daemon=True),
    ]
    for thread in generators + processors + handlers:
        thread.start()

    try:
        if args.duration is None:
            while not stop.wait(1.0):
                pass
        else:
            stop.wait(args.duration)
    except KeyboardInterrupt:
        pass
    stop.set()
    print("\nShutdown signal received. Cleaning up...")

    for thread in generators:
        thread.join()
    for _ in processors:
        readings.put(None)
    for thread in processors:
        thread.join()
    print("Processors finished. Closing alerts channel...")

    alerts.put(None)
    for thread in handlers:
        thread.join()
    print("All workers finished. Exit.")
    return 0