"""Matches queued ride requests to nearby drivers and settles fares."""

from __future__ import annotations

import math
import threading
import time
from datetime import datetime, timedelta
from typing import Optional

from drillbox.rideshare.entities import Driver, DriverStatus, Location, Ride, RideStatus, Rider
from drillbox.rideshare.ride_queue import RideQueue
from drillbox.rideshare.store import MemoryStore
from drillbox.rideshare.tracker import RideTracker

REQUEST_TIMEOUT = timedelta(minutes=10)
SEARCH_RADIUS = 5.0
BASE_FARE = 50.0
FARE_PER_UNIT = 12.0


def _distance(a: Location, b: Location) -> float:
    return math.hypot(a.lat - b.lat, a.lng - b.lng)


class Dispatcher:
    """Runs the ride lifecycle: request, match, complete."""

    def __init__(self, drivers: MemoryStore, queue: RideQueue, tracker: RideTracker) -> None:
        self._drivers = drivers
        self._queue = queue
        self._tracker = tracker
        self._earnings: dict[str, float] = {}
        self._waits: list[timedelta] = []
        self._id_lock = threading.Lock()
        self._last_stamp = 0

    def _next_ride_id(self) -> str:
        with self._id_lock:
            self._last_stamp = max(time.time_ns(), self._last_stamp + 1)
            return f"RIDE-{self._last_stamp}"

    def request_ride(self, rider: Rider, pickup: Location, dropoff: Location) -> Ride:
        ride = Ride(
            id=self._next_ride_id(),
            rider_id=rider.id,
            pickup=pickup,
            dropoff=dropoff,
            status=RideStatus.REQUESTED,
            request_time=datetime.now(),
        )
        self._queue.enqueue(ride)
        self._drivers.increment_zone_score(pickup)
        return ride

    def process_queue(self) -> Optional[Ride]:
        """Try to match the oldest request; return the ride if a driver was assigned."""
        if self._queue.is_empty():
            return None
        ride = self._queue.peek()

        if datetime.now() - ride.request_time > REQUEST_TIMEOUT:
            self._queue.dequeue()
            ride.status = RideStatus.CANCELLED
            self._drivers.decrement_zone_score(ride.pickup)
            print(f"Ride {ride.id} cancelled due to timeout")
            return None

        candidates = self._drivers.find_nearest(ride.pickup, SEARCH_RADIUS)
        best: Optional[Driver] = None
        best_distance = 999.0
        for driver in candidates:
            distance = _distance(ride.pickup, driver.location)
            if distance < best_distance:
                best_distance = distance
                best = driver
        if best is None:
            return None

        self._queue.dequeue()
        ride.driver_id = best.id
        ride.status = RideStatus.ACCEPTED
        ride.start_time = datetime.now()
        self._drivers.update_status(best.id, DriverStatus.BUSY)
        self._tracker.add(ride)
        self._waits.append(datetime.now() - ride.request_time)
        print(f"Ride {ride.id} assigned to Driver {best.id}")
        return ride

    def complete_ride(self, ride_id: str) -> Ride:
        """Finish an active ride; raises RideNotFoundError if it is not tracked."""
        ride = self._tracker.remove(ride_id)
        ride.end_time = datetime.now()
        ride.status = RideStatus.COMPLETED
        ride.fare = BASE_FARE + FARE_PER_UNIT * _distance(ride.pickup, ride.dropoff)

        try:
            driver = self._drivers.get(ride.driver_id)
        except LookupError:
            print(
                f"Internal error: driver {ride.driver_id} assigned to ride {ride.id} "
                "not found in store"
            )
            return ride

        driver.status = DriverStatus.AVAILABLE
        driver.ride_history.append(ride.id)
        try:
            self._drivers.update_location(driver.id, ride.dropoff)
        except LookupError as err:
            print(f"Warning: failed to update driver {driver.id} location: {err}")
        self._earnings[driver.id] = self._earnings.get(driver.id, 0.0) + ride.fare
        self._drivers.decrement_zone_score(ride.pickup)
        print(f"Ride {ride.id} completed. Fare: ₹{ride.fare:.2f}")
        return ride

    def nearest_drivers(self, location: Location, n: int) -> list[Driver]:
        return self._drivers.find_nearest(location, SEARCH_RADIUS)[:n]

    def driver_earnings(self, driver_id: str) -> float:
        return self._earnings.get(driver_id, 0.0)

    def average_wait_time(self) -> timedelta:
        if not self._waits:
            return timedelta(0)
        return sum(self._waits, timedelta(0)) / len(self._waits)

    def busiest_zones(self) -> dict[str, int]:
        return self._drivers.busiest_zones()