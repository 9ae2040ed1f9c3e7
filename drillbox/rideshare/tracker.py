"""Registry of active rides in the order they started."""

from __future__ import annotations

import threading

from drillbox.rideshare.entities import Ride


class RideNotFoundError(LookupError):
    """Raised when a ride id is not tracked."""


class RideTracker:
    """Thread-safe ordered collection of active rides, indexed by id."""

    def __init__(self) -> None:
        self._rides: dict[str, Ride] = {}
        self._lock = threading.Lock()

    def add(self, ride: Ride) -> None:
        with self._lock:
            self._rides.pop(ride.id, None)
            self._rides[ride.id] = ride

    def remove(self, ride_id: str) -> Ride:
        with self._lock:
            try:
                return self._rides.pop(ride_id)
            except KeyError:
                raise RideNotFoundError(f"ride {ride_id} not found in active tracker") from None

    def get(self, ride_id: str) -> Ride:
        with self._lock:
            try:
                return self._rides[ride_id]
            except KeyError:
                raise RideNotFoundError(f"ride {ride_id} not found") from None

    def rides(self) -> list[Ride]:
        """Return the tracked rides, oldest first."""
        with self._lock:
            return list(self._rides.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rides)