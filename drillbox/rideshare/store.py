"""In-memory driver registry indexed by a coarse location grid."""

from __future__ import annotations

import threading

from drillbox.rideshare.entities import Driver, DriverStatus, Location

ZONE_SIZE = 5.0


class DriverNotFoundError(LookupError):
    """Raised when a driver id is not registered."""

    def __init__(self, driver_id: str) -> None:
        super().__init__(f"driver {driver_id} not found")
        self.driver_id = driver_id


class DriverExistsError(ValueError):
    """Raised when registering a driver id a second time."""

    def __init__(self, driver_id: str) -> None:
        super().__init__(f"driver {driver_id} already exists")
        self.driver_id = driver_id


def _corner(location: Location) -> tuple[float, float]:
    return (
        (location.lat // ZONE_SIZE) * ZONE_SIZE,
        (location.lng // ZONE_SIZE) * ZONE_SIZE,
    )


def _zone_name(lat: float, lng: float) -> str:
    return f"{lat:.0f}:{lng:.0f}"


def zone_of(location: Location) -> str:
    """Return the name of the grid cell holding ``location``."""
    return _zone_name(*_corner(location))


def _squared_distance(a: Location, b: Location) -> float:
    return (a.lat - b.lat) ** 2 + (a.lng - b.lng) ** 2


class MemoryStore:
    """Thread-safe store of drivers and ride-request counts per zone."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._drivers: dict[str, Driver] = {}
        self._zones: dict[str, list[Driver]] = {}
        self._zone_scores: dict[str, int] = {}

    def register(self, driver: Driver) -> None:
        with self._lock:
            if driver.id in self._drivers:
                raise DriverExistsError(driver.id)
            self._drivers[driver.id] = driver
            self._zones.setdefault(zone_of(driver.location), []).append(driver)

    def _require(self, driver_id: str) -> Driver:
        try:
            return self._drivers[driver_id]
        except KeyError:
            raise DriverNotFoundError(driver_id) from None

    def update_location(self, driver_id: str, location: Location) -> None:
        with self._lock:
            driver = self._require(driver_id)
            old_zone = zone_of(driver.location)
            new_zone = zone_of(location)
            if old_zone != new_zone:
                members = self._zones.get(old_zone, [])
                for index, member in enumerate(members):
                    if member.id == driver_id:
                        del members[index]
                        break
                self._zones.setdefault(new_zone, []).append(driver)
            driver.location = location

    def update_status(self, driver_id: str, status: DriverStatus) -> None:
        with self._lock:
            self._require(driver_id).status = status

    def get(self, driver_id: str) -> Driver:
        with self._lock:
            return self._require(driver_id)

    def _nearby_zones(self, location: Location) -> list[str]:
        lat, lng = _corner(location)
        names = (
            _zone_name(lat + i * ZONE_SIZE, lng + j * ZONE_SIZE)
            for i in (-1, 0, 1)
            for j in (-1, 0, 1)
        )
        return [name for name in names if name in self._zones]

    def find_nearest(self, location: Location, radius: float) -> list[Driver]:
        """Return available drivers in neighbouring zones whose squared distance is within ``radius``."""
        with self._lock:
            return [
                driver
                for zone in self._nearby_zones(location)
                for driver in self._zones[zone]
                if driver.status == DriverStatus.AVAILABLE
                and _squared_distance(location, driver.location) <= radius
            ]

    def busiest_zones(self) -> dict[str, int]:
        """Return outstanding request counts per zone."""
        with self._lock:
            return dict(self._zone_scores)

    def increment_zone_score(self, location: Location) -> None:
        with self._lock:
            zone = zone_of(location)
            self._zone_scores[zone] = self._zone_scores.get(zone, 0) + 1

    def decrement_zone_score(self, location: Location) -> None:
        with self._lock:
            zone = zone_of(location)
            score = self._zone_scores.get(zone, 0)
            if score > 0:
                score -= 1
            if score == 0:
                self._zone_scores.pop(zone, None)
            else:
                self._zone_scores[zone] = score