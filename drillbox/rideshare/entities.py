"""Drivers, riders, rides and their statuses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class DriverStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class RideStatus(str, Enum):
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Location:
    lat: float = 0.0
    lng: float = 0.0


@dataclass
class Driver:
    id: str
    name: str = ""
    location: Location = field(default_factory=Location)
    status: DriverStatus = DriverStatus.AVAILABLE
    rating: float = 0.0
    ride_history: list[str] = field(default_factory=list)


@dataclass
class Rider:
    id: str
    name: str = ""
    location: Location = field(default_factory=Location)
    payment_method: str = ""


@dataclass
class Ride:
    id: str
    rider_id: str = ""
    driver_id: str = ""
    pickup: Location = field(default_factory=Location)
    dropoff: Location = field(default_factory=Location)
    status: RideStatus = RideStatus.REQUESTED
    request_time: datetime = field(default_factory=datetime.now)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    fare: float = 0.0