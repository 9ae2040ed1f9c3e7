"""Roads, intersections, signals and vehicles of the city graph."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class RoadKey:
    """Identifies a directed road segment."""

    from_id: int
    to_id: int


@dataclass(frozen=True)
class CongestionRecord:
    timestamp: datetime
    level: int


@dataclass(frozen=True)
class CongestedRoad:
    key: RoadKey
    avg_congestion: float


class SignalState(str, Enum):
    GREEN_NS = "GREEN-NS"
    YELLOW_NS = "YELLOW-NS"
    GREEN_EW = "GREEN-EW"
    YELLOW_EW = "YELLOW-EW"


@dataclass
class Road:
    """A directed edge; distance in km, speed limit in km/h, congestion 1 to 10."""

    from_id: int
    to_id: int
    direction: str
    distance: float
    congestion_level: int
    speed_limit: int


@dataclass
class Intersection:
    id: int
    current_signal: SignalState = SignalState.GREEN_NS
    inbound_ns: list[int] = field(default_factory=list)
    inbound_ew: list[int] = field(default_factory=list)
    preempted: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)


@dataclass
class Vehicle:
    plate: str
    current: int
    destination: int
    path: list[int] = field(default_factory=list)
    status: str = ""
    is_emergency: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)