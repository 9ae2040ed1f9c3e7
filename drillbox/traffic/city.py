"""City traffic simulation: signals, vehicles, congestion analysis and emergencies."""

from __future__ import annotations

import dataclasses
import threading
from collections import deque
from datetime import datetime
from typing import Iterable, Optional

from drillbox.traffic.elements import (
    CongestedRoad,
    CongestionRecord,
    Intersection,
    Road,
    RoadKey,
    SignalState,
    Vehicle,
)
from drillbox.traffic.network import RoadNetwork, sleep_with_cancel, travel_time

SPEED_SCALE = 3600.0
MAX_HISTORY = 10
TRACKING_INTERVAL = 2.0
YELLOW_DURATION = 0.5
POLL_INTERVAL = 0.2
STUCK_RETRY = 2.0


class NoRouteError(LookupError):
    """Raised when no path joins two intersections."""


def adaptive_duration(congestion: int) -> float:
    """Return the green phase length in seconds for the given inbound congestion."""
    extra = congestion / 5.0
    return (1000 + int(extra * 500)) / 1000


def _sim_seconds(hours: float) -> float:
    """Scale travel hours to simulated seconds, truncated to whole milliseconds."""
    return int(hours * 3600 * 1000 / SPEED_SCALE) / 1000


def _format_path(path: Iterable[int]) -> str:
    return "[" + " ".join(str(node) for node in path) + "]"


class CityModel(RoadNetwork):
    """Road network with vehicles, signal cycles and congestion history."""

    def __init__(self, num_intersections: int) -> None:
        super().__init__(num_intersections)
        self.vehicle_lock = threading.RLock()
        self.vehicles: dict[str, Vehicle] = {}
        self.analysis_lock = threading.RLock()
        self.road_history: dict[RoadKey, deque[CongestionRecord]] = {}

    # --- vehicles ----------------------------------------------------------

    def register_vehicle(self, plate: str, start: int, end: int) -> Vehicle:
        """Add a vehicle with its initial route; raise NoRouteError if none exists."""
        path, _ = self.dijkstra(start, end)
        if path is None:
            raise NoRouteError(f"no path found between {start} and {end}. Vehicle parked")
        vehicle = Vehicle(plate, start, end, path=path, status="READY")
        with self.vehicle_lock:
            self.vehicles[plate] = vehicle
        return vehicle

    def start_vehicle_simulation(self, stop: threading.Event) -> list[threading.Thread]:
        """Start one movement thread per registered vehicle and return the threads."""
        with self.vehicle_lock:
            vehicles = list(self.vehicles.values())
        threads = [
            threading.Thread(target=self._move_vehicle, args=(stop, vehicle), daemon=True)
            for vehicle in vehicles
        ]
        for thread in threads:
            thread.start()
        return threads

    def _find_road(self, from_id: int, to_id: int) -> Optional[Road]:
        with self.adj_lock:
            for road in self.adjacency.get(from_id, ()):
                if road.to_id == to_id:
                    return road
        return None

    def _set_status(self, vehicle: Vehicle, status: str) -> None:
        with vehicle.lock:
            vehicle.status = status

    def _move_vehicle(self, stop: threading.Event, vehicle: Vehicle) -> None:
        while True:
            with vehicle.lock:
                current, destination = vehicle.current, vehicle.destination
            if current == destination:
                self._set_status(vehicle, "ARRIVED")
                return

            path, _ = self.dijkstra(current, destination)
            if path is None or len(path) < 2:
                self._set_status(vehicle, "STUCK (NO PATH)")
                if not sleep_with_cancel(stop, STUCK_RETRY):
                    return
                continue

            following = path[1]
            road = self._find_road(current, following)
            if road is None:
                self._set_status(vehicle, "ERROR (ROAD GONE)")
                return

            if not self._wait_for_signal(stop, vehicle, current, road.direction):
                return

            self._set_status(vehicle, "MOVING")
            with self.adj_lock:
                hours = travel_time(road)
            if not sleep_with_cancel(stop, _sim_seconds(hours)):
                return
            with vehicle.lock:
                vehicle.current = following

    def _wait_for_signal(
        self, stop: threading.Event, vehicle: Vehicle, intersection_id: int, direction: str
    ) -> bool:
        intersection = self.intersections[intersection_id]
        while True:
            with intersection.lock:
                signal = intersection.current_signal
            if (direction == "NS" and signal == SignalState.GREEN_NS) or (
                direction == "EW" and signal == SignalState.GREEN_EW
            ):
                return True
            self._set_status(vehicle, "WAITING_AT_SIGNAL")
            if not sleep_with_cancel(stop, POLL_INTERVAL):
                return False

    def vehicle_status(self) -> dict[str, str]:
        """Return a one-line position summary for every vehicle."""
        with self.vehicle_lock:
            vehicles = dict(self.vehicles)
        summary = {}
        for plate, vehicle in vehicles.items():
            with vehicle.lock:
                summary[plate] = (
                    f"At: {vehicle.current:2d} -> Dest: {vehicle.destination:2d} "
                    f"| Status: {vehicle.status:<18}"
                )
        return summary

    # --- signals -----------------------------------------------------------

    def start_traffic_signals(self, stop: threading.Event) -> list[threading.Thread]:
        """Start a signal cycle thread for every intersection and return the threads."""
        threads = [
            threading.Thread(
                target=self.run_signal_cycle, args=(stop, intersection), daemon=True
            )
            for intersection in self.intersections.values()
        ]
        for thread in threads:
            thread.start()
        return threads

    def run_signal_cycle(self, stop: threading.Event, intersection: Intersection) -> None:
        """Cycle green/yellow phases with adaptive greens until ``stop`` is set."""

        def green(inbound: list[int]) -> float:
            return adaptive_duration(self.inbound_congestion(intersection.id, inbound))

        phases = (
            (SignalState.GREEN_NS, lambda: green(intersection.inbound_ns)),
            (SignalState.YELLOW_NS, lambda: YELLOW_DURATION),
            (SignalState.GREEN_EW, lambda: green(intersection.inbound_ew)),
            (SignalState.YELLOW_EW, lambda: YELLOW_DURATION),
        )
        while True:
            with intersection.lock:
                preempted = intersection.preempted
            if preempted:
                if not sleep_with_cancel(stop, POLL_INTERVAL):
                    return
                continue
            for state, duration in phases:
                with intersection.lock:
                    intersection.current_signal = state
                if not sleep_with_cancel(stop, duration()):
                    return

    def inbound_congestion(self, target: int, inbound: Iterable[int]) -> int:
        """Sum the congestion of roads from ``inbound`` sources into ``target``."""
        with self.adj_lock:
            return sum(
                road.congestion_level
                for source in inbound
                for road in self.adjacency.get(source, ())
                if road.to_id == target
            )

    # --- congestion analysis ----------------------------------------------

    def record_congestion_snapshot(self, timestamp: Optional[datetime] = None) -> None:
        """Append every road's current congestion to its sliding window."""
        moment = timestamp if timestamp is not None else datetime.now()
        with self.adj_lock, self.analysis_lock:
            for roads in self.adjacency.values():
                for road in roads:
                    key = RoadKey(road.from_id, road.to_id)
                    history = self.road_history.setdefault(key, deque(maxlen=MAX_HISTORY))
                    history.append(CongestionRecord(moment, road.congestion_level))

    def start_congestion_tracking(self, stop: threading.Event) -> None:
        """Record a congestion snapshot every two seconds until ``stop`` is set."""
        while sleep_with_cancel(stop, TRACKING_INTERVAL):
            self.record_congestion_snapshot()

    def sliding_window_average(self, key: RoadKey) -> float:
        """Average congestion of a road over its recorded window, or 0.0."""
        with self.analysis_lock:
            history = self.road_history.get(key)
            if not history:
                return 0.0
            return sum(record.level for record in history) / len(history)

    def top5_congested_roads(self) -> list[CongestedRoad]:
        """Return up to five roads with the highest window average, highest first."""
        with self.analysis_lock:
            keys = list(self.road_history)
        roads = [CongestedRoad(key, self.sliding_window_average(key)) for key in keys]
        roads.sort(key=lambda road: road.avg_congestion, reverse=True)
        return roads[:5]

    def suggest_alternative(self, key: RoadKey) -> Optional[list[int]]:
        """Return a route between the road's ends that avoids the road, or None."""
        return self.dijkstra_avoiding(key.from_id, key.to_id, {key})

    def congestion_report(self) -> str:
        """Describe the most congested roads and their alternatives."""
        top = self.top5_congested_roads()
        if not top:
            return "[Congestion Report] No data yet."
        lines = ["[Congestion Report - Top Congested Roads]"]
        for rank, road in enumerate(top, start=1):
            alternative = self.suggest_alternative(road.key)
            alt = _format_path(alternative) if alternative else "none"
            lines.append(
                f"  #{rank} Road {road.key.from_id}->{road.key.to_id} "
                f"| Avg Congestion: {road.avg_congestion:.1f}/10 | Alt: {alt}"
            )
        return "\n".join(lines)

    # --- emergencies -------------------------------------------------------

    def register_emergency_vehicle(
        self, stop: threading.Event, plate: str, start: int, end: int
    ) -> Vehicle:
        """Dispatch an emergency vehicle: preempt signals, reroute others, start it moving."""
        path, _ = self.dijkstra_emergency(start, end)
        if path is None:
            raise NoRouteError(
                f"emergency vehicle {plate}: no path found from {start} to {end}"
            )
        vehicle = Vehicle(
            plate, start, end, path=list(path), status="EMERGENCY_DISPATCHED", is_emergency=True
        )
        with self.vehicle_lock:
            self.vehicles[plate] = vehicle

        self.preempt_signals(path)
        print(f"[EMERGENCY] {plate} dispatched on path {_format_path(path)}")
        self.reroute_normal_vehicles(path)

        threading.Thread(
            target=self._move_emergency_vehicle, args=(stop, vehicle, list(path)), daemon=True
        ).start()
        return vehicle

    def preempt_signals(self, path: list[int]) -> None:
        """Hold green along the path for the direction of each next road."""
        for from_id, to_id in zip(path, path[1:]):
            road = self._find_road(from_id, to_id)
            direction = road.direction if road is not None else "NS"
            intersection = self.intersections[from_id]
            with intersection.lock:
                intersection.preempted = True
                intersection.current_signal = (
                    SignalState.GREEN_NS if direction == "NS" else SignalState.GREEN_EW
                )
            print(f"[PREEMPT] Intersection {from_id} → GREEN-{direction} (emergency)")

    def release_signals(self, path: Iterable[int]) -> None:
        """Return the path's intersections to normal cycling."""
        for ident in path:
            intersection = self.intersections[ident]
            with intersection.lock:
                intersection.preempted = False
        print("[PREEMPT RELEASED] Normal signal cycling restored.")

    def reroute_normal_vehicles(self, emergency_path: list[int]) -> None:
        """Give every normal vehicle a route that avoids the emergency path's roads."""
        blocked = {RoadKey(a, b) for a, b in zip(emergency_path, emergency_path[1:])}
        with self.vehicle_lock:
            vehicles = list(self.vehicles.values())
        for vehicle in vehicles:
            with vehicle.lock:
                if vehicle.is_emergency:
                    continue
                current, destination = vehicle.current, vehicle.destination
            new_path = self.dijkstra_avoiding(current, destination, blocked)
            if new_path is not None and len(new_path) >= 2:
                with vehicle.lock:
                    vehicle.path = new_path
                    vehicle.status = "RE-ROUTING (emergency)"

    def _move_emergency_vehicle(
        self, stop: threading.Event, vehicle: Vehicle, path: list[int]
    ) -> None:
        for from_id, to_id in zip(path, path[1:]):
            road = self._find_road(from_id, to_id)
            if road is None:
                continue
            self._set_status(vehicle, "EMERGENCY_MOVING")
            with self.adj_lock:
                cleared = dataclasses.replace(road, congestion_level=1)
            if not sleep_with_cancel(stop, _sim_seconds(travel_time(cleared))):
                return
            with vehicle.lock:
                vehicle.current = to_id
        self._set_status(vehicle, "ARRIVED (EMERGENCY)")
        self.release_signals(path)
        print(f"[EMERGENCY] {vehicle.plate} has arrived at destination.")