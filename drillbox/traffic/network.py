"""City road graph with shortest-path routing and congestion drift."""

from __future__ import annotations

import dataclasses
import math
import random
import threading
from typing import Callable, Collection, Optional

from drillbox.traffic.elements import Intersection, Road, RoadKey
from drillbox.traffic.minheap import MinHeap, PrioritizedItem

CONGESTION_INTERVAL = 4.0
MIN_SPEED = 5.0


def travel_time(road: Road) -> float:
    """Return hours to cross ``road`` given its congestion."""
    speed = road.speed_limit * (1.1 - road.congestion_level / 10.0)
    return road.distance / max(speed, MIN_SPEED)


def sleep_with_cancel(stop: threading.Event, seconds: float) -> bool:
    """Wait ``seconds``; return False if ``stop`` was set first."""
    return not stop.wait(seconds)


class RoadNetwork:
    """Intersections numbered 1..n joined by directed roads."""

    def __init__(self, num_intersections: int) -> None:
        self.adj_lock = threading.RLock()
        self.adjacency: dict[int, list[Road]] = {}
        self.intersections: dict[int, Intersection] = {}
        for ident in range(1, num_intersections + 1):
            self.adjacency[ident] = []
            self.intersections[ident] = Intersection(ident)

    def add_road(
        self,
        from_id: int,
        to_id: int,
        distance: float,
        speed_limit: int,
        congestion: int,
        direction: str,
    ) -> None:
        """Add a road and record it as inbound ("NS" or otherwise "EW") at its target."""
        with self.adj_lock:
            road = Road(from_id, to_id, direction, distance, congestion, speed_limit)
            self.adjacency.setdefault(from_id, []).append(road)
            target = self.intersections[to_id]
            if direction == "NS":
                target.inbound_ns.append(from_id)
            else:
                target.inbound_ew.append(from_id)

    def _shortest_path(
        self, start: int, end: int, weight: Callable[[Road], Optional[float]]
    ) -> tuple[Optional[list[int]], float]:
        with self.adj_lock:
            dist: dict[int, float] = {start: 0.0}
            prev: dict[int, int] = {}
            heap = MinHeap()
            heap.insert(PrioritizedItem(start, 0.0))
            while len(heap):
                item = heap.extract_min()
                node = item.id
                if item.value > dist.get(node, math.inf):
                    continue
                if node == end:
                    break
                for road in self.adjacency.get(node, ()):
                    cost = weight(road)
                    if cost is None:
                        continue
                    candidate = dist[node] + cost
                    if candidate < dist.get(road.to_id, math.inf):
                        dist[road.to_id] = candidate
                        prev[road.to_id] = node
                        heap.insert(PrioritizedItem(road.to_id, candidate))

        if end != start and end not in prev:
            return None, 0.0
        path = [end]
        while path[-1] != start:
            path.append(prev[path[-1]])
        path.reverse()
        return path, dist[end]

    def dijkstra(self, start: int, end: int) -> tuple[Optional[list[int]], float]:
        """Return the fastest path and its hours, or (None, 0.0) if unreachable."""
        return self._shortest_path(start, end, travel_time)

    def dijkstra_avoiding(
        self, start: int, end: int, blocked: Collection[RoadKey]
    ) -> Optional[list[int]]:
        """Return the fastest path that uses none of the ``blocked`` roads, or None."""

        def weight(road: Road) -> Optional[float]:
            if RoadKey(road.from_id, road.to_id) in blocked:
                return None
            return travel_time(road)

        path, _ = self._shortest_path(start, end, weight)
        return path

    def dijkstra_emergency(self, start: int, end: int) -> tuple[Optional[list[int]], float]:
        """Return the fastest path as if every road were clear of congestion."""
        return self._shortest_path(
            start, end, lambda road: travel_time(dataclasses.replace(road, congestion_level=1))
        )

    def generate_random_city(self, rng: Optional[random.Random] = None) -> None:
        """Give each intersection two to four random outgoing roads (self-loops skipped)."""
        rng = rng or random.Random()
        count = len(self.adjacency)
        for source in range(1, count + 1):
            for _ in range(rng.randrange(3) + 2):
                target = rng.randrange(count) + 1
                if target == source:
                    continue
                distance = rng.random() * 4.5 + 0.5
                speed = rng.choice([30, 40, 50, 60])
                congestion = rng.randrange(10) + 1
                direction = "EW" if rng.randrange(2) == 0 else "NS"
                self.add_road(source, target, distance, speed, congestion, direction)

    def shift_congestion(self, rng: Optional[random.Random] = None) -> None:
        """Move every road's congestion by -1, 0 or +1, kept within 1..10."""
        rng = rng or random.Random()
        with self.adj_lock:
            for roads in self.adjacency.values():
                for road in roads:
                    level = road.congestion_level + rng.randrange(3) - 1
                    road.congestion_level = min(10, max(1, level))

    def start_congestion_simulation(
        self, stop: threading.Event, rng: Optional[random.Random] = None
    ) -> None:
        """Shift congestion every few seconds until ``stop`` is set."""
        rng = rng or random.Random()
        while sleep_with_cancel(stop, CONGESTION_INTERVAL):
            self.shift_congestion(rng)