import random
import threading

import pytest

from drillbox.traffic.elements import Road, RoadKey
from drillbox.traffic.network import RoadNetwork, sleep_with_cancel, travel_time


def build_test_city():
    city = RoadNetwork(5)
    city.add_road(1, 2, 1.0, 60, 1, "NS")
    city.add_road(2, 3, 1.0, 60, 1, "EW")
    city.add_road(3, 5, 2.0, 60, 1, "EW")
    city.add_road(1, 4, 3.0, 60, 1, "NS")
    city.add_road(4, 5, 1.0, 60, 1, "NS")
    return city


def _road(distance, speed, congestion):
    return Road(1, 2, "NS", distance, congestion, speed)


def test_shortest_path():
    path, cost = build_test_city().dijkstra(1, 5)
    assert path is not None
    assert path[0] == 1 and path[-1] == 5
    assert cost > 0
    assert len(path) >= 3


def test_no_path():
    city = RoadNetwork(3)
    city.add_road(1, 2, 1.0, 60, 1, "NS")
    path, cost = city.dijkstra(1, 3)
    assert path is None
    assert cost == 0


def test_same_node():
    path, cost = build_test_city().dijkstra(2, 2)
    assert path == [2]
    assert cost == 0


def test_high_congestion_is_slower():
    assert travel_time(_road(10, 60, 10)) > travel_time(_road(10, 60, 1))


def test_speed_floor():
    assert travel_time(_road(10, 10, 10)) == pytest.approx(travel_time(_road(10, 5, 1)))


def test_emergency_faster_than_congested():
    congested = build_test_city()
    for roads in congested.adjacency.values():
        for road in roads:
            road.congestion_level = 9
    _, normal = congested.dijkstra(1, 5)
    _, emergency = build_test_city().dijkstra_emergency(1, 5)
    assert emergency < normal


def test_emergency_ignores_congestion():
    city = build_test_city()
    _, clean = city.dijkstra_emergency(1, 5)
    for roads in city.adjacency.values():
        for road in roads:
            road.congestion_level = 10
    _, after = city.dijkstra_emergency(1, 5)
    assert after == pytest.approx(clean)


def test_dijkstra_avoiding_blocked_road():
    city = build_test_city()
    assert city.dijkstra_avoiding(1, 5, {RoadKey(1, 2)}) == [1, 4, 5]
    assert city.dijkstra_avoiding(1, 5, {RoadKey(1, 4)}) == [1, 2, 3, 5]
    assert city.dijkstra_avoiding(1, 5, {RoadKey(1, 2), RoadKey(1, 4)}) is None


def test_add_road_records_inbound_direction():
    city = build_test_city()
    assert city.intersections[5].inbound_ew == [3]
    assert city.intersections[5].inbound_ns == [4]
    assert city.intersections[2].inbound_ns == [1]


def test_generate_random_city_invariants():
    city = RoadNetwork(20)
    city.generate_random_city(random.Random(7))
    roads = [road for group in city.adjacency.values() for road in group]
    assert roads
    for road in roads:
        assert road.from_id != road.to_id
        assert 1 <= road.to_id <= 20
        assert 0.5 <= road.distance <= 5.0
        assert road.speed_limit in (30, 40, 50, 60)
        assert 1 <= road.congestion_level <= 10
        assert road.direction in ("NS", "EW")
    inbound = sum(len(i.inbound_ns) + len(i.inbound_ew) for i in city.intersections.values())
    assert inbound == len(roads)
    for source, group in city.adjacency.items():
        assert len(group) <= 4
        assert all(road.from_id == source for road in group)


def test_shift_congestion_moves_by_at_most_one():
    city = RoadNetwork(20)
    city.generate_random_city(random.Random(1))
    before = [r.congestion_level for g in city.adjacency.values() for r in g]
    city.shift_congestion(random.Random(2))
    after = [r.congestion_level for g in city.adjacency.values() for r in g]
    assert len(before) == len(after)
    for old, new in zip(before, after):
        assert abs(old - new) <= 1
        assert 1 <= new <= 10


def test_sleep_with_cancel():
    stop = threading.Event()
    assert sleep_with_cancel(stop, 0) is True
    stop.set()
    assert sleep_with_cancel(stop, 5) is False


def test_congestion_simulation_stops_immediately():
    city = build_test_city()
    stop = threading.Event()
    stop.set()
    city.start_congestion_simulation(stop, random.Random(0))
    assert [r.congestion_level for g in city.adjacency.values() for r in g] == [1] * 5