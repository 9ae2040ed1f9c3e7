import random
import threading
import time
from datetime import datetime

import pytest

from drillbox.traffic.city import CityModel, NoRouteError, adaptive_duration
from drillbox.traffic.elements import RoadKey, SignalState


def build_test_city() -> CityModel:
    city = CityModel(5)
    city.add_road(1, 2, 1.0, 60, 1, "NS")
    city.add_road(2, 3, 1.0, 60, 1, "EW")
    city.add_road(3, 5, 2.0, 60, 1, "EW")
    city.add_road(1, 4, 3.0, 60, 1, "NS")
    city.add_road(4, 5, 1.0, 60, 1, "NS")
    return city


def wait_until(predicate, timeout):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


@pytest.mark.parametrize("congestion, seconds", [(0, 1.0), (5, 1.5), (10, 2.0)])
def test_adaptive_duration(congestion, seconds):
    assert adaptive_duration(congestion) == pytest.approx(seconds)


def test_register_vehicle_sets_route():
    city = build_test_city()
    vehicle = city.register_vehicle("V-101", 1, 5)
    assert vehicle.path[0] == 1 and vehicle.path[-1] == 5
    assert vehicle.status == "READY"
    assert city.vehicles["V-101"] is vehicle


def test_register_vehicle_no_route():
    city = CityModel(3)
    city.add_road(1, 2, 1.0, 60, 1, "NS")
    with pytest.raises(NoRouteError):
        city.register_vehicle("V-102", 1, 3)
    assert "V-102" not in city.vehicles


def test_vehicle_status_format():
    city = build_test_city()
    city.register_vehicle("V-103", 1, 5)
    assert city.vehicle_status() == {"V-103": "At:  1 -> Dest:  5 | Status: READY             "}


def test_inbound_congestion():
    city = build_test_city()
    city.adjacency[4][0].congestion_level = 7
    inter = city.intersections[5]
    assert city.inbound_congestion(5, inter.inbound_ns) == 7
    assert city.inbound_congestion(5, inter.inbound_ew) == 1


def test_signal_phase_order():
    city = CityModel(1)
    city.add_road(1, 1, 1, 60, 1, "NS")
    inter = city.intersections[1]
    stop = threading.Event()
    thread = threading.Thread(target=city.run_signal_cycle, args=(stop, inter), daemon=True)
    thread.start()

    seen = []
    previous = None
    deadline = time.monotonic() + 9
    while len(seen) < 4 and time.monotonic() < deadline:
        with inter.lock:
            signal = inter.current_signal
        if signal != previous:
            seen.append(signal)
            previous = signal
        time.sleep(0.05)
    stop.set()
    thread.join(2)

    assert seen[:4] == [
        SignalState.GREEN_NS,
        SignalState.YELLOW_NS,
        SignalState.GREEN_EW,
        SignalState.YELLOW_EW,
    ]


def test_signal_preemption_skips_cycle():
    city = CityModel(1)
    inter = city.intersections[1]
    inter.preempted = True
    inter.current_signal = SignalState.GREEN_EW
    stop = threading.Event()
    thread = threading.Thread(target=city.run_signal_cycle, args=(stop, inter), daemon=True)
    thread.start()
    time.sleep(0.4)
    with inter.lock:
        signal = inter.current_signal
    stop.set()
    thread.join(2)
    assert signal == SignalState.GREEN_EW


def test_vehicles_arrive():
    city = build_test_city()
    stop = threading.Event()
    city.start_traffic_signals(stop)
    for index, (start, end) in enumerate([(1, 5), (1, 2), (4, 5), (2, 2)]):
        city.register_vehicle(f"V-{index:02d}", start, end)
    city.start_vehicle_simulation(stop)

    def all_arrived():
        return all(v.status == "ARRIVED" for v in city.vehicles.values())

    arrived = wait_until(all_arrived, 12)
    stop.set()
    assert arrived
    assert all(v.current == v.destination for v in city.vehicles.values())


def test_threads_shut_down_on_stop():
    city = CityModel(20)
    city.generate_random_city(random.Random(7))
    stop = threading.Event()
    threads = city.start_traffic_signals(stop)
    extra = [
        threading.Thread(target=city.start_congestion_simulation, args=(stop,), daemon=True),
        threading.Thread(target=city.start_congestion_tracking, args=(stop,), daemon=True),
    ]
    for thread in extra:
        thread.start()
    for i in range(1, 11):
        start = (i % 18) + 1
        end = (i % 16) + 3
        if start == end:
            end += 1
        try:
            city.register_vehicle(f"G-{i:02d}", start, end)
        except NoRouteError:
            pass
    threads += city.start_vehicle_simulation(stop) + extra
    time.sleep(0.2)
    stop.set()
    for thread in threads:
        thread.join(3)
    assert not any(thread.is_alive() for thread in threads)


def test_sliding_window_keeps_last_ten():
    city = build_test_city()
    road = city.adjacency[1][0]
    key = RoadKey(1, 2)
    for level in range(1, 13):
        road.congestion_level = level
        city.record_congestion_snapshot(datetime(2024, 1, 1))
    assert len(city.road_history[key]) == 10
    assert city.sliding_window_average(key) == pytest.approx(sum(range(3, 13)) / 10)


def test_sliding_window_unknown_road():
    city = build_test_city()
    assert city.sliding_window_average(RoadKey(3, 1)) == 0.0


def test_top5_congested_roads():
    city = build_test_city()
    city.add_road(5, 1, 1.0, 60, 6, "EW")
    levels = iter([1, 2, 3, 4, 5])
    for from_id in (1, 2, 3, 4):
        for road in city.adjacency[from_id]:
            road.congestion_level = next(levels)
    city.record_congestion_snapshot()
    top = city.top5_congested_roads()
    assert [r.avg_congestion for r in top] == [6, 5, 4, 3, 2]
    assert top[0].key == RoadKey(5, 1)


def test_suggest_alternative():
    city = build_test_city()
    city.add_road(2, 4, 1.0, 60, 1, "NS")
    assert city.suggest_alternative(RoadKey(1, 4)) == [1, 2, 4]
    assert city.suggest_alternative(RoadKey(4, 5)) is None


def test_congestion_report():
    city = build_test_city()
    assert city.congestion_report() == "[Congestion Report] No data yet."
    city.record_congestion_snapshot()
    report = city.congestion_report()
    assert report.startswith("[Congestion Report - Top Congested Roads]")
    assert "Avg Congestion: 1.0/10" in report
    assert len(report.splitlines()) == 6


def test_emergency_preempts_and_releases():
    city = build_test_city()
    path, _ = city.dijkstra_emergency(1, 5)
    assert len(path) >= 2
    city.preempt_signals(path)
    assert all(city.intersections[i].preempted for i in path[:-1])
    city.release_signals(path)
    assert not any(city.intersections[i].preempted for i in path)


def test_emergency_reroutes_normal_vehicles():
    city = build_test_city()
    normal = city.register_vehicle("V-NORMAL", 1, 5)
    stop = threading.Event()
    emergency = city.register_emergency_vehicle(stop, "E-TEST2", 1, 5)
    blocked = set(zip(emergency.path, emergency.path[1:]))
    assert normal.status == "RE-ROUTING (emergency)"
    assert not blocked & set(zip(normal.path, normal.path[1:]))
    assert normal.path[0] == 1 and normal.path[-1] == 5
    arrived = wait_until(lambda: emergency.status == "ARRIVED (EMERGENCY)", 5)
    stop.set()
    assert arrived
    assert not any(city.intersections[i].preempted for i in emergency.path)


def test_emergency_no_route():
    city = CityModel(3)
    with pytest.raises(NoRouteError):
        city.register_emergency_vehicle(threading.Event(), "E-0", 1, 3)


def test_emergency_faster_than_normal():
    city = build_test_city()
    for roads in city.adjacency.values():
        for road in roads:
            road.congestion_level = 9
    _, normal_cost = city.dijkstra(1, 5)
    _, emergency_cost = build_test_city().dijkstra_emergency(1, 5)
    assert emergency_cost < normal_cost


def test_dijkstra_on_random_city_ends_correctly():
    city = CityModel(20)
    city.generate_random_city(random.Random(3))
    path, cost = city.dijkstra(1, 20)
    if path is None:
        assert cost == 0.0
    else:
        assert path[0] == 1 and path[-1] == 20 and cost > 0