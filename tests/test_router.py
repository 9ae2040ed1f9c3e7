import random

import pytest

from drillbox.netrouter.packet import DefaultPacketClassifier, Packet, PacketClassifier, Protocol
from drillbox.netrouter.router import Router, main, simulate

QUEUE_TYPES = ["linkedlist", "slice", "linkedlist_pooled"]


@pytest.mark.parametrize("queue_type", QUEUE_TYPES)
@pytest.mark.parametrize("num_packets", [100, 1000, 10000])
def test_enqueue_then_drain(queue_type, num_packets):
    router = Router(DefaultPacketClassifier(), queue_type)
    for j in range(num_packets):
        router.enqueue(Packet(id=f"pkt-{j}", protocol=Protocol.TCP, ttl=10))
    assert sum(router.queue_lengths().values()) == num_packets
    drained = [router.dequeue() for _ in range(num_packets)]
    assert [p.id for p in drained] == [f"pkt-{j}" for j in range(num_packets)]
    assert router.dequeue() is None


@pytest.mark.parametrize("queue_type", QUEUE_TYPES)
def test_dequeue_serves_highest_priority_first(queue_type):
    router = Router(DefaultPacketClassifier(), queue_type)
    router.enqueue(Packet(id="udp", protocol=Protocol.UDP, ttl=10))
    router.enqueue(Packet(id="tcp", protocol=Protocol.TCP, ttl=10))
    router.enqueue(Packet(id="icmp", protocol=Protocol.ICMP, ttl=10))
    router.enqueue(Packet(id="syn", protocol=Protocol.TCP, payload=b"SYN packet", ttl=10))
    order = [router.dequeue() for _ in range(4)]
    assert [p.id for p in order] == ["icmp", "syn", "tcp", "udp"]
    assert [p.priority for p in order] == sorted(p.priority for p in order)


def test_zero_ttl_packet_is_dropped():
    router = Router(DefaultPacketClassifier(), "slice")
    router.enqueue(Packet(id="dead", protocol=Protocol.ICMP, ttl=0))
    assert sum(router.queue_lengths().values()) == 0
    assert router.dequeue() is None


class _OutOfRangeClassifier(PacketClassifier):
    def classify(self, packet):
        return 9


def test_invalid_priority_is_not_queued():
    router = Router(_OutOfRangeClassifier(), "linkedlist")
    router.enqueue(Packet(id="x", ttl=10))
    assert sum(router.queue_lengths().values()) == 0


@pytest.mark.parametrize("queue_type", QUEUE_TYPES)
def test_reorder_moves_packet(queue_type):
    router = Router(DefaultPacketClassifier(), queue_type)
    for packet_id in ["a", "b", "c"]:
        router.enqueue(Packet(id=packet_id, protocol=Protocol.TCP, ttl=10))
    assert router.reorder("b", 3, 1) is True
    first = router.dequeue()
    assert first.id == "b"
    assert first.priority == 1
    assert [router.dequeue().id for _ in range(2)] == ["a", "c"]


@pytest.mark.parametrize("queue_type", QUEUE_TYPES)
def test_reorder_missing_or_invalid(queue_type):
    router = Router(DefaultPacketClassifier(), queue_type)
    for packet_id in ["a", "b"]:
        router.enqueue(Packet(id=packet_id, protocol=Protocol.TCP, ttl=10))
    assert router.reorder("zzz", 3, 1) is False
    assert router.reorder("a", 3, 9) is False
    assert [router.dequeue().id for _ in range(2)] == ["a", "b"]


def test_status_report_lists_counts():
    router = Router(DefaultPacketClassifier(), "slice")
    router.enqueue(Packet(id="p", protocol=Protocol.ICMP, ttl=10))
    report = router.status_report()
    assert "Priority 1: 1 packets" in report
    assert "Priority 5: 0 packets" in report


@pytest.mark.parametrize("queue_type", QUEUE_TYPES)
def test_simulate_fills_router(queue_type):
    router = simulate(500, queue_type, random.Random(7))
    assert sum(router.queue_lengths().values()) == 500
    drained = []
    while (packet := router.dequeue()) is not None:
        drained.append(packet)
    assert len({p.id for p in drained}) == 500
    priorities = [p.priority for p in drained]
    assert priorities == sorted(priorities)


def test_main_reports_processed(capsys):
    assert main(["--packets", "50", "--queue", "linkedlist"]) == 0
    out = capsys.readouterr().out
    assert "Processed 50 packets in" in out
    assert "--- Router Queue Status ---" in out