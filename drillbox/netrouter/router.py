"""Priority router that classifies packets into five queues."""

from __future__ import annotations

import argparse
import logging
import random
import time
from typing import Optional

from drillbox.netrouter.packet import DefaultPacketClassifier, Packet, PacketClassifier, Protocol
from drillbox.netrouter.queues import (
    LinkedListPacketQueue,
    PacketQueue,
    PooledLinkedListPacketQueue,
    SlicePacketQueue,
)

log = logging.getLogger(__name__)

_PRIORITIES = range(1, 6)


def _make_queue(queue_type: str) -> PacketQueue:
    if queue_type == "linkedlist_pooled":
        return PooledLinkedListPacketQueue()
    if queue_type == "linkedlist":
        return LinkedListPacketQueue()
    return SlicePacketQueue()


class Router:
    """Routes packets by priority; priority 1 is served first."""

    def __init__(self, classifier: PacketClassifier, queue_type: str) -> None:
        self._classifier = classifier
        self._queues: dict[int, PacketQueue] = {p: _make_queue(queue_type) for p in _PRIORITIES}

    def enqueue(self, packet: Packet) -> None:
        if packet.ttl <= 0:
            log.warning("[DROP] Packet %s dropped. reason: TTL=0", packet.id)
            return
        priority = self._classifier.classify(packet)
        packet.priority = priority
        queue = self._queues.get(priority)
        if queue is None:
            log.error("[ERROR] Invalid priority %d for packet %s", priority, packet.id)
            return
        queue.enqueue(packet)

    def dequeue(self) -> Optional[Packet]:
        for priority in _PRIORITIES:
            queue = self._queues[priority]
            if len(queue):
                return queue.dequeue()
        return None

    def reorder(self, packet_id: str, from_priority: int, to_priority: int) -> bool:
        """Move a packet to another priority queue; tell whether it was found."""
        from_queue = self._queues.get(from_priority)
        to_queue = self._queues.get(to_priority)
        if from_queue is None or to_queue is None:
            return False

        found: Optional[Packet] = None
        kept: list[Packet] = []
        while len(from_queue):
            packet = from_queue.dequeue()
            if packet is None:
                break
            if packet.id == packet_id:
                found = packet
            else:
                kept.append(packet)
        for packet in kept:
            from_queue.enqueue(packet)

        if found is None:
            return False
        found.priority = to_priority
        to_queue.enqueue(found)
        return True

    def queue_lengths(self) -> dict[int, int]:
        return {priority: len(self._queues[priority]) for priority in _PRIORITIES}

    def status_report(self) -> str:
        lines = ["--- Router Queue Status ---"]
        lines.extend(
            f"Priority {priority}: {count} packets"
            for priority, count in self.queue_lengths().items()
        )
        lines.append("---------------------------")
        return "\n".join(lines)


def _random_packet(index: int, rng: random.Random) -> Packet:
    protocol = rng.choice([Protocol.TCP, Protocol.UDP, Protocol.ICMP])
    payload = b"sample payload"
    if protocol == Protocol.TCP and rng.random() < 0.2:
        payload = b"SYN packet"
    return Packet(
        id=f"pkt-{index}",
        source_ip="192.168.1.1",
        dest_ip="10.0.0.1",
        protocol=protocol,
        payload=payload,
        ttl=10,
    )


def simulate(
    num_packets: int = 10000,
    queue_type: str = "linkedlist_pooled",
    rng: Optional[random.Random] = None,
) -> Router:
    """Build a router and enqueue ``num_packets`` random packets into it."""
    rng = rng or random.Random()
    router = Router(DefaultPacketClassifier(), queue_type)
    for index in range(num_packets):
        router.enqueue(_random_packet(index, rng))
    return router


def _format_duration(seconds: float) -> str:
    return f"{seconds * 1000:.3f}ms"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Simulate a priority packet router.")
    parser.add_argument("--packets", type=int, default=10000)
    parser.add_argument(
        "--queue", default="linkedlist_pooled", choices=["linkedlist_pooled", "linkedlist", "slice"]
    )
    args = parser.parse_args(argv)
    num_packets = args.packets

    print(f"Simulating {num_packets} packets with Packet and Node pooling...")
    start = time.perf_counter()
    router = simulate(num_packets, args.queue)
    enqueue_time = time.perf_counter() - start
    print(f"Enqueued {num_packets} packets in {_format_duration(enqueue_time)}")

    print()
    print(router.status_report())

    print("Processing packets and returning to pool...")
    start = time.perf_counter()
    processed = 0
    while router.dequeue() is not None:
        processed += 1
        if processed % 2000 == 0:
            print(f"Processed {processed}/{num_packets} packets...")
    dequeue_time = time.perf_counter() - start

    print(f"Processed {processed} packets in {_format_duration(dequeue_time)}")
    print(f"Total time: {_format_duration(enqueue_time + dequeue_time)}")
    return 0