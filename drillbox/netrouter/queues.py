"""FIFO packet queues: linked list, pooled linked list, and list-backed."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Optional

from drillbox.netrouter.packet import Packet


class PacketQueue(ABC):
    """A FIFO of packets; ``dequeue`` and ``peek`` return None when empty."""

    @abstractmethod
    def enqueue(self, packet: Packet) -> None:
        """Add ``packet`` at the back."""

    @abstractmethod
    def dequeue(self) -> Optional[Packet]:
        """Remove and return the front packet."""

    @abstractmethod
    def peek(self) -> Optional[Packet]:
        """Return the front packet without removing it."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of queued packets."""

    @abstractmethod
    def drop(self, packet_id: str) -> bool:
        """Remove the first packet with ``packet_id``; tell whether one was found."""


@dataclass(slots=True)
class _Node:
    packet: Optional[Packet]
    next: Optional[_Node] = None
    prev: Optional[_Node] = None


class _NodePool:
    """Free list of nodes reused across pooled queues."""

    def __init__(self) -> None:
        self._free: list[_Node] = []

    def acquire(self, packet: Packet) -> _Node:
        try:
            node = self._free.pop()
        except IndexError:
            return _Node(packet)
        node.packet = packet
        return node

    def release(self, node: _Node) -> None:
        node.packet = None
        node.next = None
        node.prev = None
        self._free.append(node)


_NODE_POOL = _NodePool()


class _LinkedChain(PacketQueue):
    """Doubly linked storage shared by the linked-list queues."""

    def __init__(self) -> None:
        self._head: Optional[_Node] = None
        self._tail: Optional[_Node] = None
        self._size = 0

    def _link(self, node: _Node) -> None:
        if self._tail is None:
            self._head = self._tail = node
        else:
            node.prev = self._tail
            self._tail.next = node
            self._tail = node
        self._size += 1

    def _unlink(self, node: _Node) -> None:
        if node.prev is not None:
            node.prev.next = node.next
        else:
            self._head = node.next
        if node.next is not None:
            node.next.prev = node.prev
        else:
            self._tail = node.prev
        node.next = None
        node.prev = None
        self._size -= 1

    def _find(self, packet_id: str) -> Optional[_Node]:
        node = self._head
        while node is not None:
            if node.packet is not None and node.packet.id == packet_id:
                return node
            node = node.next
        return None


class LinkedListPacketQueue(_LinkedChain):
    """Queue kept as a doubly linked list."""

    def enqueue(self, packet: Packet) -> None:
        self._link(_Node(packet))

    def dequeue(self) -> Optional[Packet]:
        node = self._head
        if node is None:
            return None
        self._unlink(node)
        return node.packet

    def peek(self) -> Optional[Packet]:
        return None if self._head is None else self._head.packet

    def __len__(self) -> int:
        return self._size

    def drop(self, packet_id: str) -> bool:
        node = self._find(packet_id)
        if node is None:
            return False
        self._unlink(node)
        return True


class PooledLinkedListPacketQueue(_LinkedChain):
    """Linked-list queue that recycles its nodes through a shared pool."""

    def enqueue(self, packet: Packet) -> None:
        self._link(_NODE_POOL.acquire(packet))

    def dequeue(self) -> Optional[Packet]:
        node = self._head
        if node is None:
            return None
        self._unlink(node)
        packet = node.packet
        _NODE_POOL.release(node)
        return packet

    def peek(self) -> Optional[Packet]:
        return None if self._head is None else self._head.packet

    def __len__(self) -> int:
        return self._size

    def drop(self, packet_id: str) -> bool:
        node = self._find(packet_id)
        if node is None:
            return False
        self._unlink(node)
        _NODE_POOL.release(node)
        return True


class SlicePacketQueue(PacketQueue):
    """Queue kept in a deque."""

    def __init__(self) -> None:
        self._packets: deque[Packet] = deque()

    def enqueue(self, packet: Packet) -> None:
        self._packets.append(packet)

    def dequeue(self) -> Optional[Packet]:
        return self._packets.popleft() if self._packets else None

    def peek(self) -> Optional[Packet]:
        return self._packets[0] if self._packets else None

    def __len__(self) -> int:
        return len(self._packets)

    def drop(self, packet_id: str) -> bool:
        for index, packet in enumerate(self._packets):
            if packet.id == packet_id:
                del self._packets[index]
                return True
        return False