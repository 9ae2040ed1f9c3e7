"""Network packets and their priority classification."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union


class Protocol(str, Enum):
    TCP = "TCP"
    UDP = "UDP"
    ICMP = "ICMP"


def _now() -> datetime:
    return datetime.now().astimezone()


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    stamp = moment.strftime("%Y-%m-%dT%H:%M:%S")
    offset = moment.utcoffset()
    if not offset:
        return stamp + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{stamp}{sign}{hours:02d}:{minutes:02d}"


@dataclass
class Packet:
    id: str
    source_ip: str = ""
    dest_ip: str = ""
    protocol: Union[Protocol, str] = Protocol.TCP
    priority: int = 0
    payload: bytes = b""
    timestamp: datetime = field(default_factory=_now)
    ttl: int = 0

    def __str__(self) -> str:
        proto = self.protocol.value if isinstance(self.protocol, Protocol) else self.protocol
        return (
            f"[{self.id}] {self.source_ip} -> {self.dest_ip} | Proto: {proto} "
            f"| Prio: {self.priority} | TTL: {self.ttl} | Time: {_rfc3339(self.timestamp)}"
        )


class PacketClassifier(ABC):
    """Assigns a priority (1 is highest) to a packet."""

    @abstractmethod
    def classify(self, packet: Packet) -> int:
        """Return the priority for ``packet``."""


class DefaultPacketClassifier(PacketClassifier):
    """ICMP first, then TCP SYN, other TCP, UDP, and everything else."""

    def classify(self, packet: Packet) -> int:
        if packet.protocol == Protocol.ICMP:
            return 1
        if packet.protocol == Protocol.TCP and b"SYN" in packet.payload:
            return 2
        if packet.protocol == Protocol.TCP:
            return 3
        if packet.protocol == Protocol.UDP:
            return 4
        return 5