from datetime import datetime, timedelta, timezone

from drillbox.netrouter.packet import DefaultPacketClassifier, Packet, Protocol


def _classify(**kwargs):
    return DefaultPacketClassifier().classify(Packet(id="pkt-0", **kwargs))


def test_icmp_is_highest_priority():
    assert _classify(protocol=Protocol.ICMP) == 1


def test_priority_order_between_kinds():
    icmp = _classify(protocol=Protocol.ICMP)
    syn = _classify(protocol=Protocol.TCP, payload=b"SYN packet")
    tcp = _classify(protocol=Protocol.TCP, payload=b"sample payload")
    udp = _classify(protocol=Protocol.UDP)
    other = _classify(protocol="GRE")
    assert icmp < syn < tcp < udp < other


def test_syn_payload_only_matters_for_tcp():
    assert _classify(protocol=Protocol.UDP, payload=b"SYN packet") == _classify(
        protocol=Protocol.UDP, payload=b"sample payload"
    )


def test_plain_string_protocol_matches_enum():
    assert _classify(protocol="TCP") == _classify(protocol=Protocol.TCP)


def test_str_with_utc_timestamp():
    packet = Packet(
        id="pkt-7",
        source_ip="192.168.1.1",
        dest_ip="10.0.0.1",
        protocol=Protocol.TCP,
        priority=2,
        ttl=10,
        timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )
    text = str(packet)
    assert text.startswith("[pkt-7] 192.168.1.1 -> 10.0.0.1 | Proto: TCP | Prio: 2 | TTL: 10")
    assert text.endswith("Time: 2024-01-02T03:04:05Z")


def test_str_with_offset_timestamp():
    zone = timezone(timedelta(hours=5, minutes=30))
    packet = Packet(id="pkt-1", timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=zone))
    assert str(packet).endswith("+05:30")