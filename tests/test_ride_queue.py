from datetime import datetime, timedelta

import pytest

from drillbox.rideshare.entities import Ride
from drillbox.rideshare.ride_queue import EmptyQueueError, RideQueue


def test_min_heap_orders_by_request_time():
    queue = RideQueue()
    now = datetime.now()
    rides = [
        Ride(id="1", request_time=now + timedelta(minutes=10)),
        Ride(id="2", request_time=now),
        Ride(id="3", request_time=now + timedelta(minutes=5)),
    ]
    for ride in rides:
        queue.enqueue(ride)

    assert len(queue) == 3
    assert queue.dequeue().id == "2"
    assert queue.dequeue().id == "3"
    assert queue.dequeue().id == "1"
    assert queue.is_empty()


def test_peek_does_not_remove():
    queue = RideQueue()
    now = datetime.now()
    queue.enqueue(Ride(id="late", request_time=now + timedelta(seconds=1)))
    queue.enqueue(Ride(id="early", request_time=now))
    assert queue.peek().id == "early"
    assert len(queue) == 2


def test_equal_times_keep_insertion_order():
    queue = RideQueue()
    now = datetime.now()
    for name in ("a", "b", "c"):
        queue.enqueue(Ride(id=name, request_time=now))
    assert [queue.dequeue().id for _ in range(3)] == ["a", "b", "c"]


def test_empty_queue_errors():
    queue = RideQueue()
    with pytest.raises(EmptyQueueError, match="queue is empty"):
        queue.dequeue()
    with pytest.raises(EmptyQueueError):
        queue.peek()