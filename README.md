# drillbox

A collection of small, self-contained workbenches built around classic data
structures. Each sub-package solves one concrete problem:

| Sub-package          | What it does                                                           |
|----------------------|------------------------------------------------------------------------|
| `drillbox.calc`      | List and linked stacks; bracket validation, infix-to-postfix, evaluation |
| `drillbox.netrouter` | Priority packet router over linked-list, pooled or deque-backed queues |
| `drillbox.dnscache`  | Bucketed FNV-1a hash map and DNS caches with expiry and wildcards      |
| `drillbox.sensors`   | Ring-buffer queue, sensor readings, anomaly alerts, metrics, pipeline  |
| `drillbox.rideshare` | Driver store, ride queue, active-ride tracker and dispatcher            |
| `drillbox.traffic`   | Road network, shortest paths, signals, vehicles and emergencies        |
| `drillbox.editor`    | Singly-headed linked list; chunked text document with undo/redo        |
| `drillbox.stocks`    | Growable array, rolling price buffer and a live dashboard              |

No third-party libraries are needed at run time.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

```
drillbox-router [--packets N] [--queue linkedlist_pooled|linkedlist|slice]
drillbox-sensors [--duration SECONDS]
drillbox-editor
drillbox-stocks [--duration SECONDS]
```

- `drillbox-router` classifies and enqueues random packets (10,000 by
  default), prints the queue lengths per priority, then drains the router and
  reports the timings.
- `drillbox-sensors` runs five reading generators, two processors, an alert
  handler and a statistics reporter in threads, until Ctrl+C or for
  `--duration` seconds.
- `drillbox-editor` is an interactive prompt reading commands from standard
  input: `insert`, `delete`, `replace`, `format`, `undo`, `redo`, `status`,
  `help`, `exit`.
- `drillbox-stocks` adds a random price to five stocks every 10 ms and
  redraws the dashboard every half second (clearing the screen with the
  system's `clear` or `cls`), until Ctrl+C or for `--duration` seconds.

## Library use

### Expression calculator

```python
from drillbox.calc.calculator import calculate, MultiError

calculate("3 + 4 * 2 / (1 - 5) ^ 2")   # 3.5
calculate("2 * sin(0) + 3 * cos(0)")   # 3.0

try:
    calculate("(1/0) + (")
except MultiError as err:
    print(err)        # every problem found, one per line
```

`^` is right-associative and `sin` and `cos` are supported. The steps are
also available on their own: `validate_parentheses`, `infix_to_postfix`,
`evaluate_postfix` and `tokenize`, each taking a `SliceStack` or
`LinkedListStack` from `drillbox.calc.stack` where a stack is needed.

### Packet router

```python
from drillbox.netrouter.packet import DefaultPacketClassifier, Packet, Protocol
from drillbox.netrouter.router import Router

router = Router(DefaultPacketClassifier(), "linkedlist")
router.enqueue(Packet("pkt-1", protocol=Protocol.ICMP, ttl=10))
router.queue_lengths()     # {1: 1, 2: 0, 3: 0, 4: 0, 5: 0}
router.dequeue().id        # "pkt-1"
```

Priorities run from 1 (ICMP) through 2 (TCP with `SYN` in the payload),
3 (other TCP) and 4 (UDP) to 5. Packets with a TTL of zero or less are
dropped. `dequeue` serves the highest priority first; `reorder` moves a
queued packet between priorities; `simulate` builds a router filled with
random packets.

### Hash map and DNS caches

```python
from drillbox.dnscache.hashmap import HashMap

m = HashMap()
m.put("example.com", "192.0.2.1")
m.get("example.com")     # "192.0.2.1"
len(m)                   # 1
```

`CustomDNSCache` (on `HashMap`) and `BuiltInDNSCache` (on a dict) in
`drillbox.dnscache.cache` share `add_record(domain, ip, ttl)`,
`resolve(domain)`, `stats()`, `purge_expired()` and `close()`. TTLs are
seconds or a `timedelta`. `resolve` returns the address or `None`. On a miss,
`CustomDNSCache` answers a `*.suffix` query with any cached domain ending in
that suffix, while `BuiltInDNSCache` looks for `*.parent` records of the
queried name. Both purge expired records on a background thread and can be
used as context managers, which stops that thread on exit.

### Circular queue

```python
from drillbox.sensors.circular_queue import CircularQueue

q = CircularQueue(2)
q.enqueue(1)
q.enqueue(2)
q.is_full()        # True
q.dequeue()        # 1
```

Enqueueing into a full queue raises `QueueFullError`; reading from an empty
one raises `QueueEmptyError`.

### Ride dispatch

```python
from drillbox.rideshare.dispatcher import Dispatcher
from drillbox.rideshare.entities import Driver, Location, Rider
from drillbox.rideshare.ride_queue import RideQueue
from drillbox.rideshare.store import MemoryStore
from drillbox.rideshare.tracker import RideTracker

store = MemoryStore()
dispatcher = Dispatcher(store, RideQueue(), RideTracker())
store.register(Driver("D1", location=Location(0, 0)))
ride = dispatcher.request_ride(Rider("U1"), Location(0.01, 0.01), Location(1, 1))
dispatcher.process_queue()       # assigns D1
dispatcher.complete_ride(ride.id)
dispatcher.driver_earnings("D1") # 50 plus 12 per unit of distance
```

Requests older than ten minutes are cancelled when they reach the front of
the queue. Drivers are indexed on a 5-unit grid; matching looks at the
surrounding cells for available drivers within the search radius.

### Road network and city simulation

```python
from drillbox.traffic.network import RoadNetwork

net = RoadNetwork(5)
net.add_road(1, 2, 1.0, 60, 1, "NS")
net.add_road(2, 3, 1.0, 60, 1, "EW")
path, hours = net.dijkstra(1, 3)   # [1, 2, 3]
```

Travel time takes each road's speed limit and congestion level into account;
`dijkstra_avoiding` skips blocked road segments and `dijkstra_emergency`
treats every road as clear. `CityModel` in `drillbox.traffic.city` adds
vehicles, adaptive signal cycles, congestion history with a top-five report,
and emergency vehicles that preempt signals and reroute other traffic. Its
`start_*` methods run in threads and stop when the given `threading.Event`
is set.

### Text document

```python
from drillbox.editor.document import Document, Operation, OperationType

doc = Document()
doc.apply(Operation(OperationType.ADD, position=0, data="hello"))
str(doc)      # "hello"
doc.undo()
str(doc)      # ""
doc.redo()
print(doc.status())
```

### Stocks

`DynamicArray` in `drillbox.stocks.dynarray` returns a new array from
`append`, sharing storage until its capacity grows. `StockExchange` in
`drillbox.stocks.dashboard` keeps each stock's full price history and a
`CircularBuffer` of the last 100 prices with current price, min/max and
simple moving average.

## What is not included

The traffic simulation and the ride dispatcher are libraries only: there is
no command, HTTP API or terminal display for either. The stock dashboard
serves no profiling or web endpoint.