"""Live stock price feed with rolling analytics over the last hundred prices."""

from __future__ import annotations

import argparse
import os
import random
import subprocess
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from drillbox.stocks.dynarray import DynamicArray

WINDOW = 100
INITIAL_CAPACITY = 10
UPDATE_INTERVAL = 0.01
DISPLAY_INTERVAL = 0.5
DEFAULT_STOCKS = ("HDFC", "RELIANCE", "TCS", "INFY", "ITC")


@dataclass(frozen=True)
class PricePoint:
    price: float
    timestamp: datetime = field(default_factory=datetime.now)
    volume: int = 0


class CircularBuffer:
    """The most recent ``WINDOW`` price points, overwritten oldest first."""

    def __init__(self) -> None:
        self._data: list[Optional[PricePoint]] = [None] * WINDOW
        self.write_index = 0
        self.full = False

    def add(self, point: PricePoint) -> None:
        self._data[self.write_index] = point
        self.write_index = (self.write_index + 1) % WINDOW
        if self.write_index == 0:
            self.full = True

    def _prices(self) -> list[float]:
        count = WINDOW if self.full else self.write_index
        return [point.price for point in self._data[:count] if point is not None]

    def current_price(self) -> float:
        """Return the latest price, or 0.0 before any point arrives."""
        if not self.full and self.write_index == 0:
            return 0.0
        point = self._data[(self.write_index - 1) % WINDOW]
        return point.price if point is not None else 0.0

    def sma(self) -> float:
        """Return the simple moving average of the buffered prices."""
        prices = self._prices()
        return sum(prices) / len(prices) if prices else 0.0

    def min_max(self) -> tuple[float, float]:
        prices = self._prices()
        if not prices:
            return 0.0, 0.0
        return min(prices), max(prices)

    def __str__(self) -> str:
        low, high = self.min_max()
        return (
            f"Price: {self.current_price():6.2f} | Min/Max: {low:6.2f}/{high:6.2f} "
            f"| SMA: {self.sma():6.2f}"
        )


class StockExchange:
    """Price history and rolling analytics for a set of stocks."""

    def __init__(self, names: Iterable[str] = DEFAULT_STOCKS) -> None:
        self._lock = threading.RLock()
        self.prices: dict[str, DynamicArray[PricePoint]] = {}
        self.buffers: dict[str, CircularBuffer] = {}
        for name in names:
            self.prices[name] = DynamicArray(0, INITIAL_CAPACITY)
            self.buffers[name] = CircularBuffer()

    def tick(self, rng: Optional[random.Random] = None) -> list[str]:
        """Add one random price near 100 to every stock; return resize log messages."""
        rng = rng or random.Random()
        messages: list[str] = []
        with self._lock:
            for name, history in self.prices.items():
                point = PricePoint(
                    price=100.0 + (rng.random() * 20.0 - 10.0),
                    timestamp=datetime.now(),
                    volume=rng.randrange(100),
                )
                old_cap = history.capacity()
                grown = history.append(point)
                self.prices[name] = grown
                new_cap = grown.capacity()
                if new_cap > old_cap > 0:
                    messages.append(f"[LOG] Buffer resized for {name}: cap {old_cap} → {new_cap}")
                self.buffers.setdefault(name, CircularBuffer()).add(point)
        return messages

    def render(self) -> str:
        with self._lock:
            lines = [
                "=== LIVE STOCK DASHBOARD ===",
                f"{'STOCK':<10} | ANALYTICS (Last {WINDOW})",
                "-----------|---------------------------------------------------------",
            ]
            lines.extend(f"{name:<10} | {buffer}" for name, buffer in self.buffers.items())
        return "\n".join(lines)

    def run_updates(self, stop: threading.Event, rng: Optional[random.Random] = None) -> None:
        """Tick every 10 ms until ``stop`` is set."""
        rng = rng or random.Random()
        while not stop.wait(UPDATE_INTERVAL):
            for message in self.tick(rng):
                print("\r\n" + message)


def _clear_screen() -> None:
    command = ["cmd", "/c", "cls"] if os.name == "nt" else ["clear"]
    try:
        subprocess.run(command, check=False)
    except OSError:
        pass


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Live stock dashboard.")
    parser.add_argument(
        "--duration", type=float, default=None, help="seconds to run (default: until Ctrl+C)"
    )
    args = parser.parse_args(argv)

    exchange = StockExchange(DEFAULT_STOCKS)
    stop = threading.Event()
    updater = threading.Thread(target=exchange.run_updates, args=(stop,), daemon=True)
    updater.start()
    deadline = None if args.duration is None else time.monotonic() + args.duration

    try:
        while not stop.wait(DISPLAY_INTERVAL):
            _clear_screen()
            print(exchange.render())
            if deadline is not None and time.monotonic() >= deadline:
                break
    except KeyboardInterrupt:
        pass

    stop.set()
    updater.join()
    print("\n[INFO] Shutdown signal received. Cleaning up...")
    time.sleep(DISPLAY_INTERVAL)
    print("[INFO] Graceful shutdown complete. Goodbye!")
    return 0