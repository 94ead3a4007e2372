import copy
import time
from collections import defaultdict
from typing import Optional


class Counter:
    def __init__(self):
        self.value: float = 0

    def increase(self, amount: float = 1):
        self.value += amount


class Timer(Counter):
    def __init__(self):
        super().__init__()
        self.start: Optional[float] = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        end = time.perf_counter()
        self.increase(end - self.start)
        self.start = None


class Tracker:
    def __init__(self, counters: dict[str, Counter]):
        self.counters = counters

    def get_counter(self, name: str) -> Counter:
        if name not in self.counters:
            self.counters[name] = Counter()
        return self.counters[name]

    def get_timer(self, name: str) -> Timer:
        if name not in self.counters:
            self.counters[name] = Timer()
        counter = self.counters[name]
        if isinstance(counter, Timer):
            return counter
        raise Exception(f"there is already a non-timer counter registered under {name}")


class Session:
    def __init__(self, before: dict[str, float], after: dict[str, float]):
        self.before = before
        self.after = after

    def get(self, name: str) -> float:
        return self.after[name] if name in self.after else 0

    def delta(self, name: str) -> float:
        return self.get(name) - self.before[name]

    def rate(self, sum_metric: str, count_metric: str) -> float:
        count_delta = self.delta(count_metric)
        if count_delta == 0:
            return 0
        return self.delta(sum_metric) / count_delta


class MeasurementReader:
    def __init__(self, counters: dict[str, Counter]):
        self.counters = counters
        self.before: dict[str, float] = defaultdict(lambda: float(0))

    def session(self) -> Session:
        current = {
            name: counter.value
            for name, counter in self.counters.items()
        }
        before = copy.copy(self.before)
        self.before = defaultdict(lambda: float(0), current)
        return Session(before, current)


def setup() -> tuple[Tracker, MeasurementReader]:
    counters: dict[str, Counter] = {}
    return Tracker(counters), MeasurementReader(counters)


def detached() -> Tracker:
    return Tracker({})
