import heapq
import logging
from typing import Optional, Union

import instrumentation
from . import measurements
from .errors import RouterNotFound
from .store import Cost, RouterName, TopologyStore

Route = list[RouterName]

UNREACHABLE_COST = -1


class PricedRoute:
    reachable = True

    def __init__(self, path: Route, cost: Cost):
        self.path = path
        self.cost = cost

    def __repr__(self):
        return str({"path": self.path, "cost": self.cost})


class Unreachable:
    """No route exists between ``origin`` and ``destination``.

    ``cost`` and ``path`` mirror the legacy ``(-1, [])`` answer.
    """
    reachable = False
    cost = UNREACHABLE_COST

    def __init__(self, origin: RouterName, destination: RouterName):
        self.origin = origin
        self.destination = destination
        self.path: Route = []

    def __repr__(self):
        return f"Unreachable({self.origin} -> {self.destination})"


PathResult = Union[PricedRoute, Unreachable]


class PathEngine:
    """Read-only shortest path and connectivity queries over a store.

    Frontier entries are ordered by ``(distance, name)`` and neighbors are
    relaxed in name order, so equal-cost ties resolve the same way on
    every run.
    """

    def __init__(
            self,
            tracker: Optional[instrumentation.Tracker] = None,
            logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.measurements = _Measurements(tracker if tracker is not None else instrumentation.detached())

    def shortest_path(self, store: TopologyStore, origin: RouterName, destination: RouterName) -> PathResult:
        self._require(store, origin)
        self._require(store, destination)
        self.measurements.path_query_count.increase()
        with self.measurements.path_query_seconds_sum:
            if origin == destination:
                return PricedRoute([origin], 0)
            distances, predecessors = self._settle(store, origin, destination)
        if destination not in distances:
            self.logger.debug("no route from %s to %s", origin, destination)
            return Unreachable(origin, destination)
        route = [destination]
        while route[-1] != origin:
            route.append(predecessors[route[-1]])
        route.reverse()
        return PricedRoute(route, distances[destination])

    def shortest_paths(self, store: TopologyStore, origin: RouterName) -> dict[RouterName, Cost]:
        self._require(store, origin)
        self.measurements.path_query_count.increase()
        with self.measurements.path_query_seconds_sum:
            distances, _ = self._settle(store, origin)
        return dict(sorted(distances.items()))

    def is_connected(self, store: TopologyStore) -> bool:
        names = store.all_router_names()
        if len(names) == 0:
            return True
        return len(self._visit(store, names[0])) == len(names)

    def components(self, store: TopologyStore) -> list[list[RouterName]]:
        components = []
        seen: set[RouterName] = set()
        for name in store.all_router_names():
            if name in seen:
                continue
            component = self._visit(store, name)
            seen |= component
            components.append(sorted(component))
        return components

    @staticmethod
    def _settle(
            store: TopologyStore,
            origin: RouterName,
            destination: Optional[RouterName] = None,
    ) -> tuple[dict[RouterName, Cost], dict[RouterName, RouterName]]:
        distances: dict[RouterName, Cost] = {origin: 0}
        predecessors: dict[RouterName, RouterName] = {}
        settled: set[RouterName] = set()
        frontier: list[tuple[Cost, RouterName]] = [(0, origin)]
        while len(frontier) != 0:
            distance, name = heapq.heappop(frontier)
            if name in settled:
                continue
            settled.add(name)
            if name == destination:
                break
            for neighbor, cost in sorted(store.neighbors(name).items()):
                if neighbor in settled:
                    continue
                detour = distance + cost
                if neighbor not in distances or detour < distances[neighbor]:
                    distances[neighbor] = detour
                    predecessors[neighbor] = name
                    heapq.heappush(frontier, (detour, neighbor))
        return distances, predecessors

    @staticmethod
    def _visit(store: TopologyStore, start: RouterName) -> set[RouterName]:
        visited: set[RouterName] = set()
        stack = [start]
        while len(stack) != 0:
            name = stack.pop()
            if name in visited:
                continue
            visited.add(name)
            stack.extend(neighbor for neighbor in store.neighbors(name) if neighbor not in visited)
        return visited

    @staticmethod
    def _require(store: TopologyStore, name: RouterName) -> None:
        if not store.router_exists(name):
            raise RouterNotFound(name)


class _Measurements:
    def __init__(self, tracker: instrumentation.Tracker):
        self.path_query_count = tracker.get_counter(measurements.PATH_QUERY_COUNT)
        self.path_query_seconds_sum = tracker.get_timer(measurements.PATH_QUERY_SECONDS_SUM)
