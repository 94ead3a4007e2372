import copy
import logging
import math
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

import instrumentation
from . import measurements
from .errors import DuplicateRouter, InvalidCost, InvalidName, InvalidParameters, LinkNotFound, RouterNotFound
from .history import Clock, TopologyListener, utc_now

RouterName = str
Cost = int
CostGraph = dict[RouterName, dict[RouterName, Cost]]
Link = tuple[RouterName, RouterName, Cost]

INFINITE_COST = math.inf


def validate_name(name) -> None:
    if not isinstance(name, str) or name.strip() == "":
        raise InvalidName(f"router name must be a non-empty string, got {name!r}")


def validate_cost(cost) -> None:
    if isinstance(cost, bool) or not isinstance(cost, int) or cost < 0:
        raise InvalidCost(cost)


class Router:
    def __init__(self, name: RouterName, last_updated: datetime):
        self.name = name
        self.adjacency: dict[RouterName, Cost] = {}
        self.last_updated = last_updated

    def __repr__(self):
        return str({"name": self.name, "adjacency": self.adjacency})

    def degree(self) -> int:
        return len(self.adjacency)


class TopologyStore:
    """Undirected weighted graph of named routers.

    Every link is kept on both endpoints' adjacency rows. Each mutating
    call validates all of its arguments before touching any state, so a
    raised ``TopologyError`` leaves the store as it was.
    """

    def __init__(
            self,
            tracker: Optional[instrumentation.Tracker] = None,
            logger: Optional[logging.Logger] = None,
            clock: Optional[Clock] = None,
    ):
        self.clock = clock if clock is not None else utc_now
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.measurements = _Measurements(tracker if tracker is not None else instrumentation.detached())
        self.routers: dict[RouterName, Router] = {}
        self.listeners: list[TopologyListener] = []

    def __repr__(self):
        return str({"routers": self.routers})

    def add_listener(self, listener: TopologyListener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: TopologyListener) -> None:
        self.listeners.remove(listener)

    def router_exists(self, name: RouterName) -> bool:
        return name in self.routers

    def router_count(self) -> int:
        return len(self.routers)

    def all_router_names(self) -> list[RouterName]:
        return sorted(self.routers.keys())

    def add_router(self, name: RouterName) -> None:
        validate_name(name)
        if name in self.routers:
            raise DuplicateRouter(name)
        self.routers[name] = Router(name, self.clock())
        self.measurements.router_mutation_count.increase()
        self.logger.debug("added router %s", name)
        for listener in self.listeners:
            listener.on_router_added(name)

    def remove_router(self, name: RouterName) -> None:
        router = self._get_router(name)
        former_neighbors = sorted(neighbor for neighbor in router.adjacency.keys() if neighbor != name)
        del self.routers[name]
        now = self.clock()
        for neighbor in former_neighbors:
            del self.routers[neighbor].adjacency[name]
            self.routers[neighbor].last_updated = now
        self.measurements.router_mutation_count.increase()
        self.logger.debug("removed router %s and its links to %s", name, former_neighbors)
        for listener in self.listeners:
            listener.on_router_removed(name, former_neighbors)

    def update_link(self, a: RouterName, b: RouterName, cost: Cost) -> None:
        router_a = self._get_router(a)
        router_b = self._get_router(b)
        validate_cost(cost)
        router_a.adjacency[b] = cost
        router_b.adjacency[a] = cost
        router_a.last_updated = router_b.last_updated = self.clock()
        self.measurements.link_mutation_count.increase()
        self.logger.debug("set link %s <-> %s to cost %d", a, b, cost)
        for listener in self.listeners:
            listener.on_link_updated(a, b, cost)

    def remove_link(self, a: RouterName, b: RouterName) -> None:
        router_a = self._get_router(a)
        router_b = self._get_router(b)
        if b not in router_a.adjacency:
            raise LinkNotFound(a, b)
        del router_a.adjacency[b]
        router_b.adjacency.pop(a, None)
        router_a.last_updated = router_b.last_updated = self.clock()
        self.measurements.link_mutation_count.increase()
        self.logger.debug("removed link %s <-> %s", a, b)
        for listener in self.listeners:
            listener.on_link_removed(a, b)

    def cost(self, a: RouterName, b: RouterName) -> float:
        router_a = self._get_router(a)
        self._get_router(b)
        if b not in router_a.adjacency:
            return INFINITE_COST
        return router_a.adjacency[b]

    def has_link(self, a: RouterName, b: RouterName) -> bool:
        return self.cost(a, b) != INFINITE_COST

    def neighbors(self, name: RouterName) -> Mapping[RouterName, Cost]:
        return MappingProxyType(self._get_router(name).adjacency)

    def degree(self, name: RouterName) -> int:
        return self._get_router(name).degree()

    def last_updated(self, name: RouterName) -> datetime:
        return self._get_router(name).last_updated

    def links(self) -> list[Link]:
        return [
            (name, neighbor, cost)
            for name in self.all_router_names()
            for neighbor, cost in sorted(self.routers[name].adjacency.items())
            if name <= neighbor
        ]

    def link_count(self) -> int:
        return len(self.links())

    def clear(self) -> None:
        self.measurements.router_mutation_count.increase(len(self.routers))
        self.measurements.link_mutation_count.increase(self.link_count())
        self.routers.clear()
        self.logger.debug("cleared topology")
        for listener in self.listeners:
            listener.on_cleared()

    def snapshot(self) -> CostGraph:
        return {
            name: dict(router.adjacency)
            for name, router in self.routers.items()
        }

    def restore(self, graph: CostGraph) -> None:
        _validate_graph(graph)
        routers: dict[RouterName, Router] = {}
        now = self.clock()
        for name, adjacency in graph.items():
            router = Router(name, now)
            router.adjacency = copy.copy(adjacency)
            routers[name] = router
        self.routers = routers
        link_count = self.link_count()
        self.measurements.router_mutation_count.increase(len(routers))
        self.measurements.link_mutation_count.increase(link_count)
        self.logger.debug("restored topology with %d routers and %d links", len(routers), link_count)
        for listener in self.listeners:
            listener.on_restored(len(routers), link_count)

    def _get_router(self, name: RouterName) -> Router:
        if name not in self.routers:
            raise RouterNotFound(name)
        return self.routers[name]


def _validate_graph(graph: CostGraph) -> None:
    for name, adjacency in graph.items():
        validate_name(name)
        for neighbor, cost in adjacency.items():
            validate_cost(cost)
            if neighbor not in graph:
                raise InvalidParameters(f"{name} links to unknown router {neighbor}")
            if graph[neighbor].get(name) != cost:
                raise InvalidParameters(f"link {name} <-> {neighbor} is not symmetric")


class _Measurements:
    def __init__(self, tracker: instrumentation.Tracker):
        self.router_mutation_count = tracker.get_counter(measurements.ROUTER_MUTATION_COUNT)
        self.link_mutation_count = tracker.get_counter(measurements.LINK_MUTATION_COUNT)
