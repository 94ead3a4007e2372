from typing import Optional, Union

from . import graphs
from .errors import InvalidParameters
from .paths import PathEngine
from .store import TopologyStore

MetricName = str
MetricValue = Union[int, float, bool, None]

METRICS: list[MetricName] = [
    "router_count",
    "link_count",
    "average_cost",
    "min_cost",
    "max_cost",
    "max_degree",
    "average_degree",
    "density",
    "connected",
    "component_count",
    "diameter",
]


class NetworkStatistics:
    def __init__(
            self,
            router_count: int,
            link_count: int,
            average_cost: Optional[float],
            min_cost: Optional[int],
            max_cost: Optional[int],
            max_degree: int,
    ):
        self.router_count = router_count
        self.link_count = link_count
        self.average_cost = average_cost
        self.min_cost = min_cost
        self.max_cost = max_cost
        self.max_degree = max_degree

    def __repr__(self):
        return str(vars(self))


class StatisticsCalculator:
    def __init__(self, store: TopologyStore, engine: Optional[PathEngine] = None):
        self.store = store
        self.engine = engine if engine is not None else PathEngine()
        self.costs = [cost for _, _, cost in store.links()]

    def _calculate_metric(self, name: MetricName) -> MetricValue:
        if name == "router_count":
            return self.store.router_count()
        if name == "link_count":
            return len(self.costs)
        if name == "average_cost":
            return self.average_cost()
        if name == "min_cost":
            return min(self.costs) if len(self.costs) != 0 else None
        if name == "max_cost":
            return max(self.costs) if len(self.costs) != 0 else None
        if name == "max_degree":
            return self.max_degree()
        if name == "average_degree":
            return self.average_degree()
        if name == "density":
            return self.density()
        if name == "connected":
            return self.engine.is_connected(self.store)
        if name == "component_count":
            return len(self.engine.components(self.store))
        if name == "diameter":
            return graphs.diameter(graphs.to_graph(self.store))
        raise InvalidParameters(f"metric not supported: {name}")

    def average_cost(self) -> Optional[float]:
        if len(self.costs) == 0:
            return None
        return sum(self.costs) / len(self.costs)

    def max_degree(self) -> int:
        return max(
            [self.store.degree(name) for name in self.store.all_router_names()],
            default=0,
        )

    def average_degree(self) -> float:
        if self.store.router_count() == 0:
            return 0
        return 2 * len(self.costs) / self.store.router_count()

    def density(self) -> float:
        n = self.store.router_count()
        if n < 2:
            return 0
        return len(self.costs) / (n * (n - 1) / 2)

    def scrape(self, metrics: list[MetricName]) -> dict[MetricName, MetricValue]:
        return {
            metric_name: self._calculate_metric(metric_name)
            for metric_name in metrics
        }


def compute_statistics(store: TopologyStore) -> NetworkStatistics:
    calculator = StatisticsCalculator(store)
    return NetworkStatistics(
        router_count=store.router_count(),
        link_count=len(calculator.costs),
        average_cost=calculator.average_cost(),
        min_cost=calculator.scrape(["min_cost"])["min_cost"],
        max_cost=calculator.scrape(["max_cost"])["max_cost"],
        max_degree=calculator.max_degree(),
    )
