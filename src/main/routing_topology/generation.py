import logging
import random
from typing import Callable

from .errors import InvalidParameters
from .store import Cost, RouterName, TopologyStore

CostGenerator = Callable[[random.Random, int], Cost]

DEFAULT_DENSITY = 0.6

_logger = logging.getLogger(__name__)


def cost_generator_same(rnd: random.Random, max_cost: int) -> Cost:
    return 1


def cost_generator_uniform(rnd: random.Random, max_cost: int) -> Cost:
    return rnd.randint(1, max_cost)


def create_cost_generator(name: str) -> CostGenerator:
    if name == "same":
        return cost_generator_same
    if name == "uniform":
        return cost_generator_uniform
    raise InvalidParameters(f"unknown cost distribution: {name}")


def router_name(index: int) -> RouterName:
    return f"E{index}"


def max_link_count(router_count: int) -> int:
    return router_count * (router_count - 1) // 2


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate(router_count: int, max_cost: int, density: float) -> None:
    if not _is_int(router_count) or router_count <= 0:
        raise InvalidParameters(f"router count must be a positive integer, got {router_count!r}")
    if not _is_int(max_cost) or max_cost <= 0:
        raise InvalidParameters(f"maximum cost must be a positive integer, got {max_cost!r}")
    if isinstance(density, bool) or not isinstance(density, (int, float)) or not 0 < density <= 1:
        raise InvalidParameters(f"density must be a number in (0, 1], got {density!r}")


def generate_random_topology(
        store: TopologyStore,
        router_count: int,
        max_cost: int,
        rnd: random.Random,
        density: float = DEFAULT_DENSITY,
        cost_generator: CostGenerator = cost_generator_uniform,
) -> int:
    """Replace the contents of ``store`` with a random connected topology.

    Routers are named ``E0`` .. ``E{n-1}``. A chain ``E0 - E1 - ... `` keeps
    the result connected, then random extra links are added until
    ``int(density * n * (n - 1) / 2)`` links exist. Returns the link count.
    """
    _validate(router_count, max_cost, density)
    store.clear()
    for i in range(router_count):
        store.add_router(router_name(i))

    for i in range(router_count - 1):
        store.update_link(router_name(i), router_name(i + 1), cost_generator(rnd, max_cost))
    link_count = router_count - 1

    target_link_count = int(max_link_count(router_count) * density)
    while link_count < target_link_count:
        i = rnd.randrange(router_count)
        j = rnd.randrange(router_count)
        if i == j or store.has_link(router_name(i), router_name(j)):
            continue
        store.update_link(router_name(i), router_name(j), cost_generator(rnd, max_cost))
        link_count += 1

    _logger.info("generated %d routers with %d links", router_count, link_count)
    for listener in store.listeners:
        listener.on_topology_generated(router_count, link_count)
    return link_count
