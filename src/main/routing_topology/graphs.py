import math

from .store import CostGraph, RouterName, TopologyStore


def to_graph(store: TopologyStore) -> CostGraph:
    return store.snapshot()


def reachabilities(graph: CostGraph) -> dict[RouterName, set[RouterName]]:
    cover = {
        name: {name, *adjacency.keys()}
        for name, adjacency in graph.items()
    }
    for k in graph:
        for i in graph:
            if k in cover[i]:
                cover[i] |= cover[k]
    return cover


def distances(graph: CostGraph) -> dict[RouterName, dict[RouterName, float]]:
    dist = {
        i: {j: math.inf for j in graph}
        for i in graph
    }
    for i, adjacency in graph.items():
        for j, cost in adjacency.items():
            dist[i][j] = min(dist[i][j], cost)
        dist[i][i] = 0
    for k in graph:
        for i in graph:
            for j in graph:
                detour = dist[i][k] + dist[k][j]
                if detour < dist[i][j]:
                    dist[i][j] = detour
    return dist


def diameter(graph: CostGraph) -> float:
    finite = [
        cost
        for row in distances(graph).values()
        for cost in row.values()
        if cost != math.inf
    ]
    return max(finite) if len(finite) != 0 else 0
