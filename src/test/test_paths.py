import math
import random
import unittest

import instrumentation
from routing_topology import generation, graphs, measurements
from routing_topology.errors import RouterNotFound
from routing_topology.paths import UNREACHABLE_COST, PathEngine, Unreachable
from routing_topology.store import TopologyStore


def _store_with(*links: tuple[str, str, int]) -> TopologyStore:
    store = TopologyStore()
    for a, b, cost in links:
        for name in (a, b):
            if not store.router_exists(name):
                store.add_router(name)
        store.update_link(a, b, cost)
    return store


def _route_cost(store: TopologyStore, route: list[str]) -> int:
    return sum(store.cost(a, b) for a, b in zip(route, route[1:]))


class ShortestPathTestCase(unittest.TestCase):
    def test_four_node_cycle(self):
        store = _store_with(("A", "B", 1), ("B", "C", 1), ("C", "D", 1), ("D", "A", 1))
        result = PathEngine().shortest_path(store, "A", "C")
        self.assertTrue(result.reachable)
        self.assertEqual(2, result.cost)
        self.assertIn(result.path, [["A", "B", "C"], ["A", "D", "C"]])

    def test_ties_resolve_by_name(self):
        store = _store_with(("A", "D", 1), ("D", "C", 1), ("A", "B", 1), ("B", "C", 1))
        result = PathEngine().shortest_path(store, "A", "C")
        self.assertEqual(["A", "B", "C"], result.path)

    def test_prefers_cheaper_detour(self):
        store = _store_with(("A", "B", 1), ("B", "C", 1), ("A", "C", 10), ("C", "D", 1))
        result = PathEngine().shortest_path(store, "A", "D")
        self.assertEqual(3, result.cost)
        self.assertEqual(["A", "B", "C", "D"], result.path)

    def test_zero_cost_links(self):
        store = _store_with(("A", "B", 0), ("B", "C", 0), ("A", "C", 1))
        result = PathEngine().shortest_path(store, "A", "C")
        self.assertEqual(0, result.cost)
        self.assertEqual(["A", "B", "C"], result.path)

    def test_same_origin_and_destination(self):
        store = _store_with(("A", "B", 4))
        result = PathEngine().shortest_path(store, "A", "A")
        self.assertEqual(0, result.cost)
        self.assertEqual(["A"], result.path)

    def test_disjoint_components_are_unreachable(self):
        store = _store_with(("A", "B", 1), ("C", "D", 1))
        result = PathEngine().shortest_path(store, "A", "D")
        self.assertIsInstance(result, Unreachable)
        self.assertFalse(result.reachable)
        self.assertEqual(UNREACHABLE_COST, result.cost)
        self.assertEqual([], result.path)

    def test_unknown_endpoint(self):
        store = _store_with(("A", "B", 1))
        engine = PathEngine()
        with self.assertRaises(RouterNotFound):
            engine.shortest_path(store, "A", "Z")
        with self.assertRaises(RouterNotFound):
            engine.shortest_path(store, "Z", "A")

    def test_queries_do_not_mutate_store(self):
        store = _store_with(("A", "B", 1), ("B", "C", 2))
        before = store.snapshot()
        engine = PathEngine()
        engine.shortest_path(store, "A", "C")
        engine.shortest_paths(store, "A")
        engine.is_connected(store)
        self.assertEqual(before, store.snapshot())

    def test_repeated_queries_are_deterministic(self):
        rnd = random.Random(7)
        store = TopologyStore()
        generation.generate_random_topology(store, 12, 3, rnd, density=0.5)
        engine = PathEngine()
        first = engine.shortest_path(store, "E0", "E11")
        for _ in range(5):
            again = engine.shortest_path(store, "E0", "E11")
            self.assertEqual(first.cost, again.cost)
            self.assertEqual(first.path, again.path)

    def test_matches_all_pairs_distances(self):
        engine = PathEngine()
        for i in range(30):
            rnd = random.Random(i)
            store = TopologyStore()
            generation.generate_random_topology(store, 10, 20, rnd, density=0.3)
            for a, b, _ in store.links()[:2]:
                store.remove_link(a, b)
            expected = graphs.distances(graphs.to_graph(store))
            for origin in store.all_router_names():
                for destination in store.all_router_names():
                    result = engine.shortest_path(store, origin, destination)
                    if math.isinf(expected[origin][destination]):
                        self.assertFalse(result.reachable)
                        continue
                    self.assertEqual(expected[origin][destination], result.cost)
                    self.assertEqual(origin, result.path[0])
                    self.assertEqual(destination, result.path[-1])
                    self.assertEqual(result.cost, _route_cost(store, result.path))

    def test_shortest_paths_table(self):
        store = _store_with(("A", "B", 2), ("B", "C", 2), ("A", "C", 5))
        store.add_router("D")
        self.assertEqual({"A": 0, "B": 2, "C": 4}, PathEngine().shortest_paths(store, "A"))

    def test_queries_are_measured(self):
        tracker, reader = instrumentation.setup()
        store = _store_with(("A", "B", 1))
        engine = PathEngine(tracker=tracker)
        engine.shortest_path(store, "A", "B")
        engine.shortest_path(store, "B", "B")
        session = reader.session()
        self.assertEqual(2, session.get(measurements.PATH_QUERY_COUNT))
        self.assertGreaterEqual(session.get(measurements.PATH_QUERY_SECONDS_SUM), 0)


class ConnectivityTestCase(unittest.TestCase):
    def test_empty_store_is_connected(self):
        self.assertTrue(PathEngine().is_connected(TopologyStore()))

    def test_single_router_is_connected(self):
        store = TopologyStore()
        store.add_router("A")
        self.assertTrue(PathEngine().is_connected(store))

    def test_isolated_router_disconnects(self):
        store = _store_with(("A", "B", 1), ("B", "C", 1), ("C", "A", 1))
        self.assertTrue(PathEngine().is_connected(store))
        store.add_router("D")
        self.assertFalse(PathEngine().is_connected(store))

    def test_removing_bridge_disconnects(self):
        store = _store_with(("A", "B", 1), ("B", "C", 1))
        store.remove_link("A", "B")
        self.assertFalse(PathEngine().is_connected(store))

    def test_components(self):
        store = _store_with(("D", "C", 1), ("A", "B", 1))
        store.add_router("E")
        self.assertEqual([["A", "B"], ["C", "D"], ["E"]], PathEngine().components(store))

    def test_reachability_agrees_with_connectivity(self):
        for i in range(10):
            rnd = random.Random(i)
            store = TopologyStore()
            generation.generate_random_topology(store, 8, 5, rnd, density=0.4)
            for a, b, _ in store.links()[::2]:
                store.remove_link(a, b)
            cover = graphs.reachabilities(graphs.to_graph(store))
            expected = all(len(reachable) == store.router_count() for reachable in cover.values())
            self.assertEqual(expected, PathEngine().is_connected(store))


if __name__ == '__main__':
    unittest.main()
