import unittest
from datetime import datetime, timedelta, timezone

from routing_topology.errors import DuplicateRouter
from routing_topology.history import ChangeLog
from routing_topology.store import TopologyStore


class _FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class ChangeLogTestCase(unittest.TestCase):
    def test_records_mutations(self):
        change_log = ChangeLog(clock=_FakeClock())
        store = TopologyStore()
        store.add_listener(change_log)
        store.add_router("A")
        store.add_router("B")
        store.update_link("A", "B", 3)
        store.remove_link("A", "B")
        store.remove_router("A")
        self.assertEqual(
            [
                "router added: A",
                "router added: B",
                "link updated: A <-> B cost 3",
                "link removed: A <-> B",
                "router removed: A",
            ],
            change_log.descriptions(),
        )
        self.assertEqual(datetime(2024, 1, 1, 0, 0, 1, tzinfo=timezone.utc), change_log.entries[0].timestamp)
        self.assertEqual("2024-01-01T00:00:03+00:00: link updated: A <-> B cost 3", repr(change_log.entries[2]))

    def test_for_router(self):
        change_log = ChangeLog(clock=_FakeClock())
        store = TopologyStore()
        store.add_listener(change_log)
        for name in ["A", "B", "C"]:
            store.add_router(name)
        store.update_link("A", "B", 1)
        store.update_link("B", "C", 1)
        store.remove_router("B")
        self.assertEqual(
            ["router added: C", "link updated: B <-> C cost 1", "router removed: B"],
            [entry.description for entry in change_log.for_router("C")],
        )

    def test_failed_mutation_not_recorded(self):
        change_log = ChangeLog(clock=_FakeClock())
        store = TopologyStore()
        store.add_listener(change_log)
        store.add_router("A")
        with self.assertRaises(DuplicateRouter):
            store.add_router("A")
        self.assertEqual(["router added: A"], change_log.descriptions())

    def test_max_entries_keeps_newest(self):
        change_log = ChangeLog(clock=_FakeClock(), max_entries=2)
        for description in ["one", "two", "three"]:
            change_log.record(description)
        self.assertEqual(["two", "three"], change_log.descriptions())
        change_log.clear()
        self.assertEqual([], change_log.entries)

    def test_restore_and_clear_recorded(self):
        change_log = ChangeLog(clock=_FakeClock())
        store = TopologyStore()
        store.add_listener(change_log)
        store.restore({"A": {"B": 2}, "B": {"A": 2}})
        store.clear()
        self.assertEqual(
            ["topology restored: 2 routers, 1 links", "topology cleared"],
            change_log.descriptions(),
        )

    def test_default_clock_is_utc(self):
        entry = ChangeLog().record("hello")
        self.assertEqual(timezone.utc, entry.timestamp.tzinfo)


if __name__ == '__main__':
    unittest.main()
