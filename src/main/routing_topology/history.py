from datetime import datetime, timezone
from typing import Callable, Optional

from overrides import override

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TopologyListener:
    def on_router_added(self, name: str) -> None:
        pass

    def on_router_removed(self, name: str, former_neighbors: list[str]) -> None:
        pass

    def on_link_updated(self, a: str, b: str, cost: int) -> None:
        pass

    def on_link_removed(self, a: str, b: str) -> None:
        pass

    def on_cleared(self) -> None:
        pass

    def on_topology_loaded(self, source: str, router_count: int, link_count: int) -> None:
        pass

    def on_topology_generated(self, router_count: int, link_count: int) -> None:
        pass

    def on_restored(self, router_count: int, link_count: int) -> None:
        pass


class ChangeEntry:
    def __init__(self, timestamp: datetime, description: str, routers: tuple[str, ...] = ()):
        self.timestamp = timestamp
        self.description = description
        self.routers = routers

    def __repr__(self):
        return f"{self.timestamp.isoformat()}: {self.description}"


class ChangeLog(TopologyListener):
    """Audit trail of successful topology mutations.

    The log is advisory: the store works the same with or without it.
    Pass a fixed ``clock`` to get reproducible timestamps.
    """

    def __init__(self, clock: Optional[Clock] = None, max_entries: Optional[int] = None):
        self.clock = clock if clock is not None else utc_now
        self.max_entries = max_entries
        self.entries: list[ChangeEntry] = []

    def record(self, description: str, routers: tuple[str, ...] = ()) -> ChangeEntry:
        entry = ChangeEntry(self.clock(), description, routers)
        self.entries.append(entry)
        if self.max_entries is not None and len(self.entries) > self.max_entries:
            # keep the newest entries
            self.entries = self.entries[-self.max_entries:]
        return entry

    def for_router(self, name: str) -> list[ChangeEntry]:
        return [entry for entry in self.entries if name in entry.routers]

    def descriptions(self) -> list[str]:
        return [entry.description for entry in self.entries]

    def clear(self) -> None:
        self.entries.clear()

    @override
    def on_router_added(self, name: str) -> None:
        self.record(f"router added: {name}", (name,))

    @override
    def on_router_removed(self, name: str, former_neighbors: list[str]) -> None:
        self.record(f"router removed: {name}", (name, *former_neighbors))

    @override
    def on_link_updated(self, a: str, b: str, cost: int) -> None:
        self.record(f"link updated: {a} <-> {b} cost {cost}", (a, b))

    @override
    def on_link_removed(self, a: str, b: str) -> None:
        self.record(f"link removed: {a} <-> {b}", (a, b))

    @override
    def on_cleared(self) -> None:
        self.record("topology cleared")

    @override
    def on_topology_loaded(self, source: str, router_count: int, link_count: int) -> None:
        self.record(f"topology loaded from {source}: {router_count} routers, {link_count} links")

    @override
    def on_topology_generated(self, router_count: int, link_count: int) -> None:
        self.record(f"random topology generated: {router_count} routers, {link_count} links")

    @override
    def on_restored(self, router_count: int, link_count: int) -> None:
        self.record(f"topology restored: {router_count} routers, {link_count} links")
