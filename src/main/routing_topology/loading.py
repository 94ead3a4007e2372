import logging
from typing import Iterable, Union

from .errors import MalformedInput, TopologyError
from .store import Cost, RouterName, TopologyStore, validate_cost

_logger = logging.getLogger(__name__)


def parse_line(line: str, line_number: int) -> tuple[RouterName, RouterName, Cost]:
    tokens = line.split()
    if len(tokens) != 3:
        raise MalformedInput(f"expected 'origin destination cost', got {line.strip()!r}", line_number)
    origin, destination, raw_cost = tokens
    try:
        cost = int(raw_cost)
    except ValueError:
        raise MalformedInput(f"cost is not an integer: {raw_cost!r}", line_number)
    return origin, destination, cost


def _is_skipped(line: str) -> bool:
    stripped = line.strip()
    return stripped == "" or stripped.startswith("#")


def decode_line(line: Union[str, bytes], line_number: int) -> str:
    if isinstance(line, str):
        return line
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInput(f"line is not valid UTF-8: {e.reason} at byte {e.start}", line_number) from e


def load_links(store: TopologyStore, lines: Iterable[Union[str, bytes]], source: str = "<lines>") -> int:
    """Apply ``origin destination cost`` lines to ``store``.

    Lines may be ``str`` or UTF-8 ``bytes``. Missing routers are created on
    the fly. The first bad line aborts the load with ``MalformedInput``;
    links from earlier lines stay applied.
    Returns the number of links applied.
    """
    link_count = 0
    for line_number, line in enumerate(lines, start=1):
        try:
            line = decode_line(line, line_number)
            if _is_skipped(line):
                continue
            origin, destination, cost = parse_line(line, line_number)
            validate_cost(cost)
            for name in (origin, destination):
                if not store.router_exists(name):
                    store.add_router(name)
            store.update_link(origin, destination, cost)
        except MalformedInput:
            _logger.warning("rejected line %d of %s: %r", line_number, source, line)
            raise
        except TopologyError as e:
            _logger.warning("rejected line %d of %s: %s", line_number, source, e)
            raise MalformedInput(e.message, line_number, cause=e) from e
        link_count += 1
    _logger.info("loaded %d links from %s", link_count, source)
    for listener in store.listeners:
        listener.on_topology_loaded(source, store.router_count(), link_count)
    return link_count


def load_file(store: TopologyStore, path: str) -> int:
    with open(path, 'rb') as file:
        return load_links(store, file, source=path)
