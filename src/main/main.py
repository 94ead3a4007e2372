import logging
import os
import random

import click
import yaml

import instrumentation
from routing_topology import generation, loading
from routing_topology.errors import InvalidParameters, TopologyError
from routing_topology.history import ChangeLog
from routing_topology.paths import PathEngine
from routing_topology.statistics import StatisticsCalculator
from routing_topology.store import TopologyStore

DEFAULT_METRICS = ["router_count", "link_count", "average_cost", "min_cost", "max_cost", "max_degree"]
TOPOLOGY_SOURCES = ["file", "random", "links"]


def read_config(path):
    with open(path, 'r') as file:
        return yaml.safe_load(file)


@click.command()
@click.option(
    "--config",
    default=os.getenv("CONFIG", "./scenario.yaml"),
    help="location of the scenario config YAML",
)
@click.option(
    "--log-level",
    default=os.getenv("LOG_LEVEL", "WARNING"),
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="verbosity of the log written to stderr",
)
def run(config: str, log_level: str):
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        scenario = read_config(config) or {}
        if not isinstance(scenario, dict):
            raise InvalidParameters(f"scenario must be a mapping, got {scenario!r}")
        run_scenario(scenario)
    except TopologyError as e:
        raise click.ClickException(f"{e.kind.value}: {e.message}")


def run_scenario(config: dict, echo=click.echo) -> instrumentation.Session:
    tracker, measurement_reader = instrumentation.setup()
    store = TopologyStore(tracker=tracker)
    change_log = ChangeLog()
    store.add_listener(change_log)
    engine = PathEngine(tracker=tracker)

    if "topology" in config:
        build_topology(store, _section(config, "topology"))
    for update in _sequence(config, "updates"):
        a, b, cost = _unpack(update, 3, "update")
        store.update_link(a, b, cost)

    for query in _sequence(config, "queries"):
        origin, destination = _unpack(query, 2, "query")
        result = engine.shortest_path(store, origin, destination)
        if result.reachable:
            echo(f"{origin} -> {destination}: cost {result.cost}, route {' -> '.join(result.path)}")
        else:
            echo(f"{origin} -> {destination}: unreachable")

    echo(f"connected: {engine.is_connected(store)}")
    metrics = _sequence(config, "metrics") if "metrics" in config else DEFAULT_METRICS
    for name, value in StatisticsCalculator(store, engine).scrape(metrics).items():
        echo(f"{name}: {_format(value)}")

    if config["history"] if "history" in config else False:
        for entry in change_log.entries:
            echo(repr(entry))
    return measurement_reader.session()


def build_topology(store: TopologyStore, config: dict) -> None:
    sources = [source for source in TOPOLOGY_SOURCES if source in config]
    if len(sources) != 1:
        raise InvalidParameters(f"topology needs exactly one of {TOPOLOGY_SOURCES}, got {list(config.keys())}")
    if "file" in config:
        if not isinstance(config["file"], str):
            raise InvalidParameters(f"topology file must be a path, got {config['file']!r}")
        loading.load_file(store, config["file"])
    elif "random" in config:
        random_config = _section(config, "random")
        for key in ["router_count", "max_cost"]:
            if key not in random_config:
                raise InvalidParameters(f"random topology is missing {key}")
        seed = random_config["seed"] if "seed" in random_config else None
        if seed is not None and not isinstance(seed, (int, str)):
            raise InvalidParameters(f"random seed must be an integer or string, got {seed!r}")
        rnd = random.Random(seed)
        cost_distribution = random_config["cost_distribution"] if "cost_distribution" in random_config else "uniform"
        generation.generate_random_topology(
            store,
            router_count=random_config["router_count"],
            max_cost=random_config["max_cost"],
            density=random_config["density"] if "density" in random_config else generation.DEFAULT_DENSITY,
            rnd=rnd,
            cost_generator=generation.create_cost_generator(cost_distribution),
        )
    else:
        links = [_unpack(link, 3, "link") for link in _sequence(config, "links")]
        loading.load_links(store, [" ".join(str(token) for token in link) for link in links], "config")


def _section(config: dict, name: str) -> dict:
    section = config[name] if name in config else {}
    if not isinstance(section, dict):
        raise InvalidParameters(f"{name} must be a mapping, got {section!r}")
    return section


def _sequence(config: dict, name: str) -> list:
    items = config[name] if name in config else []
    if not isinstance(items, list):
        raise InvalidParameters(f"{name} must be a list, got {items!r}")
    return items


def _unpack(item, size: int, what: str) -> list:
    if not isinstance(item, list) or len(item) != size:
        raise InvalidParameters(f"{what} must be a list of {size} items, got {item!r}")
    return item


def _format(value) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


if __name__ == '__main__':
    run()
