"""Command line for pestr: node reservation for a tasks x threads job, with filled alternatives."""
import argparse
import logging
import math
import sys
from typing import Sequence

from pydantic import ValidationError

from pestr.config import load_config
from pestr.errors import InvalidSearchOption, PestrError
from pestr.models import Config, Geometry, Reservation, SearchOptions
from pestr.observability import configure_logging
from pestr.packing import compute_reservation
from pestr.recommend import alternates, build_filter
from pestr.report import render_json, render_text
from pestr.searchopts import parse_search_options

__version__ = "0.1.0"

_LOG = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("must be a positive integer") from None
    if n <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return n


def non_negative_float(value: str) -> float:
    try:
        x = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError("must be a real number") from None
    if not math.isfinite(x):
        raise argparse.ArgumentTypeError("must be a finite number")
    if x < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return x


def build_parser() -> argparse.ArgumentParser:
    """Build the `pestr` argument parser.

    Options left unset (None) fall back to the configuration file and
    PESTR_* environment variables.
    """
    parser = argparse.ArgumentParser(
        prog="pestr",
        description="Compute the node reservation for a tasks x threads job and suggest geometries that fill it.",
    )
    parser.add_argument("pes", metavar="PES", type=positive_int, help="Number of PEs (MPI tasks) allocated to the job")
    parser.add_argument("threads", metavar="THREADS", type=positive_int, help="Number of threads per PE")
    parser.add_argument(
        "-n", "--cpus-per-node",
        type=positive_int,
        default=None,
        help="Number of CPUs per node on the target machine (default: config, then 128)",
    )
    parser.add_argument(
        "-y", "--hyperthreading",
        action="store_true",
        help="Enable hyperthreading (double the node CPU count)",
    )
    parser.add_argument(
        "-s", "--suggest",
        action="store_true",
        help="Suggest alternate geometries that fill their reservation",
    )
    parser.add_argument(
        "-S", "--search",
        metavar="OPTS",
        default=None,
        help="Search options, e.g. pe_radius=0.3,thread_radius=0.5,conserve_nodes (implies --suggest)",
    )
    parser.add_argument(
        "-c", "--conserve-nodes",
        action="store_true",
        default=None,
        help="Conserve total node count in suggested geometries",
    )
    parser.add_argument(
        "-p", "--pe-radius",
        type=non_negative_float,
        default=None,
        help="Search radius for PE count, as a fraction of PES (default: 0.25)",
    )
    parser.add_argument(
        "-t", "--thread-radius",
        type=non_negative_float,
        default=None,
        help="Search radius for thread count, as a fraction of THREADS (default: 0.5)",
    )
    parser.add_argument("-j", "--json", action="store_true", help="Write output as JSON")
    parser.add_argument("--config", metavar="PATH", default=None, help="Configuration file (TOML)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeatable)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_search_options(args: argparse.Namespace, config: Config) -> SearchOptions:
    """Config-resolved search settings, then --search tokens, then explicit -c/-p/-t flags."""
    options = config.search
    if args.search is not None:
        options = parse_search_options(args.search, defaults=options)
    overrides = {
        "conserve_nodes": args.conserve_nodes,
        "pe_radius": args.pe_radius,
        "thread_radius": args.thread_radius,
    }
    values = options.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return SearchOptions(**values)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err.get("loc", ()))
        raise InvalidSearchOption(f"invalid search option {field}: {err.get('msg', 'invalid value')}") from e


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    options = resolve_search_options(args, config)
    cpus_per_node = args.cpus_per_node if args.cpus_per_node is not None else config.cpus_per_node

    geom = Geometry.new(cpus_per_node, args.hyperthreading, args.pes, args.threads)
    res = compute_reservation(geom)
    _LOG.info("%d x %d on %d-core nodes: %d nodes, filled=%s", geom.tasks, geom.threads, geom.logical_cpus, res.nodes, res.is_filled)

    found: list[tuple[Geometry, Reservation]] = []
    if args.suggest or args.search is not None:
        found = alternates(
            geom,
            options.pe_radius,
            options.thread_radius,
            build_filter(options.conserve_nodes, res),
        )

    if args.json:
        sys.stdout.write(render_json(geom, res, found))
    else:
        sys.stdout.write(render_text(res, found))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run pestr and return a process exit code (argparse exits with 2 on bad arguments)."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return run(args)
    except PestrError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
