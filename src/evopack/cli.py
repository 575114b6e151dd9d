"""
Command-line entry point.

Usage:
    evopack run run.yaml
    evopack run --domain circle --param radius=10 --individual-size 5 --radius 1
    evopack domains

Command-line flags override values read from the run file.
Exit codes: 0 success, 1 no feasible solution, 2 invalid configuration.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from collections.abc import Sequence

from evopack.config import RunConfig, check_radius_fits, load_run_config
from evopack.core.distance import min_separation_gap
from evopack.core.errors import ConfigurationError
from evopack.core.individual import Individual
from evopack.domains.factory import DomainType
from evopack.engine import GAConfig, GAEngine, SearchNotConvergedError

logger = logging.getLogger("evopack.cli")

# argparse dest -> GAConfig field
_GA_FLAGS = {
    "individual_size": ("--individual-size", int, "number of circles to place"),
    "radius": ("--radius", float, "radius of every circle"),
    "population_size": ("--population-size", int, "individuals per generation"),
    "generations": ("--generations", int, "generations per attempt"),
    "tournament_size": ("--tournament-size", int, "contestants per tournament"),
    "elite_fraction": ("--elite-fraction", float, "share of the population kept as elites"),
    "crossover_rate": ("--crossover-rate", float, "probability of uniform crossover"),
    "mutation_rate": ("--mutation-rate", float, "per-gene mutation probability"),
    "initial_mutation_strength": ("--mutation-strength", float, "mutation offset at generation 0"),
    "decay_rate": ("--decay-rate", float, "annealing speed of the mutation strength"),
    "max_retry_attempts": ("--retries", int, "full searches before giving up"),
    "num_workers": ("--workers", int, "worker pool size (0 = synchronous)"),
    "executor_type": ("--executor", str, "'thread' or 'process'"),
    "seed": ("--seed", int, "random seed"),
}


def _parse_param(text: str) -> tuple[str, float]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    try:
        return key.strip(), float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"value of '{key}' must be a number") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="evopack", description="Genetic circle placement inside 2-D domains.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="run the search")
    run.add_argument("config", nargs="?", help="YAML run file")
    run.add_argument("--domain", help="domain type (see 'evopack domains')")
    run.add_argument("--param", action="append", type=_parse_param, default=[], metavar="KEY=VALUE")
    for dest, (flag, kind, help_text) in _GA_FLAGS.items():
        run.add_argument(flag, dest=dest, type=kind, default=None, help=help_text)

    sub.add_parser("domains", help="list domain types and their parameters")
    return parser


def resolve_run_config(args: argparse.Namespace) -> RunConfig:
    overrides = {dest: getattr(args, dest) for dest in _GA_FLAGS if getattr(args, dest) is not None}
    if args.config:
        run = load_run_config(args.config)
        if args.domain:
            run.domain_type = DomainType.from_name(args.domain)
            run.domain_params = {}
        run.domain_params.update(dict(args.param))
        run.ga = dataclasses.replace(run.ga, **overrides)
    else:
        if not args.domain:
            raise ConfigurationError("either a run file or --domain is required")
        run = RunConfig(DomainType.from_name(args.domain), dict(args.param), GAConfig(**overrides))
    check_radius_fits(run.build_domain(), run.ga.radius)
    return run


def report(best: Individual) -> str:
    lines = [f"Best solution fitness: {best.fitness:.6f}"]
    lines.extend(f"  {i:>3}: {p}" for i, p in enumerate(best.genotype))
    gap = min_separation_gap(best.genotype)
    if gap != float("inf"):
        lines.append(f"Minimum separation gap: {gap:.6f}")
    return "\n".join(lines)


def _list_domains() -> str:
    return "\n".join(
        f"{t.menu_id}. {t.display_name:<10} {', '.join(t.required_parameters)}" for t in DomainType
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "domains":
        print(_list_domains())
        return 0

    try:
        run = resolve_run_config(args)
    except (ConfigurationError, OSError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    engine = GAEngine(run.ga, run.build_domain())
    try:
        best = engine.run()
    except SearchNotConvergedError as exc:
        logger.error("%s", exc)
        if exc.best is not None:
            print(report(exc.best))
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1

    print(report(best))
    return 0


if __name__ == "__main__":
    sys.exit(main())
