from __future__ import annotations

import logging
import numbers
import os
import pickle
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, TypeVar, cast

import numpy as np

from evopack.core.errors import ConfigurationError
from evopack.core.fitness import HASHING_THRESHOLD, FitnessEvaluator
from evopack.core.genotype import PointGenotype
from evopack.core.individual import Individual, Population, best_of
from evopack.domains.base import Domain
from evopack.operators.crossover import CrossoverOperator, UniformCrossover
from evopack.operators.mutation import AdaptiveCreepMutation, MutationOperator
from evopack.operators.selection import Elitism, TournamentSelection

T = TypeVar("T")
R = TypeVar("R")

# ---------------------------------------------------------------------------
# Engine config & stats
# ---------------------------------------------------------------------------

MAX_RETRY_ATTEMPTS = 3

_INT_FIELDS = (
    "population_size",
    "individual_size",
    "generations",
    "tournament_size",
    "max_retry_attempts",
    "hashing_threshold",
    "num_workers",
    "seed",
)
_OPTIONAL_FIELDS = frozenset({"num_workers", "seed"})
_REAL_FIELDS = (
    "radius",
    "elite_fraction",
    "crossover_rate",
    "mutation_rate",
    "initial_mutation_strength",
    "decay_rate",
)


@dataclass
class GAConfig:
    population_size: int = 100
    individual_size: int = 10
    generations: int = 200
    radius: float = 1.0
    tournament_size: int = 3
    elite_fraction: float = 0.05
    crossover_rate: float = 0.9
    mutation_rate: float = 0.1
    initial_mutation_strength: float = 1.0
    decay_rate: float = 5.0
    max_retry_attempts: int = MAX_RETRY_ATTEMPTS
    hashing_threshold: int = HASHING_THRESHOLD
    num_workers: int | None = 0  # 0/None/1 => synchronous; >1 => use pool
    executor_type: str = "thread"  # 'thread' | 'process'
    seed: int | None = None
    # progress callbacks; exceptions raised inside them are logged and ignored
    on_run_start: Callable[[GAConfig], None] | None = field(default=None, repr=False)
    on_retry: Callable[[int, int, float], None] | None = field(default=None, repr=False)
    on_success: Callable[[int, float], None] | None = field(default=None, repr=False)
    on_failure: Callable[[int, float, float], None] | None = field(default=None, repr=False)
    on_generation_end: Callable[[GAStats], None] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:  # noqa: PLR0912
        """Validate configuration parameters early to fail fast.

        Rules
        -----
        - population_size, individual_size, generations > 0
        - 1 <= tournament_size <= population_size
        - 0 < elite_fraction <= 1
        - crossover_rate, mutation_rate in [0,1]
        - initial_mutation_strength > 0, decay_rate >= 0, radius > 0
        - max_retry_attempts >= 1, hashing_threshold >= 0
        - num_workers is None or >= 0
        - executor_type in {"thread", "process"}
        - seed is None or >= 0

        Types are checked first: counts are ``int`` (``bool`` rejected), rates
        and sizes are real numbers, ``seed``/``num_workers`` are ``int`` or None.
        """
        self._check_types()
        if self.population_size <= 0:
            raise ConfigurationError("population_size must be > 0")
        if self.individual_size <= 0:
            raise ConfigurationError("individual_size must be > 0")
        if self.generations <= 0:
            raise ConfigurationError("generations must be > 0")
        if not (1 <= self.tournament_size <= self.population_size):
            raise ConfigurationError("tournament_size must be in [1, population_size]")
        if not (0.0 < self.elite_fraction <= 1.0):
            raise ConfigurationError("elite_fraction must be in (0,1]")
        if not (0.0 <= self.crossover_rate <= 1.0):
            raise ConfigurationError("crossover_rate must be in [0,1]")
        if not (0.0 <= self.mutation_rate <= 1.0):
            raise ConfigurationError("mutation_rate must be in [0,1]")
        if self.initial_mutation_strength <= 0:
            raise ConfigurationError("initial_mutation_strength must be > 0")
        if self.decay_rate < 0:
            raise ConfigurationError("decay_rate must be >= 0")
        if self.radius <= 0:
            raise ConfigurationError("radius must be > 0")
        if self.max_retry_attempts < 1:
            raise ConfigurationError("max_retry_attempts must be >= 1")
        if self.hashing_threshold < 0:
            raise ConfigurationError("hashing_threshold must be >= 0")
        if self.num_workers is not None and self.num_workers < 0:
            raise ConfigurationError("num_workers must be >= 0 or None")
        if self.executor_type not in {"thread", "process"}:
            raise ConfigurationError("executor_type must be one of {'thread','process'}")
        if self.seed is not None and self.seed < 0:
            raise ConfigurationError("seed must be >= 0 if provided")

    def _check_types(self) -> None:
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if value is None and name in _OPTIONAL_FIELDS:
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        for name in _REAL_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
        if not isinstance(self.executor_type, str):
            raise ConfigurationError(f"executor_type must be a string, got {self.executor_type!r}")
        for name in ("on_run_start", "on_retry", "on_success", "on_failure", "on_generation_end"):
            callback = getattr(self, name)
            if callback is not None and not callable(callback):
                raise ConfigurationError(f"{name} must be callable or None")

    @property
    def elite_count(self) -> int:
        return max(1, int(self.population_size * self.elite_fraction))


@dataclass
class GAStats:
    attempt: int = 0
    generation: int = 0
    evaluations: int = 0
    best_fitness: float = float("-inf")
    mean_fitness: float = float("-inf")
    elapsed_seconds: float = 0.0
    history: list[dict[str, Any]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GAEngineError(RuntimeError):
    pass


class SearchNotConvergedError(GAEngineError):
    """Every attempt ended with a best individual that violates the domain."""

    def __init__(self, attempts: int, best_fitness: float, elapsed_seconds: float, best: Individual | None = None):
        self.attempts = attempts
        self.best_fitness = best_fitness
        self.elapsed_seconds = elapsed_seconds
        self.best = best
        super().__init__(
            f"Search did not converge to a feasible solution after {attempts} attempt(s) "
            f"({elapsed_seconds:.2f} s total). Best fitness: {best_fitness:.6f}. "
            "Try more generations or looser constraints."
        )


class SearchCancelledError(GAEngineError):
    pass


# ---------------------------------------------------------------------------
# Picklable workers
# ---------------------------------------------------------------------------


class _ChunkEvaluator:
    """Evaluate a chunk of individuals; top-level for process pool pickling."""

    def __init__(self, evaluator: Callable[[Individual], float]):
        self.evaluator = evaluator

    def __call__(self, individuals: Sequence[Individual]) -> list[float]:
        return [float(self.evaluator(ind)) for ind in individuals]


class _ChunkBreeder:
    """Build, mutate and evaluate one chunk of children from a frozen parent generation.

    Every child gets its own generator seeded from its own ``SeedSequence``, so the
    result does not depend on which worker runs which chunk.
    """

    def __init__(
        self,
        parents: tuple[Individual, ...],
        selection: TournamentSelection,
        crossover: CrossoverOperator,
        mutation: MutationOperator,
        evaluator: Callable[[Individual], float],
        generation: int,
    ):
        self.parents = parents
        self.selection = selection
        self.crossover = crossover
        self.mutation = mutation
        self.evaluator = evaluator
        self.generation = generation

    def __call__(self, seeds: Sequence[np.random.SeedSequence]) -> list[Individual]:
        children: list[Individual] = []
        for seed in seeds:
            rng = np.random.default_rng(seed)
            mom, dad = self.selection.select_pair(self.parents, rng)
            genotype = self.crossover.crossover(mom.genotype, dad.genotype, rng)
            genotype = self.mutation.mutate(genotype, self.generation, rng)
            child = Individual(genotype)
            child.fitness = float(self.evaluator(child))
            children.append(child)
        return children


def _chunks(items: Sequence[T], n_chunks: int) -> list[Sequence[T]]:
    n_chunks = max(1, min(n_chunks, len(items)))
    size, extra = divmod(len(items), n_chunks)
    out: list[Sequence[T]] = []
    start = 0
    for i in range(n_chunks):
        stop = start + size + (1 if i < extra else 0)
        out.append(items[start:stop])
        start = stop
    return out


# ---------------------------------------------------------------------------
# GAEngine
# ---------------------------------------------------------------------------


class GAEngine:
    """Genetic search for a non-overlapping placement of circles inside a domain.

    Operators default to the ones described by ``config``; any of them can be
    replaced by passing an instance.
    """

    def __init__(  # noqa: PLR0913
        self,
        config: GAConfig,
        domain: Domain,
        evaluator: Callable[[Individual], float] | None = None,
        selection: TournamentSelection | None = None,
        elitism: Elitism | None = None,
        crossover: CrossoverOperator | None = None,
        mutation: MutationOperator | None = None,
        executor: Executor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.domain = domain
        self._seed_sequence = np.random.SeedSequence(config.seed)
        # main-thread generator: initial sampling and default operator RNG
        self.rng = np.random.default_rng(self._seed_sequence.spawn(1)[0])

        self.evaluator = evaluator or FitnessEvaluator(
            domain, max_radius=config.radius, hashing_threshold=config.hashing_threshold
        )
        self.selection = selection or TournamentSelection(k=config.tournament_size, rng=self.rng)
        self.elitism = elitism or Elitism(fraction=config.elite_fraction)
        self.crossover = crossover or UniformCrossover(probability=config.crossover_rate, rng=self.rng)
        self.mutation = mutation or AdaptiveCreepMutation(
            probability=config.mutation_rate,
            initial_strength=config.initial_mutation_strength,
            bounds=tuple(domain.bounding_box()),
            total_generations=config.generations,
            decay_rate=config.decay_rate,
            rng=self.rng,
        )
        if self.selection.k > config.population_size:
            raise ConfigurationError("tournament size cannot exceed population_size")

        self._external_executor = executor
        self._executor: Executor | None = None
        self._executor_ready = False

        self.population: Population = cast(Population, [])
        self.generation: int = 0
        self.best: Individual | None = None  # best across all attempts
        self.stats = GAStats()

        self._stop_requested = threading.Event()
        self.logger = logger or logging.getLogger("evopack.engine")

    # -----------------------------
    # Public API
    # -----------------------------

    def run(self) -> Individual:
        """Search with retries and return a copy of a feasible best individual.

        Raises
        ------
        SearchNotConvergedError
            No attempt produced a best individual that satisfies the domain.
        SearchCancelledError
            :meth:`stop` was called; checked before each attempt.
        """
        cfg = self.config
        self._notify(cfg.on_run_start, cfg)
        self.logger.info(
            "Starting search: %d generations x %d individuals of %d genes (radius %.4g) on %r",
            cfg.generations,
            cfg.population_size,
            cfg.individual_size,
            cfg.radius,
            self.domain,
        )

        total_elapsed = 0.0
        self._prepare_executor()
        try:
            for attempt in range(1, cfg.max_retry_attempts + 1):
                if self._stop_requested.is_set():
                    raise SearchCancelledError(f"Search cancelled before attempt {attempt}.")
                self.stats.attempt = attempt
                started = time.perf_counter()
                candidate = self._search()
                elapsed = time.perf_counter() - started
                total_elapsed += elapsed
                self.stats.elapsed_seconds = total_elapsed

                if self.best is None or candidate.fitness > self.best.fitness:
                    self.best = candidate.copy()

                if self.domain.is_valid_individual(candidate):
                    self.logger.info(
                        "Feasible solution found at attempt %d (fitness=%.6f, %.2f s)",
                        attempt,
                        candidate.fitness,
                        total_elapsed,
                    )
                    self._notify(cfg.on_success, attempt, total_elapsed)
                    return candidate.copy()

                self.logger.warning(
                    "Attempt %d of %d produced an infeasible solution (fitness=%.6f, %.2f s)",
                    attempt,
                    cfg.max_retry_attempts,
                    candidate.fitness,
                    elapsed,
                )
                self._notify(cfg.on_retry, attempt, cfg.max_retry_attempts, elapsed)
        finally:
            self._shutdown_executor()

        best_fitness = self.best.fitness if self.best is not None else float("-inf")
        self.logger.error(
            "No feasible solution after %d attempts (%.2f s); best fitness %.6f",
            cfg.max_retry_attempts,
            total_elapsed,
            best_fitness,
        )
        self._notify(cfg.on_failure, cfg.max_retry_attempts, best_fitness, total_elapsed)
        raise SearchNotConvergedError(
            attempts=cfg.max_retry_attempts,
            best_fitness=best_fitness,
            elapsed_seconds=total_elapsed,
            best=self.best.copy() if self.best is not None else None,
        )

    def run_once(self) -> Individual:
        """Run a single generational search without the feasibility retry loop."""
        if self._executor_ready:
            return self._search()
        self._prepare_executor()
        try:
            return self._search()
        finally:
            self._shutdown_executor()

    def stop(self) -> None:
        """Request cancellation; honoured before the next attempt starts."""
        self._stop_requested.set()

    # -----------------------------
    # Generational loop
    # -----------------------------

    def _search(self) -> Individual:
        cfg = self.config
        self.generation = 0
        self.population = self._first_generation()
        self._evaluate(self.population)
        self.stats.evaluations += len(self.population)

        record = best_of(self.population).copy()
        self._update_stats(record)

        for gen in range(cfg.generations):
            # previous generation is frozen from here until the barrier below
            parents = tuple(self.population)
            elites = [ind.copy() for ind in self.elitism.select(parents)]
            children = self._breed(parents, cfg.population_size - len(elites), gen)
            self.stats.evaluations += len(children)

            new_generation = Population(elites + children)
            if len(new_generation) != cfg.population_size:
                raise GAEngineError(
                    f"Generation {gen + 1} has {len(new_generation)} individuals, expected {cfg.population_size}."
                )
            self.population = new_generation
            self.generation = gen + 1

            king = best_of(self.population)
            if king.fitness > record.fitness:
                record = king.copy()
            self._update_stats(record)

        return record.copy()

    def _first_generation(self) -> Population:
        cfg = self.config
        bounds = tuple(self.domain.bounding_box())
        return Individual.create_population(
            lambda: PointGenotype.random(cfg.individual_size, bounds, cfg.radius, rng=self.rng),
            cfg.population_size,
        )

    def _breed(self, parents: tuple[Individual, ...], n_children: int, generation: int) -> list[Individual]:
        if n_children <= 0:
            return []
        breeder = _ChunkBreeder(parents, self.selection, self.crossover, self.mutation, self.evaluator, generation)
        seeds = self._seed_sequence.spawn(n_children)
        return [child for chunk in self._map(breeder, _chunks(seeds, self._n_chunks())) for child in chunk]

    def _evaluate(self, individuals: Sequence[Individual]) -> None:
        chunks = _chunks(individuals, self._n_chunks())
        results = self._map(_ChunkEvaluator(self.evaluator), chunks)
        for chunk, scores in zip(chunks, results, strict=True):
            for ind, score in zip(chunk, scores, strict=True):
                ind.fitness = score

    def _update_stats(self, record: Individual) -> None:
        scores = [ind.fitness for ind in self.population]
        self.stats.generation = self.generation
        self.stats.best_fitness = record.fitness
        self.stats.mean_fitness = sum(scores) / len(scores)
        snapshot = {
            "attempt": self.stats.attempt,
            "generation": self.generation,
            "best": record.fitness,
            "generation_best": max(scores),
            "mean": self.stats.mean_fitness,
            "evaluations": self.stats.evaluations,
            "time": time.time(),
        }
        self.stats.history.append(snapshot)
        self.logger.debug(
            "Generation %d stats: best=%.6f mean=%.6f evals=%d",
            self.generation,
            self.stats.best_fitness,
            self.stats.mean_fitness,
            self.stats.evaluations,
        )
        self._notify(self.config.on_generation_end, self.stats)

    # -----------------------------
    # Internal helpers
    # -----------------------------

    def _n_chunks(self) -> int:
        if self._executor is None:
            return 1
        if self.config.num_workers:
            return self.config.num_workers
        return os.cpu_count() or 1

    def _map(self, fn: Callable[[T], R], chunks: Sequence[T]) -> list[R]:
        if self._executor is None:
            return [fn(chunk) for chunk in chunks]
        # list() waits for every chunk: generation barrier
        return list(self._executor.map(fn, chunks))

    def _prepare_executor(self) -> None:
        self._executor_ready = True
        if self._external_executor is not None:
            self._executor = self._external_executor
            self.logger.info("Using external executor provided by caller")
            return

        num_workers = self.config.num_workers
        if not num_workers or num_workers <= 1:
            self._executor = None
            self.logger.info("Running synchronously (no executor)")
            return

        if self.config.executor_type == "process" and self._workers_picklable():
            self._executor = ProcessPoolExecutor(max_workers=num_workers)
            self.logger.info("ProcessPoolExecutor prepared with %d workers", num_workers)
            return

        self._executor = ThreadPoolExecutor(max_workers=num_workers)
        if self.config.executor_type == "process":
            self.logger.warning(
                "Evaluator or operators not picklable: falling back to ThreadPoolExecutor to avoid pickling errors."
            )
        else:
            self.logger.info("ThreadPoolExecutor prepared with %d workers", num_workers)

    def _workers_picklable(self) -> bool:
        try:
            pickle.dumps((self.evaluator, self.selection, self.crossover, self.mutation))
        except (pickle.PicklingError, TypeError, AttributeError):
            return False
        return True

    def _shutdown_executor(self) -> None:
        executor, self._executor = self._executor, None
        self._executor_ready = False
        if executor is not None and executor is not self._external_executor:
            executor.shutdown(wait=True)

    def _notify(self, callback: Callable[..., Any] | None, *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            self.logger.exception("Progress callback %r failed", callback)
