from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
import math
import os
import random
from typing import Sequence

import numpy as np
from loguru import logger
from pydantic import BaseModel

from regevo.evolution.engine.config import EngineConfig, ParentSelection, ReproductionPolicy
from regevo.evolution.engine.metrics import EngineMetrics, PopulationStats
from regevo.evolution.engine.mutation import generate_mutations, generate_random_programs
from regevo.evolution.fitness import FitnessEvaluator, Result, random_array
from regevo.evolution.mutation.base import MutationOperator
from regevo.evolution.mutation.generator import ProgramGenerator
from regevo.evolution.mutation.parent_selector import (
    ParentSelector,
    RandomParentSelector,
    RoundRobinParentSelector,
)
from regevo.evolution.strategies.elite_selectors import EliteSelector, TopKEliteSelector
from regevo.exceptions import EvolutionError
from regevo.programs.instruction_set import Program

__all__ = ["EvolutionEngine", "EvolutionReport"]

_PARENT_SELECTORS: dict[ParentSelection, type[ParentSelector]] = {
    ParentSelection.RANDOM: RandomParentSelector,
    ParentSelection.ROUND_ROBIN: RoundRobinParentSelector,
}


class EvolutionReport(BaseModel):
    """Population quality before and after a run, plus the final population."""

    before: PopulationStats
    after: PopulationStats
    population: list[Program]


class EvolutionEngine:
    """
    Generational evolution loop:
    - each round evaluates every program on one shared, read-only test array;
    - the top ``keep_count`` programs survive unchanged at the front;
    - the remaining slots are refilled from the survivors.
    """

    def __init__(
        self,
        evaluator: FitnessEvaluator,
        generator: ProgramGenerator,
        mutation_operator: MutationOperator,
        config: EngineConfig,
        parent_selector: ParentSelector | None = None,
        elite_selector: EliteSelector | None = None,
    ):
        self.evaluator = evaluator
        self.generator = generator
        self.mutation_operator = mutation_operator
        self.config = config
        self.parent_selector = parent_selector or _PARENT_SELECTORS[config.parent_selector]()
        self.elite_selector = elite_selector or TopKEliteSelector()

        self._rng = random.Random(config.seed)
        self._array_rng = np.random.default_rng(config.seed)
        self._fixed_array: tuple[int, ...] | None = None

        self.metrics = EngineMetrics()

        logger.info(
            "[EvolutionEngine] Init | learning_rate={}, reproduction={}, parents={}, randomize_each_round={}",
            config.learning_rate,
            config.reproduction.value,
            type(self.parent_selector).__name__,
            config.randomize_each_round,
        )

    def keep_count(self, population_size: int) -> int:
        """Number of elites carried over unchanged: ``floor(size * (1 - learning_rate))``."""
        # Rounded first so that e.g. 10 * (1 - 0.9) does not floor to 0.
        return math.floor(round(population_size * (1.0 - self.config.learning_rate), 9))

    def test_array(self) -> tuple[int, ...]:
        """The array for the next evaluation, following the randomization policy."""
        if self.config.randomize_each_round or self._fixed_array is None:
            array = tuple(
                random_array(self._array_rng, self.config.array_size, self.config.value_range)
            )
            if not self.config.randomize_each_round:
                self._fixed_array = array
            return array
        return self._fixed_array

    async def evaluate_population(
        self, population: Sequence[Program], array: Sequence[int]
    ) -> list[Result]:
        """Evaluate every program on *array* in parallel, best first.

        The thread pool lives for this call only. Results are re-sorted by
        score; ties keep population order.
        """
        if not population:
            raise EvolutionError("Cannot evaluate an empty population")
        shared = tuple(array)
        workers = min(len(population), self.config.max_workers or os.cpu_count() or 4)
        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="regevo-eval") as pool:
            results = await asyncio.gather(
                *(
                    loop.run_in_executor(pool, self.evaluator.evaluate, program, shared)
                    for program in population
                )
            )
        self.metrics.programs_evaluated += len(results)
        return sorted(results, key=lambda r: r.score, reverse=True)

    async def assess(self, population: Sequence[Program]) -> PopulationStats:
        results = await self.evaluate_population(population, self.test_array())
        return _stats(results)

    async def evolve_step(self, population: Sequence[Program]) -> list[Program]:
        try:
            return await self._step(population)
        except EvolutionError:
            raise
        except Exception as exc:
            raise EvolutionError(f"Evolution step failed: {exc}") from exc

    async def _step(self, population: Sequence[Program]) -> list[Program]:
        size = len(population)
        keep = self.keep_count(size)
        if keep < 1:
            raise EvolutionError(
                f"learning_rate={self.config.learning_rate} keeps no elites out of {size} programs"
            )

        results = await self.evaluate_population(population, self.test_array())
        elites = self.elite_selector(results, keep)

        remainder = size - len(elites)
        fresh = 0
        if self.config.reproduction is ReproductionPolicy.MIXED:
            fresh = math.floor(remainder * self.config.random_fraction)

        children = generate_mutations(
            elites,
            mutator=self.mutation_operator,
            parent_selector=self.parent_selector,
            limit=remainder - fresh,
            rng=self._rng,
        )
        newcomers = generate_random_programs(self.generator, count=fresh, rng=self._rng)
        next_population = elites + children + newcomers
        if len(next_population) != size:
            raise EvolutionError(
                f"Generation size changed from {size} to {len(next_population)}"
            )

        stats = _stats(results)
        self.metrics.total_generations += 1
        self.metrics.mutations_created += len(children)
        self.metrics.random_programs_created += len(newcomers)
        self.metrics.last_best_score = stats.best
        self.metrics.last_mean_score = stats.mean
        self.metrics.best_scores.append(stats.best)
        self.metrics.last_generation_time = datetime.now(timezone.utc)
        return next_population

    async def run(self, population: Sequence[Program], rounds: int) -> list[Program]:
        """Run exactly *rounds* generations; there is no early stopping."""
        if rounds < 0:
            raise EvolutionError("rounds must be non-negative")
        current = list(population)
        logger.info("[EvolutionEngine] Start | rounds={}, population={}", rounds, len(current))
        for round_no in range(1, rounds + 1):
            current = await self.evolve_step(current)
            if round_no % self.config.log_interval == 0 or round_no == rounds:
                self._log_metrics(round_no, rounds)
        logger.info("[EvolutionEngine] Stopped after {} round(s)", rounds)
        return current

    async def evolve(self, population: Sequence[Program], rounds: int) -> EvolutionReport:
        before = await self.assess(population)
        final = await self.run(population, rounds)
        after = await self.assess(final)
        return EvolutionReport(before=before, after=after, population=final)

    def get_status(self) -> dict[str, object]:
        return dict(self.metrics.to_dict())

    def _log_metrics(self, round_no: int, rounds: int) -> None:
        m = self.get_status()
        metrics_str = " | ".join(
            f"{k}={v:.2f}" if isinstance(v, float) else f"{k}={v}" for k, v in m.items()
        )
        logger.info(f"[EvolutionEngine] Round {round_no}/{rounds} | {metrics_str}")


def _stats(results: list[Result]) -> PopulationStats:
    scores = [r.score for r in results]
    return PopulationStats(best=max(scores), mean=float(np.mean(scores)))
