"""Sortedness fitness for register-machine programs."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from regevo.exceptions import ValidationError
from regevo.programs.instruction_set import Program
from regevo.programs.interpreter import ExecutionMode, ExecutionResult, run

__all__ = [
    "ScoringRule",
    "Result",
    "Measurement",
    "FitnessEvaluator",
    "score_memory",
    "random_array",
]


class ScoringRule(str, Enum):
    """``SORTEDNESS`` counts descents only; ``PRESERVING`` also charges for
    every value gained or lost inside the input window."""

    SORTEDNESS = "sortedness"
    PRESERVING = "preserving"


class Result(BaseModel):
    """A program paired with the score it earned."""

    program: Program
    score: float = Field(le=0, description="0 is a perfect result")

    model_config = ConfigDict(frozen=True)


class Measurement(BaseModel):
    """Per-program mean scores of a population and their overall mean."""

    scores: list[float] = Field(description="Mean score of each program, in input order")
    mean: float


def score_memory(
    original: Sequence[int],
    memory: Sequence[int],
    rule: ScoringRule = ScoringRule.PRESERVING,
) -> float:
    """Score the first ``len(original)`` cells of *memory* against *original*.

    -1 for each adjacent pair inside the window where the right element is
    strictly smaller than the left. Under ``PRESERVING`` the per-value count
    difference between the input and the output window is subtracted too.
    """
    n = len(original)
    window = list(memory[:n])
    score = 0.0
    for i in range(len(window) - 1):
        if window[i + 1] < window[i]:
            score -= 1.0

    if rule is ScoringRule.PRESERVING:
        before = Counter(original)
        after = Counter(window)
        for value in before.keys() | after.keys():
            score -= abs(before[value] - after[value])
    return score


def random_array(rng: np.random.Generator, size: int, value_range: int) -> list[int]:
    """Draw *size* integers uniformly from ``[0, value_range)``."""
    return [int(v) for v in rng.integers(0, value_range, size=size)]


class FitnessEvaluator:
    """Runs a program on a fresh memory buffer and scores the outcome."""

    def __init__(
        self,
        *,
        step_limit: int,
        memory_size: int,
        rule: ScoringRule = ScoringRule.PRESERVING,
        mode: ExecutionMode = ExecutionMode.PERMISSIVE,
    ):
        if memory_size <= 0:
            raise ValidationError("memory_size must be positive")
        self.step_limit = step_limit
        self.memory_size = memory_size
        self.rule = rule
        self.mode = mode

    def execute(self, program: Program, array: Sequence[int]) -> ExecutionResult:
        if len(array) > self.memory_size:
            raise ValidationError(
                f"Array of length {len(array)} does not fit in memory of size {self.memory_size}"
            )
        memory = [0] * self.memory_size
        memory[: len(array)] = array
        return run(program, memory, self.step_limit, self.mode)

    def evaluate(self, program: Program, array: Sequence[int]) -> Result:
        execution = self.execute(program, array)
        return Result(program=program, score=score_memory(array, execution.memory, self.rule))

    def measure(
        self,
        program: Program,
        count: int,
        rng: np.random.Generator,
        *,
        array_size: int,
        value_range: int,
    ) -> float:
        """Mean score of *program* over *count* freshly drawn arrays."""
        if count <= 0:
            raise ValidationError("count must be positive")
        scores = [
            self.evaluate(program, random_array(rng, array_size, value_range)).score
            for _ in range(count)
        ]
        return float(np.mean(scores))

    def measure_many(
        self,
        programs: Sequence[Program],
        count: int,
        rng: np.random.Generator,
        *,
        array_size: int,
        value_range: int,
    ) -> Measurement:
        if not programs:
            raise ValidationError("No programs to measure")
        scores = [
            self.measure(p, count, rng, array_size=array_size, value_range=value_range)
            for p in programs
        ]
        return Measurement(scores=scores, mean=float(np.mean(scores)))
