from __future__ import annotations

import math
import random

from loguru import logger

from regevo.evolution.mutation.base import MutationOperator
from regevo.evolution.mutation.generator import ProgramGenerator
from regevo.exceptions import ValidationError
from regevo.programs.instruction_set import Program


class RandomSlotMutationOperator(MutationOperator):
    """Overwrites ``floor(len * mutation_rate)`` slots with fresh instructions.

    Slots are drawn independently per overwrite, so the same slot may be hit
    more than once in a single call.
    """

    def __init__(self, generator: ProgramGenerator, mutation_rate: float):
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValidationError("mutation_rate must lie in [0, 1]")
        self.generator = generator
        self.mutation_rate = mutation_rate
        logger.debug("[RandomSlotMutationOperator] Init | rate={}", mutation_rate)

    def mutation_count(self, length: int) -> int:
        return math.floor(length * self.mutation_rate)

    def mutate(self, program: Program, rng: random.Random) -> Program:
        slots = list(program.instructions)
        if not slots:
            return Program(instructions=())
        for _ in range(self.mutation_count(len(slots))):
            slots[rng.randrange(len(slots))] = self.generator.random_instruction(rng)
        return Program(instructions=tuple(slots))
