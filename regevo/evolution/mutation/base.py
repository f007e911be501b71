from abc import ABC, abstractmethod
import random

from regevo.programs.instruction_set import Program


class MutationOperator(ABC):
    """Abstract mutation operator that produces a child program from a parent."""

    @abstractmethod
    def mutate(self, program: Program, rng: random.Random) -> Program:
        """Return a mutated copy of *program*.

        Implementations must never modify *program* itself.
        """
