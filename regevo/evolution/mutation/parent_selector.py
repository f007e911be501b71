from abc import ABC, abstractmethod
import random
from typing import Iterator, Optional

from regevo.programs.instruction_set import Program


class ParentSelector(ABC):
    """Abstract base class for selecting parents for mutation."""

    @abstractmethod
    def create_parent_iterator(
        self, available_parents: list[Program], rng: random.Random
    ) -> Iterator[Program]:
        """Create an iterator that yields parents to mutate.

        Args:
            available_parents: Programs available for selection
            rng: Random source owned by the caller

        Returns:
            Iterator that yields one selected parent per draw
        """


class RandomParentSelector(ParentSelector):
    """Uniformly draws parents from the available pool, with replacement."""

    def __init__(self, max_selections: Optional[int] = None):
        self.max_selections = max_selections

    def create_parent_iterator(
        self, available_parents: list[Program], rng: random.Random
    ) -> Iterator[Program]:
        if not available_parents:
            return

        count = 0
        while self.max_selections is None or count < self.max_selections:
            yield available_parents[rng.randrange(len(available_parents))]
            count += 1


class RoundRobinParentSelector(ParentSelector):
    """Cycles through the pool in order, best first."""

    def create_parent_iterator(
        self, available_parents: list[Program], rng: random.Random
    ) -> Iterator[Program]:
        if not available_parents:
            return
        while True:
            yield from available_parents
