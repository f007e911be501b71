from abc import ABC, abstractmethod

from loguru import logger

from regevo.evolution.fitness import Result
from regevo.programs.instruction_set import Program


class EliteSelector(ABC):
    @abstractmethod
    def __call__(self, results: list[Result], total: int) -> list[Program]:
        pass


class TopKEliteSelector(EliteSelector):
    """Keeps the *total* highest-scoring programs, best first.

    Ties keep their incoming order, so a stable pre-sort of the results is
    preserved.
    """

    def __call__(self, results: list[Result], total: int) -> list[Program]:
        ranked = sorted(results, key=lambda r: r.score, reverse=True)
        if len(ranked) <= total:
            logger.debug(
                "[TopKEliteSelector] Returning all {} programs (requested {})",
                len(ranked),
                total,
            )
        return [r.program for r in ranked[:total]]
