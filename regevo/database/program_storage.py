from __future__ import annotations

from abc import ABC, abstractmethod

from regevo.programs.instruction_set import Program


class PopulationStorage(ABC):
    """Abstract interface for persisting an ordered population of :class:`Program` objects."""

    @abstractmethod
    def load(self) -> list[Program]: ...

    @abstractmethod
    def save(self, population: list[Program]) -> None: ...

    @abstractmethod
    def exists(self) -> bool: ...
