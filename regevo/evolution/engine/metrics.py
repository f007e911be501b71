from __future__ import annotations

from collections import deque
from datetime import datetime

from pydantic import BaseModel, Field, computed_field


class PopulationStats(BaseModel):
    """Best and mean score of one population evaluation."""

    best: float
    mean: float


class EngineMetrics(BaseModel):
    """Running counters for an EvolutionEngine."""

    total_generations: int = Field(
        default=0, description="Total number of generations run"
    )
    programs_evaluated: int = Field(
        default=0, description="Total number of program evaluations"
    )
    mutations_created: int = Field(
        default=0, description="Total number of mutated children created"
    )
    random_programs_created: int = Field(
        default=0, description="Total number of brand-new programs injected"
    )
    last_best_score: float | None = Field(default=None)
    last_mean_score: float | None = Field(default=None)
    last_generation_time: datetime | None = Field(
        default=None, description="Timestamp of last generation"
    )
    best_scores: deque = Field(
        default_factory=lambda: deque(maxlen=10),
        description="Rolling window of per-generation best scores",
    )

    @computed_field
    @property
    def avg_recent_best(self) -> float:
        """Average best score over the rolling window."""
        return sum(self.best_scores) / max(1, len(self.best_scores))

    def to_dict(self) -> dict[str, int | float | str | None]:
        return {
            "total_generations": self.total_generations,
            "programs_evaluated": self.programs_evaluated,
            "mutations_created": self.mutations_created,
            "random_programs_created": self.random_programs_created,
            "last_best_score": self.last_best_score,
            "last_mean_score": self.last_mean_score,
            "avg_recent_best": self.avg_recent_best,
        }

    model_config = {"arbitrary_types_allowed": True}
