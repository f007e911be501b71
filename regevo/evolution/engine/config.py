from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ReproductionPolicy(str, Enum):
    """How the non-elite slots of the next generation are filled."""

    MUTATE_ELITE = "mutate_elite"
    MIXED = "mixed"


class ParentSelection(str, Enum):
    """Which elites are drawn as parents for the mutated children."""

    RANDOM = "random"
    ROUND_ROBIN = "round_robin"


class EngineConfig(BaseModel):
    """Configuration options controlling EvolutionEngine behaviour."""

    learning_rate: float = Field(
        default=0.5,
        ge=0,
        lt=1,
        description="Share of the population replaced each round",
    )
    randomize_each_round: bool = Field(
        default=True,
        description="Draw a new test array every round instead of reusing one",
    )
    reproduction: ReproductionPolicy = Field(default=ReproductionPolicy.MUTATE_ELITE)
    parent_selector: ParentSelection = Field(
        default=ParentSelection.RANDOM,
        description="Uniform draws with replacement, or cycling through elites best first",
    )
    random_fraction: float = Field(
        default=0.0,
        ge=0,
        le=1,
        description="Share of replaced slots filled with brand-new programs under MIXED",
    )
    array_size: int = Field(default=8, gt=0)
    value_range: int = Field(default=16, gt=0)
    max_workers: int | None = Field(
        default=None,
        gt=0,
        description="Evaluation threads per round (None = one per CPU, capped by population)",
    )
    seed: int | None = Field(default=None, description="Seed for reproducible runs")
    log_interval: int = Field(default=1, gt=0)

    model_config = ConfigDict(extra="forbid")
