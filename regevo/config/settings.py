"""Validated run settings composed from ``config.yaml`` plus overrides."""

from __future__ import annotations

from typing import Sequence

from hydra import compose, initialize_config_module
from hydra.errors import HydraException
from loguru import logger
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from regevo.evolution.engine.config import EngineConfig
from regevo.evolution.fitness import ScoringRule
from regevo.evolution.mutation.generator import DEFAULT_OPCODE_WEIGHTS
from regevo.exceptions import ConfigurationError
from regevo.programs.instruction_set import Opcode
from regevo.programs.interpreter import ExecutionMode

CONFIG_MODULE = "regevo.config"
CONFIG_NAME = "config"


class MachineSettings(BaseModel):
    memory_size: int = Field(default=8, gt=0)
    step_limit: int = Field(default=256, ge=0, description="Step budget per evaluation")
    mode: ExecutionMode = Field(default=ExecutionMode.PERMISSIVE)

    model_config = ConfigDict(extra="forbid")


class FitnessSettings(BaseModel):
    rule: ScoringRule = Field(default=ScoringRule.PRESERVING)

    model_config = ConfigDict(extra="forbid")


class GeneratorSettings(BaseModel):
    program_length: int = Field(default=32, gt=0)
    max_jump_offset: int | None = Field(
        default=None, ge=0, description="Largest jump distance drawn (None = program length)"
    )
    opcode_weights: dict[Opcode, float] = Field(
        default_factory=lambda: dict(DEFAULT_OPCODE_WEIGHTS)
    )

    model_config = ConfigDict(extra="forbid")


class MutationSettings(BaseModel):
    mutation_rate: float = Field(default=0.1, ge=0, le=1)

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO")
    log_dir: str | None = Field(default=None)
    rotation: str = Field(default="50 MB")
    retention: str = Field(default="30 days")

    model_config = ConfigDict(extra="forbid")


class Settings(BaseModel):
    """Everything a CLI command needs to build its components."""

    machine: MachineSettings = Field(default_factory=MachineSettings)
    fitness: FitnessSettings = Field(default_factory=FitnessSettings)
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    mutation: MutationSettings = Field(default_factory=MutationSettings)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _array_fits_memory(self) -> "Settings":
        if self.engine.array_size > self.machine.memory_size:
            raise ValueError(
                f"engine.array_size={self.engine.array_size} exceeds "
                f"machine.memory_size={self.machine.memory_size}"
            )
        return self


def load_settings(overrides: Sequence[str] = ()) -> Settings:
    """Compose the packaged defaults with ``key=value`` overrides and validate them."""
    try:
        with initialize_config_module(config_module=CONFIG_MODULE, version_base=None):
            cfg = compose(config_name=CONFIG_NAME, overrides=list(overrides))
        data = OmegaConf.to_container(cfg, resolve=True)
    except (HydraException, OmegaConfBaseException) as exc:
        raise ConfigurationError(f"Cannot compose configuration: {exc}") from exc

    try:
        settings = Settings.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    logger.debug("[config] Loaded settings with overrides={}", list(overrides))
    return settings
