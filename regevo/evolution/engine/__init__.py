from __future__ import annotations

from regevo.evolution.engine.config import EngineConfig, ParentSelection, ReproductionPolicy
from regevo.evolution.engine.core import EvolutionEngine, EvolutionReport
from regevo.evolution.engine.metrics import EngineMetrics, PopulationStats
