from regevo.evolution.mutation.base import MutationOperator
from regevo.evolution.mutation.generator import DEFAULT_OPCODE_WEIGHTS, ProgramGenerator
from regevo.evolution.mutation.parent_selector import (
    ParentSelector,
    RandomParentSelector,
    RoundRobinParentSelector,
)
from regevo.evolution.mutation.random_slot import RandomSlotMutationOperator

__all__ = [
    "DEFAULT_OPCODE_WEIGHTS",
    "MutationOperator",
    "ParentSelector",
    "ProgramGenerator",
    "RandomParentSelector",
    "RandomSlotMutationOperator",
    "RoundRobinParentSelector",
]
