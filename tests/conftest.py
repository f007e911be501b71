import random
import sys

from loguru import logger
import pytest

from regevo.evolution.fitness import FitnessEvaluator, ScoringRule
from regevo.evolution.mutation import ProgramGenerator
from regevo.programs import R0, Instruction, Opcode, Program


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    # CLI runs install sinks bound to captured streams
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def bubble_program() -> Program:
    """Two compare-and-swap passes over three cells, counted down in R0."""
    return Program(
        instructions=(
            Instruction(op=Opcode.SET, a=R0, b=2),
            Instruction(op=Opcode.JLT, a=1, b=0, offset=2),
            Instruction(op=Opcode.JUMP, offset=2),
            Instruction(op=Opcode.SWAP, a=0, b=1),
            Instruction(op=Opcode.JLT, a=2, b=1, offset=2),
            Instruction(op=Opcode.JUMP, offset=2),
            Instruction(op=Opcode.SWAP, a=1, b=2),
            Instruction(op=Opcode.DEC, a=R0),
            Instruction(op=Opcode.JZ, a=R0, offset=2),
            Instruction(op=Opcode.JUMP, offset=-8),
        )
    )


@pytest.fixture
def evaluator() -> FitnessEvaluator:
    return FitnessEvaluator(step_limit=256, memory_size=8, rule=ScoringRule.PRESERVING)


@pytest.fixture
def generator() -> ProgramGenerator:
    return ProgramGenerator(program_length=16, address_range=8)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
