"""Tiny factories turning :class:`Settings` into runtime components."""

from regevo.config.settings import Settings
from regevo.evolution.engine import EvolutionEngine
from regevo.evolution.fitness import FitnessEvaluator
from regevo.evolution.mutation import ProgramGenerator, RandomSlotMutationOperator


def build_evaluator(settings: Settings) -> FitnessEvaluator:
    return FitnessEvaluator(
        step_limit=settings.machine.step_limit,
        memory_size=settings.machine.memory_size,
        rule=settings.fitness.rule,
        mode=settings.machine.mode,
    )


def build_generator(settings: Settings) -> ProgramGenerator:
    """Addresses and immediates span the whole memory, scratch cells included."""
    return ProgramGenerator(
        program_length=settings.generator.program_length,
        address_range=settings.machine.memory_size,
        immediate_range=settings.machine.memory_size,
        max_jump_offset=settings.generator.max_jump_offset,
        opcode_weights=settings.generator.opcode_weights,
    )


def build_engine(settings: Settings) -> EvolutionEngine:
    generator = build_generator(settings)
    return EvolutionEngine(
        evaluator=build_evaluator(settings),
        generator=generator,
        mutation_operator=RandomSlotMutationOperator(
            generator, settings.mutation.mutation_rate
        ),
        config=settings.engine,
    )
