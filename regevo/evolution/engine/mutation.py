"""Helpers for producing the non-elite part of a generation."""

from __future__ import annotations

import random

from loguru import logger

from regevo.evolution.mutation.base import MutationOperator
from regevo.evolution.mutation.generator import ProgramGenerator
from regevo.evolution.mutation.parent_selector import ParentSelector
from regevo.programs.instruction_set import Program

__all__ = ["generate_mutations", "generate_random_programs"]


def generate_mutations(
    elites: list[Program],
    *,
    mutator: MutationOperator,
    parent_selector: ParentSelector,
    limit: int,
    rng: random.Random,
) -> list[Program]:
    """Mutate up to *limit* parents drawn from *elites*.

    Args:
        elites: Programs to use as parents
        mutator: Mutation operator to use for generating children
        parent_selector: Strategy for selecting parents from elites
        limit: Number of children to produce
        rng: Random source shared by selection and mutation
    Returns:
        Newly created children, never aliasing a parent.
    """
    if not elites or limit <= 0:
        return []

    children: list[Program] = []
    for parent in parent_selector.create_parent_iterator(elites, rng):
        if len(children) >= limit:
            break
        children.append(mutator.mutate(parent, rng))

    if len(children) < limit:
        logger.warning(
            "[mutation] Parent selector exhausted after {} of {} children",
            len(children),
            limit,
        )
    logger.debug("[mutation] Created {} mutations from {} elite(s)", len(children), len(elites))
    return children


def generate_random_programs(
    generator: ProgramGenerator, *, count: int, rng: random.Random
) -> list[Program]:
    return [generator.random_program(rng) for _ in range(max(0, count))]
