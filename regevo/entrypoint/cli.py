#!/usr/bin/env python3
"""
RegEvo command line

Usage:
    regevo generate --file pop.json --count 200 [key=value ...]
    regevo test     --file pop.json [--index 0] [--repeats 100] [key=value ...]
    regevo evolve   --file pop.json --rounds 1000 [key=value ...]
    regevo print    --file pop.json --index 0

Trailing ``key=value`` arguments override ``regevo/config/config.yaml``,
e.g. ``engine.learning_rate=0.3`` or ``machine.mode=strict``.
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from typing import Sequence

import numpy as np
from loguru import logger

from regevo.config import Settings, build_engine, build_evaluator, build_generator, load_settings
from regevo.database import JsonPopulationStorage
from regevo.exceptions import RegEvoError, ValidationError
from regevo.programs.instruction_set import Program
from regevo.utils.logger_setup import setup_logger


def _check_index(population: list[Program], index: int) -> None:
    if not 0 <= index < len(population):
        raise ValidationError(
            f"Index {index} out of range (population has {len(population)} programs)"
        )


def cmd_generate(args: argparse.Namespace, settings: Settings) -> None:
    if args.count <= 0:
        raise ValidationError("--count must be positive")
    storage = JsonPopulationStorage(args.file, mode=settings.machine.mode)
    if storage.exists():
        logger.warning("[cli] Overwriting existing population file {}", args.file)

    generator = build_generator(settings)
    rng = random.Random(settings.engine.seed)
    population = [generator.noop_program()]
    population += [generator.random_program(rng) for _ in range(args.count - 1)]
    storage.save(population)
    print(f"Generated {len(population)} programs into {args.file}")


def cmd_test(args: argparse.Namespace, settings: Settings) -> None:
    if args.repeats <= 0:
        raise ValidationError("--repeats must be positive")
    population = JsonPopulationStorage(args.file, mode=settings.machine.mode).load()
    evaluator = build_evaluator(settings)
    rng = np.random.default_rng(settings.engine.seed)

    indices = list(range(len(population)))
    if args.index is not None:
        _check_index(population, args.index)
        indices = [args.index]

    measurement = evaluator.measure_many(
        [population[i] for i in indices],
        args.repeats,
        rng,
        array_size=settings.engine.array_size,
        value_range=settings.engine.value_range,
    )
    for index, score in zip(indices, measurement.scores):
        print(f"Program {index}: mean score {score:.3f}")
    if len(indices) > 1:
        print(f"Population: mean score {measurement.mean:.3f}")


def cmd_evolve(args: argparse.Namespace, settings: Settings) -> None:
    if args.rounds < 0:
        raise ValidationError("--rounds must be non-negative")
    storage = JsonPopulationStorage(args.file, mode=settings.machine.mode)
    population = storage.load()
    engine = build_engine(settings)

    report = asyncio.run(engine.evolve(population, args.rounds))

    print(f"Before: best {report.before.best:.3f}, mean {report.before.mean:.3f}")
    print(f"After:  best {report.after.best:.3f}, mean {report.after.mean:.3f}")
    storage.save(report.population)


def cmd_print(args: argparse.Namespace, settings: Settings) -> None:
    population = JsonPopulationStorage(args.file, mode=settings.machine.mode).load()
    _check_index(population, args.index)
    print(population[args.index].pretty(), end="")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--file", "-f", required=True, help="Population file (JSON)")
    common.add_argument("--log-level", default=None, help="Override logging.level")
    common.add_argument("--log-dir", default=None, help="Also log to a file in this directory")
    common.add_argument(
        "overrides", nargs="*", metavar="key=value", help="Configuration overrides"
    )

    parser = argparse.ArgumentParser(
        prog="regevo",
        description="Evolve register-machine programs that sort their memory.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", parents=[common], help="Create a random population")
    generate.add_argument("--count", "-n", type=int, required=True, help="Number of programs")
    generate.set_defaults(handler=cmd_generate)

    test = sub.add_parser("test", parents=[common], help="Measure mean scores")
    test.add_argument("--index", "-i", type=int, default=None, help="Only test this program")
    test.add_argument("--repeats", "-r", type=int, default=100, help="Random arrays per program")
    test.set_defaults(handler=cmd_test)

    evolve = sub.add_parser("evolve", parents=[common], help="Run evolution rounds")
    evolve.add_argument("--rounds", "-n", type=int, required=True, help="Number of rounds")
    evolve.set_defaults(handler=cmd_evolve)

    show = sub.add_parser("print", parents=[common], help="Pretty-print one program")
    show.add_argument("--index", "-i", type=int, required=True, help="Program index")
    show.set_defaults(handler=cmd_print)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.overrides)
        setup_logger(
            level=args.log_level or settings.logging.level,
            log_dir=args.log_dir or settings.logging.log_dir,
            rotation=settings.logging.rotation,
            retention=settings.logging.retention,
        )
        args.handler(args, settings)
    except RegEvoError as exc:
        logger.error("[cli] {} failed: {}", args.command, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
