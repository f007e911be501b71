"""Random construction of syntactically valid programs."""

from __future__ import annotations

import random
from typing import Mapping

from loguru import logger

from regevo.exceptions import ValidationError
from regevo.programs.instruction_set import (
    OPCODE_SPECS,
    REGISTERS,
    Instruction,
    Opcode,
    OperandRole,
    Program,
)

__all__ = ["ProgramGenerator", "DEFAULT_OPCODE_WEIGHTS"]

DEFAULT_OPCODE_WEIGHTS: dict[Opcode, float] = {
    Opcode.SET: 1.0,
    Opcode.INC: 1.0,
    Opcode.DEC: 1.0,
    Opcode.READ: 1.0,
    Opcode.SWAP: 3.0,
    Opcode.JLT: 2.0,
    Opcode.JZ: 1.0,
    Opcode.JUMP: 1.0,
    Opcode.LABEL: 1.0,
}


class ProgramGenerator:
    """Draws instructions from a weighted subset of the instruction set.

    Opcodes with zero weight are disabled. Operands are drawn according to
    their role so every produced instruction passes structural validation;
    addresses stay inside ``[0, address_range)`` and jump offsets inside
    ``[-max_jump_offset, max_jump_offset]``.
    """

    def __init__(
        self,
        *,
        program_length: int,
        address_range: int,
        immediate_range: int | None = None,
        max_jump_offset: int | None = None,
        opcode_weights: Mapping[Opcode, float] | None = None,
    ):
        if program_length <= 0:
            raise ValidationError("program_length must be positive")
        if address_range <= 0:
            raise ValidationError("address_range must be positive")

        weights = dict(DEFAULT_OPCODE_WEIGHTS if opcode_weights is None else opcode_weights)
        if any(w < 0 for w in weights.values()):
            raise ValidationError("Opcode weights must be non-negative")
        enabled = {Opcode(op): float(w) for op, w in weights.items() if w > 0}
        if not enabled:
            raise ValidationError("At least one opcode must have a positive weight")

        self.program_length = program_length
        self.address_range = address_range
        self.immediate_range = address_range if immediate_range is None else immediate_range
        self.max_jump_offset = program_length if max_jump_offset is None else max_jump_offset
        self._opcodes = list(enabled)
        self._weights = list(enabled.values())

        logger.debug(
            "[ProgramGenerator] Init | length={}, opcodes={}",
            program_length,
            ",".join(op.value for op in self._opcodes),
        )

    @property
    def enabled_opcodes(self) -> list[Opcode]:
        return list(self._opcodes)

    def _operand(self, role: OperandRole, rng: random.Random) -> int:
        if role is OperandRole.REGISTER:
            return rng.choice(REGISTERS)
        if role is OperandRole.IMMEDIATE:
            return rng.randrange(self.immediate_range)
        # Any of the three registers or one memory address, equally likely.
        pick = rng.randrange(len(REGISTERS) + 1)
        if pick < len(REGISTERS):
            return REGISTERS[pick]
        return rng.randrange(self.address_range)

    def random_instruction(self, rng: random.Random) -> Instruction:
        op = rng.choices(self._opcodes, weights=self._weights, k=1)[0]
        spec = OPCODE_SPECS[op]
        return Instruction(
            op=op,
            a=self._operand(spec.a, rng) if spec.a is not None else None,
            b=self._operand(spec.b, rng) if spec.b is not None else None,
            offset=(
                rng.randint(-self.max_jump_offset, self.max_jump_offset)
                if spec.has_offset
                else None
            ),
        )

    def random_program(self, rng: random.Random, length: int | None = None) -> Program:
        length = self.program_length if length is None else length
        return Program(instructions=tuple(self.random_instruction(rng) for _ in range(length)))

    def noop_program(self, length: int | None = None) -> Program:
        return Program.noop(self.program_length if length is None else length)
