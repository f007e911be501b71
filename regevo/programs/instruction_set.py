"""Instruction set of the sorting register machine.

The machine has three general-purpose registers and a flat integer memory.
Every operand is a single integer: the reserved negative range ``-3..-1``
names the registers and any non-negative value is a literal, read either as
an immediate or as a memory address depending on the operand's position.

Jumps are addressed by signed offsets relative to the jumping instruction.
``LABEL`` survives only as an inert marker (the no-op instruction).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from regevo.exceptions import ProgramValidationError

__all__ = [
    "Opcode",
    "OperandRole",
    "OpcodeSpec",
    "OPCODE_SPECS",
    "R0",
    "R1",
    "R2",
    "REGISTERS",
    "is_register",
    "format_argument",
    "Instruction",
    "Program",
]

R0 = -3
R1 = -2
R2 = -1
REGISTERS: tuple[int, ...] = (R0, R1, R2)
_REGISTER_NAMES = {R0: "R0", R1: "R1", R2: "R2"}


def is_register(arg: int | None) -> bool:
    return arg in _REGISTER_NAMES


def format_argument(arg: int) -> str:
    """Render an operand as ``R0``/``R1``/``R2`` or its decimal literal."""
    return _REGISTER_NAMES.get(arg, str(arg))


class Opcode(str, Enum):
    SET = "SET"
    INC = "INC"
    DEC = "DEC"
    READ = "READ"
    SWAP = "SWAP"
    JLT = "JLT"
    JZ = "JZ"
    JUMP = "JUMP"
    LABEL = "LABEL"


class OperandRole(str, Enum):
    REGISTER = "register"  # written register slot
    IMMEDIATE = "immediate"  # non-negative literal taken as-is
    SOURCE = "source"  # register copy or memory load
    ADDRESS = "address"  # register value or literal, used as a memory index
    VALUE = "value"  # register value or memory cell, compared by jumps


class OpcodeSpec(NamedTuple):
    a: OperandRole | None
    b: OperandRole | None
    has_offset: bool


OPCODE_SPECS: dict[Opcode, OpcodeSpec] = {
    Opcode.SET: OpcodeSpec(OperandRole.REGISTER, OperandRole.IMMEDIATE, False),
    Opcode.INC: OpcodeSpec(OperandRole.REGISTER, None, False),
    Opcode.DEC: OpcodeSpec(OperandRole.REGISTER, None, False),
    Opcode.READ: OpcodeSpec(OperandRole.REGISTER, OperandRole.SOURCE, False),
    Opcode.SWAP: OpcodeSpec(OperandRole.ADDRESS, OperandRole.ADDRESS, False),
    Opcode.JLT: OpcodeSpec(OperandRole.VALUE, OperandRole.VALUE, True),
    Opcode.JZ: OpcodeSpec(OperandRole.VALUE, None, True),
    Opcode.JUMP: OpcodeSpec(None, None, True),
    Opcode.LABEL: OpcodeSpec(None, None, False),
}


class Instruction(BaseModel):
    """A single immutable machine instruction.

    Operands must match the opcode's arity; direct construction raises
    :class:`ProgramValidationError` otherwise.
    """

    op: Opcode = Field(description="Operation performed by the instruction")
    a: int | None = Field(default=None, ge=R0, description="First operand")
    b: int | None = Field(default=None, ge=R0, description="Second operand")
    offset: int | None = Field(
        default=None, description="Signed jump distance relative to this instruction"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise ProgramValidationError(f"Invalid instruction: {exc}") from exc

    @model_validator(mode="after")
    def _check_arity(self) -> "Instruction":
        spec = OPCODE_SPECS[self.op]
        for name, role in (("a", spec.a), ("b", spec.b)):
            value = getattr(self, name)
            if role is None:
                if value is not None:
                    raise ValueError(f"{self.op.value} takes no operand '{name}'")
                continue
            if value is None:
                raise ValueError(f"{self.op.value} requires operand '{name}'")
            if role is OperandRole.IMMEDIATE and is_register(value):
                raise ValueError(
                    f"{self.op.value} operand '{name}' must be a non-negative immediate"
                )
        if spec.has_offset and self.offset is None:
            raise ValueError(f"{self.op.value} requires a jump offset")
        if not spec.has_offset and self.offset is not None:
            raise ValueError(f"{self.op.value} takes no jump offset")
        return self

    @property
    def spec(self) -> OpcodeSpec:
        return OPCODE_SPECS[self.op]

    def pretty(self) -> str:
        """One line: ``OPCODE arg1 arg2 target`` with absent fields omitted."""
        parts = [self.op.value]
        if self.a is not None:
            parts.append(format_argument(self.a))
        if self.b is not None:
            parts.append(format_argument(self.b))
        if self.offset is not None:
            parts.append(f"{self.offset:+d}")
        return " ".join(parts)


class Program(BaseModel):
    """Ordered, fixed-length, immutable sequence of instructions."""

    instructions: tuple[Instruction, ...] = Field(
        default_factory=tuple, description="Instructions in execution order"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise ProgramValidationError(f"Invalid program: {exc}") from exc

    @classmethod
    def noop(cls, length: int) -> "Program":
        """All-LABEL baseline program; running it leaves memory untouched."""
        if length < 0:
            raise ProgramValidationError("Program length must be non-negative")
        return cls(instructions=tuple(Instruction(op=Opcode.LABEL) for _ in range(length)))

    def pretty(self) -> str:
        return "".join(ins.pretty() + "\n" for ins in self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:  # type: ignore[override]
        return iter(self.instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self.instructions[index]
