"""Step-bounded interpreter for the sorting register machine.

Evolved programs are executed unconditionally, so every runtime fault is
contained: out-of-range memory reads yield ``0``, out-of-range swaps are
skipped and jumps leaving the program simply halt it. The only thing that
can stop a program besides falling off its end is the step budget.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, NamedTuple, Sequence

from regevo.exceptions import ProgramExecutionError, ProgramValidationError
from regevo.programs.instruction_set import (
    R0,
    R1,
    R2,
    Instruction,
    Opcode,
    OperandRole,
    Program,
    is_register,
)

__all__ = [
    "ExecutionMode",
    "HaltReason",
    "Registers",
    "ExecutionResult",
    "run",
    "validate_program",
]


class ExecutionMode(str, Enum):
    """How to treat a literal sitting in a register-target slot.

    ``PERMISSIVE`` skips the instruction, ``STRICT`` refuses it.
    """

    PERMISSIVE = "permissive"
    STRICT = "strict"


class HaltReason(str, Enum):
    FELL_OFF = "fell_off"
    BUDGET_EXHAUSTED = "budget_exhausted"


class Registers(NamedTuple):
    r0: int = 0
    r1: int = 0
    r2: int = 0

    def get(self, reg: int) -> int:
        return self[reg - R0]

    def put(self, reg: int, value: int) -> "Registers":
        if reg == R0:
            return self._replace(r0=value)
        if reg == R1:
            return self._replace(r1=value)
        if reg == R2:
            return self._replace(r2=value)
        raise ValueError(f"Not a register: {reg}")


class ExecutionResult(NamedTuple):
    memory: list[int]
    registers: Registers
    steps: int
    pc: int
    halt_reason: HaltReason


def validate_program(program: Program, mode: ExecutionMode) -> None:
    """Static counterpart of the runtime register-target check.

    In strict mode, reject programs whose register slots hold a literal so
    they never reach the interpreter.
    """
    if mode is not ExecutionMode.STRICT:
        return
    for index, ins in enumerate(program):
        if ins.spec.a is OperandRole.REGISTER and not is_register(ins.a):
            raise ProgramValidationError(
                f"Instruction {index} ({ins.pretty()}) targets a non-register"
            )


def _value(arg: int, regs: Registers, memory: list[int]) -> int:
    if is_register(arg):
        return regs.get(arg)
    if 0 <= arg < len(memory):
        return memory[arg]
    return 0


def _address(arg: int, regs: Registers) -> int:
    return regs.get(arg) if is_register(arg) else arg


def _bad_target(ins: Instruction, mode: ExecutionMode) -> bool:
    if is_register(ins.a):
        return False
    if mode is ExecutionMode.STRICT:
        raise ProgramExecutionError(f"Incorrect register argument: {ins.pretty()}")
    return True


# Handlers take (instruction, registers, memory, pc, mode) and return the new
# registers plus the next pc, or None when execution simply continues.
_Handler = Callable[
    [Instruction, Registers, list[int], int, ExecutionMode], tuple[Registers, int | None]
]


def _exec_set(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    if _bad_target(ins, mode):
        return regs, None
    return regs.put(ins.a, ins.b), None


def _exec_read(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    if _bad_target(ins, mode):
        return regs, None
    return regs.put(ins.a, _value(ins.b, regs, memory)), None


def _exec_inc(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    if _bad_target(ins, mode):
        return regs, None
    return regs.put(ins.a, regs.get(ins.a) + 1), None


def _exec_dec(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    if _bad_target(ins, mode):
        return regs, None
    return regs.put(ins.a, regs.get(ins.a) - 1), None


def _exec_swap(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    i = _address(ins.a, regs)
    j = _address(ins.b, regs)
    size = len(memory)
    if 0 <= i < size and 0 <= j < size:
        memory[i], memory[j] = memory[j], memory[i]
    return regs, None


def _exec_jlt(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    if _value(ins.a, regs, memory) < _value(ins.b, regs, memory):
        return regs, pc + ins.offset
    return regs, None


def _exec_jz(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    if _value(ins.a, regs, memory) == 0:
        return regs, pc + ins.offset
    return regs, None


def _exec_jump(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    return regs, pc + ins.offset


def _exec_label(
    ins: Instruction, regs: Registers, memory: list[int], pc: int, mode: ExecutionMode
) -> tuple[Registers, int | None]:
    return regs, None


_HANDLERS: dict[Opcode, _Handler] = {
    Opcode.SET: _exec_set,
    Opcode.READ: _exec_read,
    Opcode.INC: _exec_inc,
    Opcode.DEC: _exec_dec,
    Opcode.SWAP: _exec_swap,
    Opcode.JLT: _exec_jlt,
    Opcode.JZ: _exec_jz,
    Opcode.JUMP: _exec_jump,
    Opcode.LABEL: _exec_label,
}

_missing = set(Opcode) - set(_HANDLERS)
if _missing:
    raise ImportError(f"Interpreter has no handler for {sorted(op.value for op in _missing)}")


def run(
    program: Program,
    memory: Sequence[int],
    step_limit: int,
    mode: ExecutionMode = ExecutionMode.PERMISSIVE,
) -> ExecutionResult:
    """Execute *program* on a private copy of *memory*.

    Every executed instruction costs one step. Execution stops when pc
    leaves ``[0, len(program))`` or after ``step_limit`` steps, whichever
    comes first; neither is an error.
    """
    mem = list(memory)
    regs = Registers()
    instructions = program.instructions
    length = len(instructions)
    pc = 0
    steps = 0

    while 0 <= pc < length and steps < step_limit:
        ins = instructions[pc]
        regs, target = _HANDLERS[ins.op](ins, regs, mem, pc, mode)
        pc = pc + 1 if target is None else target
        steps += 1

    halted = HaltReason.FELL_OFF if not 0 <= pc < length else HaltReason.BUDGET_EXHAUSTED
    return ExecutionResult(memory=mem, registers=regs, steps=steps, pc=pc, halt_reason=halted)
