import random
from typing import get_type_hints

import pytest

from regevo.exceptions import ProgramExecutionError, ProgramValidationError
from regevo.programs import (
    R0,
    R1,
    R2,
    ExecutionMode,
    HaltReason,
    Instruction,
    Opcode,
    Program,
    Registers,
    run,
    validate_program,
)
from regevo.programs.interpreter import _HANDLERS


def prog(*instructions: Instruction) -> Program:
    return Program(instructions=instructions)


def test_noop_leaves_memory_and_registers_untouched():
    memory = [3, 1, 2, 0]
    result = run(Program.noop(5), memory, step_limit=100)
    assert result.memory == [3, 1, 2, 0]
    assert result.registers == Registers(0, 0, 0)
    assert result.steps == 5
    assert result.halt_reason is HaltReason.FELL_OFF


def test_run_does_not_mutate_caller_memory():
    memory = [2, 1]
    result = run(prog(Instruction(op=Opcode.SWAP, a=0, b=1)), memory, step_limit=10)
    assert result.memory == [1, 2]
    assert memory == [2, 1]


def test_set_read_inc_dec():
    result = run(
        prog(
            Instruction(op=Opcode.SET, a=R1, b=7),
            Instruction(op=Opcode.READ, a=R0, b=R1),
            Instruction(op=Opcode.READ, a=R2, b=1),
            Instruction(op=Opcode.INC, a=R0),
            Instruction(op=Opcode.DEC, a=R1),
            Instruction(op=Opcode.DEC, a=R1),
        ),
        [4, 9],
        step_limit=100,
    )
    assert result.registers == Registers(r0=8, r1=5, r2=9)


def test_read_out_of_range_yields_zero():
    result = run(
        prog(Instruction(op=Opcode.SET, a=R0, b=5), Instruction(op=Opcode.READ, a=R0, b=99)),
        [1, 2],
        step_limit=10,
    )
    assert result.registers.r0 == 0


def test_swap_resolves_registers_as_addresses():
    result = run(
        prog(
            Instruction(op=Opcode.SET, a=R0, b=0),
            Instruction(op=Opcode.SET, a=R1, b=2),
            Instruction(op=Opcode.SWAP, a=R0, b=R1),
        ),
        [5, 6, 7],
        step_limit=10,
    )
    assert result.memory == [7, 6, 5]


@pytest.mark.parametrize("a, b", [(0, 3), (99, 1), (R0, 1)])
def test_swap_out_of_range_is_noop(a, b):
    program = prog(Instruction(op=Opcode.DEC, a=R0), Instruction(op=Opcode.SWAP, a=a, b=b))
    result = run(program, [1, 2, 3], step_limit=10)
    assert result.memory == [1, 2, 3]
    assert result.halt_reason is HaltReason.FELL_OFF


def test_swap_preserves_multiset_and_exchanges_two_cells():
    rng = random.Random(7)
    for _ in range(50):
        memory = [rng.randrange(10) for _ in range(6)]
        i, j = rng.randrange(6), rng.randrange(6)
        result = run(prog(Instruction(op=Opcode.SWAP, a=i, b=j)), memory, step_limit=5)
        assert sorted(result.memory) == sorted(memory)
        assert result.memory[i] == memory[j] and result.memory[j] == memory[i]
        changed = [k for k in range(6) if result.memory[k] != memory[k]]
        assert set(changed) <= {i, j}


def test_jlt_compares_memory_cells_for_literals():
    program = prog(
        Instruction(op=Opcode.JLT, a=1, b=0, offset=2),
        Instruction(op=Opcode.SET, a=R0, b=1),
        Instruction(op=Opcode.LABEL),
    )
    assert run(program, [5, 1], step_limit=10).registers.r0 == 0
    assert run(program, [1, 5], step_limit=10).registers.r0 == 1


def test_jlt_passes_register_values_through():
    program = prog(
        Instruction(op=Opcode.SET, a=R1, b=3),
        Instruction(op=Opcode.JLT, a=R0, b=R1, offset=2),
        Instruction(op=Opcode.SET, a=R2, b=1),
        Instruction(op=Opcode.LABEL),
    )
    assert run(program, [0], step_limit=10).registers.r2 == 0


def test_jz():
    program = prog(
        Instruction(op=Opcode.JZ, a=0, offset=2),
        Instruction(op=Opcode.SET, a=R0, b=1),
        Instruction(op=Opcode.LABEL),
    )
    assert run(program, [0], step_limit=10).registers.r0 == 0
    assert run(program, [4], step_limit=10).registers.r0 == 1


def test_jump_outside_program_halts():
    result = run(prog(Instruction(op=Opcode.JUMP, offset=-5), Instruction(op=Opcode.INC, a=R0)), [], 10)
    assert result.steps == 1
    assert result.pc == -5
    assert result.halt_reason is HaltReason.FELL_OFF
    assert result.registers.r0 == 0


@pytest.mark.parametrize("limit", [0, 1, 17, 1000])
def test_budget_halts_infinite_loop_exactly(limit):
    loop = prog(
        Instruction(op=Opcode.LABEL),
        Instruction(op=Opcode.INC, a=R0),
        Instruction(op=Opcode.JUMP, offset=-2),
    )
    result = run(loop, [1, 2], step_limit=limit)
    assert result.steps == limit
    assert result.halt_reason is HaltReason.BUDGET_EXHAUSTED


def test_self_jump_consumes_budget():
    result = run(prog(Instruction(op=Opcode.JUMP, offset=0)), [], step_limit=33)
    assert result.steps == 33
    assert result.pc == 0


def test_empty_program_falls_off_immediately():
    result = run(Program(), [1], step_limit=10)
    assert result.steps == 0
    assert result.halt_reason is HaltReason.FELL_OFF


def test_bubble_program_sorts(bubble_program):
    result = run(bubble_program, [5, 5, 1], step_limit=256)
    assert result.memory == [1, 5, 5]
    assert result.halt_reason is HaltReason.FELL_OFF
    assert result.steps == 14


def test_run_is_deterministic(generator):
    rng = random.Random(99)
    for _ in range(20):
        program = generator.random_program(rng)
        memory = [rng.randrange(16) for _ in range(8)]
        first = run(program, memory, step_limit=200)
        second = run(program, memory, step_limit=200)
        assert first == second


def test_permissive_mode_skips_literal_targets():
    program = prog(
        Instruction(op=Opcode.INC, a=2),
        Instruction(op=Opcode.SET, a=0, b=4),
        Instruction(op=Opcode.READ, a=1, b=0),
        Instruction(op=Opcode.INC, a=R0),
    )
    result = run(program, [3, 4, 5], step_limit=10, mode=ExecutionMode.PERMISSIVE)
    assert result.memory == [3, 4, 5]
    assert result.registers == Registers(1, 0, 0)


def test_strict_mode_rejects_literal_targets():
    program = prog(Instruction(op=Opcode.DEC, a=1))
    with pytest.raises(ProgramExecutionError):
        run(program, [0, 0], step_limit=10, mode=ExecutionMode.STRICT)
    with pytest.raises(ProgramValidationError):
        validate_program(program, ExecutionMode.STRICT)
    validate_program(program, ExecutionMode.PERMISSIVE)


def test_strict_validation_accepts_generated_programs(generator, rng):
    for _ in range(20):
        validate_program(generator.random_program(rng), ExecutionMode.STRICT)


@pytest.mark.parametrize("op", list(Opcode))
def test_handlers_share_one_signature(op):
    hints = get_type_hints(_HANDLERS[op])
    assert hints["ins"] is Instruction
    assert hints["regs"] is Registers
    assert hints["mode"] is ExecutionMode
    assert set(hints) == {"ins", "regs", "memory", "pc", "mode", "return"}
