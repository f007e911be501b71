import pydantic
import pytest

from regevo.exceptions import ProgramValidationError, RegEvoError
from regevo.programs import (
    OPCODE_SPECS,
    R0,
    R1,
    R2,
    Instruction,
    Opcode,
    Program,
    format_argument,
    is_register,
)


def test_register_encoding():
    assert (R0, R1, R2) == (-3, -2, -1)
    assert all(is_register(r) for r in (R0, R1, R2))
    assert not is_register(0)
    assert not is_register(None)
    assert format_argument(R1) == "R1"
    assert format_argument(7) == "7"


def test_every_opcode_has_a_spec():
    assert set(OPCODE_SPECS) == set(Opcode)


@pytest.mark.parametrize(
    "ins, text",
    [
        (Instruction(op=Opcode.SET, a=R0, b=2), "SET R0 2"),
        (Instruction(op=Opcode.READ, a=R2, b=R1), "READ R2 R1"),
        (Instruction(op=Opcode.INC, a=R1), "INC R1"),
        (Instruction(op=Opcode.SWAP, a=0, b=R0), "SWAP 0 R0"),
        (Instruction(op=Opcode.JLT, a=1, b=0, offset=2), "JLT 1 0 +2"),
        (Instruction(op=Opcode.JZ, a=R0, offset=0), "JZ R0 +0"),
        (Instruction(op=Opcode.JUMP, offset=-8), "JUMP -8"),
        (Instruction(op=Opcode.LABEL), "LABEL"),
    ],
)
def test_pretty_instruction(ins, text):
    assert ins.pretty() == text


def test_pretty_program_one_line_per_instruction(bubble_program):
    lines = bubble_program.pretty().splitlines()
    assert len(lines) == len(bubble_program)
    assert lines[0] == "SET R0 2"
    assert lines[-1] == "JUMP -8"
    assert bubble_program.pretty().endswith("\n")


@pytest.mark.parametrize(
    "fields",
    [
        {"op": Opcode.SWAP, "a": 0},  # missing operand
        {"op": Opcode.LABEL, "a": 1},  # unexpected operand
        {"op": Opcode.SET, "a": R0, "b": R1},  # register where an immediate belongs
        {"op": Opcode.INC, "a": -4},  # below the register range
        {"op": Opcode.JLT, "a": 0, "b": 1},  # missing offset
        {"op": Opcode.SWAP, "a": 0, "b": 1, "offset": 1},  # unexpected offset
        {"op": Opcode.JUMP, "a": 0, "offset": 1},
        {"op": "NOPE"},
    ],
)
def test_malformed_instructions_rejected(fields):
    with pytest.raises(ProgramValidationError):
        Instruction(**fields)


def test_construction_errors_stay_in_package_hierarchy():
    with pytest.raises(RegEvoError) as exc:
        Instruction(op=Opcode.LABEL, a=1)
    assert isinstance(exc.value.__cause__, pydantic.ValidationError)
    with pytest.raises(ProgramValidationError):
        Program(instructions=[{"op": "SWAP", "a": 0}])
    with pytest.raises(ProgramValidationError):
        Program(instructions=(), extra=1)


def test_literal_in_register_slot_is_structurally_valid():
    # Whether this runs is decided by the execution mode, not construction.
    assert Instruction(op=Opcode.INC, a=3).a == 3


def test_noop_program():
    program = Program.noop(4)
    assert len(program) == 4
    assert all(ins.op is Opcode.LABEL for ins in program)
    assert program.pretty() == "LABEL\n" * 4
    with pytest.raises(ProgramValidationError):
        Program.noop(-1)


def test_programs_are_immutable_values():
    program = Program.noop(3)
    assert program == Program.noop(3)
    assert hash(program) == hash(Program.noop(3))
    with pytest.raises(pydantic.ValidationError):
        program.instructions = ()
    with pytest.raises(pydantic.ValidationError):
        program[0].op = Opcode.SWAP


def test_program_accepts_list_input():
    program = Program(instructions=[Instruction(op=Opcode.LABEL)])
    assert isinstance(program.instructions, tuple)
    assert program[0].op is Opcode.LABEL
