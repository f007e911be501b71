from regevo.programs.instruction_set import (
    OPCODE_SPECS,
    R0,
    R1,
    R2,
    REGISTERS,
    Instruction,
    Opcode,
    OpcodeSpec,
    OperandRole,
    Program,
    format_argument,
    is_register,
)
from regevo.programs.interpreter import (
    ExecutionMode,
    ExecutionResult,
    HaltReason,
    Registers,
    run,
    validate_program,
)

__all__ = [
    "OPCODE_SPECS",
    "R0",
    "R1",
    "R2",
    "REGISTERS",
    "Instruction",
    "Opcode",
    "OpcodeSpec",
    "OperandRole",
    "Program",
    "format_argument",
    "is_register",
    "ExecutionMode",
    "ExecutionResult",
    "HaltReason",
    "Registers",
    "run",
    "validate_program",
]
