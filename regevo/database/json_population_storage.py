"""JSON-file population storage.

File layout::

    {"version": 1, "programs": [[{"op": "SWAP", "a": 0, "b": 1, "offset": null}, ...], ...]}

A load either returns the whole population or raises; there is no partial
result.
"""
from __future__ import annotations

import os
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from regevo.database.program_storage import PopulationStorage
from regevo.exceptions import ProgramValidationError, StorageError
from regevo.programs.instruction_set import Instruction, Program
from regevo.programs.interpreter import ExecutionMode, validate_program

FORMAT_VERSION = 1


class PopulationFile(BaseModel):
    version: int = Field(default=FORMAT_VERSION)
    programs: list[list[Instruction]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class JsonPopulationStorage(PopulationStorage):
    """Stores a population as a single JSON document."""

    def __init__(self, path: str | os.PathLike[str], mode: ExecutionMode = ExecutionMode.PERMISSIVE):
        self.path = Path(path)
        self.mode = mode

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> list[Program]:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Cannot read population file {self.path}: {exc}") from exc

        try:
            document = PopulationFile.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise StorageError(f"Malformed population file {self.path}: {exc}") from exc

        if document.version != FORMAT_VERSION:
            raise StorageError(
                f"Unsupported population file version {document.version} in {self.path}"
            )

        population = [Program(instructions=tuple(items)) for items in document.programs]
        for index, program in enumerate(population):
            try:
                validate_program(program, self.mode)
            except ProgramValidationError as exc:
                raise StorageError(f"Program {index} in {self.path} rejected: {exc}") from exc

        logger.info("[JsonPopulationStorage] Loaded {} program(s) from {}", len(population), self.path)
        return population

    def save(self, population: list[Program]) -> None:
        document = PopulationFile(
            programs=[list(program.instructions) for program in population]
        )
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(document.model_dump_json(), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise StorageError(f"Cannot write population file {self.path}: {exc}") from exc

        logger.info("[JsonPopulationStorage] Saved {} program(s) to {}", len(population), self.path)
