class RegEvoError(Exception):
    """Base for all RegEvo exceptions."""

    pass


# High-level families
class ValidationError(RegEvoError):
    """Data validation failures."""

    pass


class StorageError(RegEvoError):
    """Population storage failures."""

    pass


class ProgramError(RegEvoError):
    """Program construction or execution failures."""

    pass


class EvolutionError(RegEvoError):
    """Evolution process failures."""

    pass


class ConfigurationError(RegEvoError):
    """Invalid or unloadable configuration."""

    pass


# Program subtypes
class ProgramValidationError(ProgramError):
    """Malformed instruction or program structure."""

    pass


class ProgramExecutionError(ProgramError):
    """Strict-mode execution violations."""

    pass
