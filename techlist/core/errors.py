"""Exceptions raised by techlist and the exit codes they map to."""


class TechlistError(Exception):
    """Base exception for all techlist failures."""

    exit_code = 1


class InputSourceError(TechlistError):
    """Raised when the input file is missing or cannot be read."""
    pass


class OutputWriteError(TechlistError):
    """Raised when the output destination cannot be written."""
    pass


class ConfigurationError(TechlistError):
    """Raised for malformed configuration files or values."""

    exit_code = 2
