"""Core data model and I/O for techlist."""

from .errors import TechlistError, InputSourceError, OutputWriteError, ConfigurationError
from .records import TechnologyRecord
from .registry import TechnologyRegistry, ingest

__all__ = [
    "TechlistError",
    "InputSourceError",
    "OutputWriteError",
    "ConfigurationError",
    "TechnologyRecord",
    "TechnologyRegistry",
    "ingest",
]
