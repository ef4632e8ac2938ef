from .domain import (
    ConfigurationError,
    Entry,
    InvalidArgumentError,
    PathSieveError,
    SequenceClosedError,
    TraversalError,
)
from .services import (
    FileSequence,
    TraversalService,
    iterate_files,
    list_files,
    stream_files,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Entry",
    "FileSequence",
    "InvalidArgumentError",
    "PathSieveError",
    "SequenceClosedError",
    "TraversalError",
    "TraversalService",
    "iterate_files",
    "list_files",
    "stream_files",
]
