from .entry import Entry
from .errors import (
    ConfigurationError,
    InvalidArgumentError,
    PathSieveError,
    SequenceClosedError,
    TraversalError,
)

__all__ = [
    "ConfigurationError",
    "Entry",
    "InvalidArgumentError",
    "PathSieveError",
    "SequenceClosedError",
    "TraversalError",
]
