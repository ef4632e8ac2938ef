# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from pathlib import Path
from typing import Optional


class PathSieveError(Exception):
    """Base exception for domain-specific errors."""


class InvalidArgumentError(PathSieveError, ValueError):
    """Missing predicate, bad root, malformed predicate arguments."""


class TraversalError(PathSieveError):
    """An unreadable directory aborted a walk; wraps the underlying OSError."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class SequenceClosedError(PathSieveError):
    """A lazy file sequence was used after it was closed."""


class ConfigurationError(PathSieveError):
    """Bad CLI args or unusable settings."""
