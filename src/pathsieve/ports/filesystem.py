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

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

from ..domain.entry import Entry


class DirectoryHandle(ABC):
    """An open directory read. Yields child entries; must be closed."""

    @abstractmethod
    def __iter__(self) -> Iterator[Entry]:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release the underlying OS handle. Safe to call more than once."""
        raise NotImplementedError

    def __enter__(self) -> DirectoryHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FilesystemPort(ABC):
    """Abstract interface for filesystem access."""

    @abstractmethod
    def entry(self, path: Path, depth: int = 0) -> Entry:
        """Stat `path` and return it as an Entry. Raises OSError if it cannot be read."""
        raise NotImplementedError

    @abstractmethod
    def scandir(self, path: Path, depth: int) -> DirectoryHandle:
        """Open `path` for reading; children are reported at `depth`."""
        raise NotImplementedError
