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

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Entry:
    """
    A filesystem entry as observed at traversal time.

    Entries are snapshots: reading the same path again later may produce
    different values. `depth` is the distance from the traversal root (0 for
    the root itself). For a symlink, `is_dir`, `size` and `modified` describe
    the target and `is_link` is set.
    """

    path: Path
    name: str
    is_dir: bool
    size: int = 0
    modified: float = 0.0
    depth: int = 0
    is_link: bool = False

    @property
    def is_file(self) -> bool:
        return not self.is_dir

    @property
    def extension(self) -> str | None:
        """Text after the final '.' of the name, or None when there is no dot."""
        _, dot, tail = self.name.rpartition(".")
        if not dot:
            return None
        return tail
