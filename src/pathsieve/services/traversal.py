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

import logging
from pathlib import Path
from typing import Iterator, List, Optional

from ..domain.entry import Entry
from ..domain.errors import TraversalError
from ..domain.predicates import Predicate, evaluate
from ..ports.filesystem import DirectoryHandle, FilesystemPort

logger = logging.getLogger(__name__)


class TraversalCursor:
    """
    Pull-driven depth-first walk over one directory tree.

    Schedule:
      - a non-directory root is tested against the file predicate and is the
        only possible result
      - a directory (the root included) is read only if the directory
        predicate accepts it; rejected directories are never opened
      - symlinked subdirectories are neither descended nor reported
      - the files of a directory are produced before anything beneath it;
        accepted subdirectories are expanded afterwards in read order

    At most one directory handle is open at a time, and nothing is opened
    until the first call to `next_entry()`. A cursor belongs to exactly one
    caller and is not thread-safe.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        root: Entry,
        file_predicate: Predicate,
        directory_predicate: Predicate,
    ) -> None:
        self._fs = fs
        self._root = root
        self._files = file_predicate
        self._dirs = directory_predicate

        self._pending: List[Entry] = []
        self._subdirs: List[Entry] = []
        self._handle: Optional[DirectoryHandle] = None
        self._children: Optional[Iterator[Entry]] = None
        self._current: Optional[Path] = None
        self._started = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def holding_handle(self) -> bool:
        return self._handle is not None

    def next_entry(self) -> Optional[Entry]:
        """Return the next accepted entry, or None once the walk is finished."""
        if self._closed:
            return None
        try:
            if not self._started:
                self._started = True
                first = self._start()
                if first is not None or self._closed:
                    return first
            return self._advance()
        except OSError as e:
            path = self._current
            self.close()
            raise TraversalError(f"Cannot read directory {path}: {e}", path) from e
        except Exception:
            self.close()
            raise

    def _start(self) -> Optional[Entry]:
        root = self._root
        if not root.is_dir:
            self.close()
            return root if evaluate(self._files, root) else None
        if not evaluate(self._dirs, root):
            logger.debug("TraversalCursor: root %s rejected; nothing to walk", root.path)
            self.close()
            return None
        self._pending.append(root)
        return None

    def _advance(self) -> Optional[Entry]:
        while True:
            if self._children is None:
                if not self._pending:
                    self.close()
                    return None
                if not self._open(self._pending.pop()):
                    continue

            for child in self._children:  # type: ignore[union-attr]
                if child.is_dir:
                    if child.is_link:
                        logger.debug("TraversalCursor: not following link %s", child.path)
                    elif evaluate(self._dirs, child):
                        self._subdirs.append(child)
                    else:
                        logger.debug("TraversalCursor: pruned %s", child.path)
                elif evaluate(self._files, child):
                    return child

            self._release_handle()
            self._pending.extend(reversed(self._subdirs))
            self._subdirs = []

    def _open(self, directory: Entry) -> bool:
        self._current = directory.path
        try:
            self._handle = self._fs.scandir(directory.path, directory.depth + 1)
        except FileNotFoundError:
            logger.debug("TraversalCursor: %s vanished before it was read", directory.path)
            return False
        self._children = iter(self._handle)
        return True

    def _release_handle(self) -> None:
        handle, self._handle, self._children = self._handle, None, None
        if handle is not None:
            handle.close()

    def close(self) -> None:
        """Release the open handle and drop pending work. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._pending.clear()
        self._subdirs = []
        self._release_handle()
