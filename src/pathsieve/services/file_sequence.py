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
import warnings
from pathlib import Path
from typing import Iterator

from ..domain.entry import Entry
from ..domain.errors import SequenceClosedError
from .traversal import TraversalCursor

logger = logging.getLogger(__name__)


class FileSequence(Iterator[Path]):
    """
    Forward-only, closable sequence of matching paths.

    The walk state (including any open directory handle) is released exactly
    once: on `close()`, when the sequence is exhausted, or when a pull raises.
    Use it as a context manager so partial consumption cannot leak:

        with service.iterate_files(root, extension("txt")) as files:
            first = next(files)

    After `close()` any further pull raises `SequenceClosedError`; after
    exhaustion or an error, pulls raise `StopIteration`.
    """

    def __init__(self, cursor: TraversalCursor) -> None:
        self._cursor = cursor
        self._released = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def released(self) -> bool:
        return self._released

    def __iter__(self) -> FileSequence:
        return self

    def __next__(self) -> Path:
        return self._next_entry().path

    def entries(self) -> Iterator[Entry]:
        """Yield the remaining matches as Entry objects from the same walk."""
        while True:
            try:
                entry = self._next_entry()
            except StopIteration:
                return
            yield entry

    def _next_entry(self) -> Entry:
        if self._closed:
            raise SequenceClosedError("FileSequence has been closed")
        if self._released:
            raise StopIteration
        try:
            entry = self._cursor.next_entry()
        except Exception:
            self._release()
            raise
        if entry is None:
            self._release()
            raise StopIteration
        return entry

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        self._cursor.close()
        logger.debug("FileSequence: released walk state")

    def close(self) -> None:
        self._release()
        self._closed = True

    def __enter__(self) -> FileSequence:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_released", True):
            return
        warnings.warn(
            "FileSequence was not closed or exhausted", ResourceWarning, stacklevel=2
        )
        self._release()
