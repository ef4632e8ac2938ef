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
import os
import stat
from pathlib import Path
from typing import Iterator, Optional

from ..domain.entry import Entry
from ..ports.filesystem import DirectoryHandle, FilesystemPort

logger = logging.getLogger(__name__)


class LocalDirectoryHandle(DirectoryHandle):
    """
    One `os.scandir` iterator over a single directory.

    Entries describe the link target (is_dir, size, mtime all come from the
    followed stat) and carry `is_link` so the walk can refuse to descend.
    Dangling links are reported as non-directories with their own lstat.
    Children that disappear between the directory read and their stat are
    dropped.
    """

    def __init__(self, path: Path, depth: int) -> None:
        self._path = Path(path)
        self._depth = depth
        self._it: Optional[Iterator[os.DirEntry]] = os.scandir(self._path)

    @property
    def closed(self) -> bool:
        return getattr(self, "_it", None) is None

    def __iter__(self) -> Iterator[Entry]:
        while self._it is not None:
            try:
                de = next(self._it)
            except StopIteration:
                return
            entry = self._to_entry(de)
            if entry is not None:
                yield entry

    def _to_entry(self, de: os.DirEntry) -> Optional[Entry]:
        is_link = de.is_symlink()
        try:
            st = de.stat()
        except FileNotFoundError:
            if not is_link:
                logger.debug("LocalFS: %s vanished before stat; skipping", de.path)
                return None
            # dangling link: report the link itself
            st = de.stat(follow_symlinks=False)
        return Entry(
            path=Path(de.path),
            name=de.name,
            is_dir=stat.S_ISDIR(st.st_mode),
            size=st.st_size,
            modified=st.st_mtime,
            depth=self._depth,
            is_link=is_link,
        )

    def close(self) -> None:
        it = getattr(self, "_it", None)
        if it is not None:
            it.close()  # type: ignore[attr-defined]
            self._it = None
            logger.debug("LocalFS: released handle for %s", self._path)

    def __del__(self) -> None:
        try:
            if getattr(self, "_it", None) is not None:
                self.close()
        except Exception:
            pass


class LocalFS(FilesystemPort):
    """Local filesystem adapter backed by os.stat / os.scandir."""

    def entry(self, path: Path, depth: int = 0) -> Entry:
        path = Path(path)
        st = path.stat()
        return Entry(
            path=path,
            name=path.name,
            is_dir=stat.S_ISDIR(st.st_mode),
            size=st.st_size,
            modified=st.st_mtime,
            depth=depth,
            is_link=path.is_symlink(),
        )

    def scandir(self, path: Path, depth: int) -> LocalDirectoryHandle:
        return LocalDirectoryHandle(path, depth)
