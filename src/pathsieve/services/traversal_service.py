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
from typing import Iterable, List, Optional, Union

from ..adapters.local_fs import LocalFS
from ..domain.entry import Entry
from ..domain.errors import InvalidArgumentError
from ..domain.predicates import (
    ALWAYS_TRUE,
    And,
    Extension,
    MaxDepth,
    NameEquals,
    Not,
    Predicate,
)
from ..ports.filesystem import FilesystemPort
from .file_sequence import FileSequence
from .traversal import TraversalCursor

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def extension_predicate(extensions: Optional[Iterable[str]]) -> Predicate:
    """Extension filter; None or an empty collection accepts every file."""
    if extensions is None:
        return ALWAYS_TRUE
    if isinstance(extensions, str):
        extensions = (extensions,)
    exts = tuple(extensions)
    if not exts:
        return ALWAYS_TRUE
    return Extension(frozenset(exts))


def depth_predicate(recursive: bool) -> Predicate:
    """Directory predicate: everything when recursive, only the root otherwise."""
    return ALWAYS_TRUE if recursive else MaxDepth(0)


class TraversalService:
    """
    Entry points for listing files under a directory tree.

      - `list_files` drains a walk into a list
      - `iterate_files` / `stream_files` return a lazy `FileSequence`
      - `*_with_extensions` and `*_excluding` compose the usual predicates

    Arguments are validated before any directory is read. A walk observes the
    filesystem as it changes; entries created or removed mid-walk may or may
    not be reported.
    """

    def __init__(self, fs: Optional[FilesystemPort] = None) -> None:
        self._fs = fs or LocalFS()

    # --- validation ---------------------------------------------------------

    @staticmethod
    def _predicates(
        file_predicate: Optional[Predicate], directory_predicate: Optional[Predicate]
    ) -> tuple[Predicate, Predicate]:
        if file_predicate is None:
            raise InvalidArgumentError("file_predicate is required")
        if not isinstance(file_predicate, Predicate):
            raise InvalidArgumentError(
                f"file_predicate must be a Predicate, got {type(file_predicate).__name__}"
            )
        if directory_predicate is None:
            directory_predicate = ALWAYS_TRUE
        elif not isinstance(directory_predicate, Predicate):
            raise InvalidArgumentError(
                "directory_predicate must be a Predicate, got "
                f"{type(directory_predicate).__name__}"
            )
        return file_predicate, directory_predicate

    def _root(self, root: PathLike, *, require_directory: bool) -> Entry:
        if root is None:
            raise InvalidArgumentError("root is required")
        path = Path(root)
        try:
            entry = self._fs.entry(path, 0)
        except FileNotFoundError:
            raise InvalidArgumentError(f"Root does not exist: {path}") from None
        except OSError as e:
            raise InvalidArgumentError(f"Root is not accessible: {path} ({e})") from e
        if require_directory and not entry.is_dir:
            raise InvalidArgumentError(f"Root is not a directory: {path}")
        return entry

    def _open(
        self,
        root: PathLike,
        file_predicate: Optional[Predicate],
        directory_predicate: Optional[Predicate],
        *,
        require_directory: bool = True,
    ) -> FileSequence:
        files, dirs = self._predicates(file_predicate, directory_predicate)
        entry = self._root(root, require_directory=require_directory)
        logger.debug(
            "TraversalService: walking %s files=%r dirs=%r", entry.path, files, dirs
        )
        return FileSequence(TraversalCursor(self._fs, entry, files, dirs))

    # --- general entry points -----------------------------------------------

    def iterate_files(
        self,
        root: PathLike,
        file_predicate: Predicate,
        directory_predicate: Optional[Predicate] = None,
    ) -> FileSequence:
        """
        Lazily walk `root`, yielding paths accepted by `file_predicate`.

        `directory_predicate` gates descent (the root included); None means
        descend everywhere. The result must be closed or fully drained.
        """
        return self._open(root, file_predicate, directory_predicate)

    def list_files(
        self,
        root: PathLike,
        file_predicate: Predicate,
        directory_predicate: Optional[Predicate] = None,
    ) -> List[Path]:
        """Walk `root` to completion and return every accepted path in walk order."""
        with self._open(root, file_predicate, directory_predicate) as files:
            return list(files)

    def walk(
        self,
        path: PathLike,
        file_predicate: Predicate,
        directory_predicate: Optional[Predicate] = None,
    ) -> FileSequence:
        """Like `iterate_files`, but a file `path` is tested and reported on its own."""
        return self._open(
            path, file_predicate, directory_predicate, require_directory=False
        )

    # --- extension conveniences ---------------------------------------------

    def stream_files(
        self,
        root: PathLike,
        recursive: bool,
        extensions: Optional[Iterable[str]] = None,
    ) -> FileSequence:
        """
        Lazily list files with one of `extensions` (None: any file).

        Non-recursive calls only read `root` itself.
        """
        return self._open(
            root, extension_predicate(extensions), depth_predicate(recursive)
        )

    def iterate_files_with_extensions(
        self,
        root: PathLike,
        extensions: Optional[Iterable[str]] = None,
        recursive: bool = False,
    ) -> FileSequence:
        return self.stream_files(root, recursive, extensions)

    def list_files_with_extensions(
        self,
        root: PathLike,
        extensions: Optional[Iterable[str]] = None,
        recursive: bool = False,
    ) -> List[Path]:
        with self.stream_files(root, recursive, extensions) as files:
            return list(files)

    # --- reserved directory exclusion ----------------------------------------

    @staticmethod
    def excluding(
        directory_predicate: Optional[Predicate], excluded_name: str
    ) -> Predicate:
        """`directory_predicate AND NOT name == excluded_name` (case-sensitive)."""
        if not excluded_name:
            raise InvalidArgumentError("excluded_name must be a non-empty string")
        base = directory_predicate if directory_predicate is not None else ALWAYS_TRUE
        return And((base, Not(NameEquals((excluded_name,)))))

    def iterate_files_excluding(
        self,
        root: PathLike,
        file_predicate: Predicate,
        directory_predicate: Optional[Predicate] = None,
        excluded_name: str = "CVS",
    ) -> FileSequence:
        return self._open(
            root, file_predicate, self.excluding(directory_predicate, excluded_name)
        )

    def list_files_excluding(
        self,
        root: PathLike,
        file_predicate: Predicate,
        directory_predicate: Optional[Predicate] = None,
        excluded_name: str = "CVS",
    ) -> List[Path]:
        with self.iterate_files_excluding(
            root, file_predicate, directory_predicate, excluded_name
        ) as files:
            return list(files)


_default = TraversalService()


def list_files(
    root: PathLike,
    file_predicate: Predicate,
    directory_predicate: Optional[Predicate] = None,
) -> List[Path]:
    return _default.list_files(root, file_predicate, directory_predicate)


def iterate_files(
    root: PathLike,
    file_predicate: Predicate,
    directory_predicate: Optional[Predicate] = None,
) -> FileSequence:
    return _default.iterate_files(root, file_predicate, directory_predicate)


def stream_files(
    root: PathLike, recursive: bool, extensions: Optional[Iterable[str]] = None
) -> FileSequence:
    return _default.stream_files(root, recursive, extensions)
