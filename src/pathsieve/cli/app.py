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
from typing import Iterable, List, Optional
import logging

import typer

from ..domain.errors import ConfigurationError, InvalidArgumentError, TraversalError
from ..domain.predicates import (
    ALWAYS_TRUE,
    And,
    Extension,
    MaxDepth,
    Predicate,
    Regex,
    Size,
    Wildcard,
    exclude_names,
)
from ..services import TraversalService

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(help="pathsieve CLI - list files under a directory tree by rule")

VCS_DIRS = ("CVS", ".svn", ".git", ".hg")

logger = logging.getLogger(__name__)


# ------------------------------
# Predicate assembly
# ------------------------------


def _file_predicate(
    ext: Optional[List[str]],
    glob: Optional[List[str]],
    regex: Optional[str],
    min_size: Optional[int],
    max_size: Optional[int],
    ignore_case: bool,
) -> Predicate:
    """
    Combine the file filters given on the command line with AND.
    No filters at all means every file is accepted.
    """
    case_sensitive = not ignore_case
    parts: List[Predicate] = []
    try:
        if ext:
            parts.append(Extension(frozenset(ext), case_sensitive))
        if glob:
            parts.append(Wildcard(tuple(glob), case_sensitive))
        if regex:
            parts.append(Regex(regex, case_sensitive))
        if min_size is not None or max_size is not None:
            parts.append(Size(min_size, max_size))
    except InvalidArgumentError as e:
        raise ConfigurationError(str(e)) from e
    if not parts:
        return ALWAYS_TRUE
    if len(parts) == 1:
        return parts[0]
    return And(tuple(parts))


def _directory_predicate(
    recursive: bool,
    max_depth: Optional[int],
    exclude_dir: Optional[List[str]],
    skip_vcs: bool,
) -> Predicate:
    if max_depth is not None and max_depth < 0:
        raise ConfigurationError("--max-depth must be >= 0")
    if not recursive:
        if max_depth is not None:
            raise ConfigurationError("--max-depth needs --recursive")
        max_depth = 0

    pred: Predicate = ALWAYS_TRUE if max_depth is None else MaxDepth(max_depth)
    if exclude_dir:
        pred = exclude_names(pred, *exclude_dir)
    if skip_vcs:
        pred = exclude_names(pred, *VCS_DIRS)
    return pred


def _emit(paths: Iterable[Path], count: bool) -> int:
    n = 0
    for p in paths:
        n += 1
        if not count:
            typer.echo(str(p))
    if count:
        typer.echo(str(n))
    return n


# ------------------------------
# CLI Commands
# ------------------------------


@app.command("list")
def list_cmd(
    path: Path = typer.Option(
        ...,
        "--path",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory to walk",
    ),
    ext: Optional[List[str]] = typer.Option(
        None, "--ext", help="Accept files with this extension (repeatable)"
    ),
    glob: Optional[List[str]] = typer.Option(
        None, "--glob", help="Accept names matching this * / ? pattern (repeatable)"
    ),
    regex: Optional[str] = typer.Option(
        None, "--regex", help="Accept names fully matching this regular expression"
    ),
    min_size: Optional[int] = typer.Option(None, "--min-size", help="Minimum size in bytes"),
    max_size: Optional[int] = typer.Option(None, "--max-size", help="Maximum size in bytes"),
    ignore_case: bool = typer.Option(
        False, "--ignore-case", help="Case-insensitive name matching"
    ),
    recursive: bool = typer.Option(
        True, "--recursive/--no-recursive", help="Descend into subdirectories"
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Deepest directory level to read (root is 0)"
    ),
    exclude_dir: Optional[List[str]] = typer.Option(
        None, "--exclude-dir", help="Never descend into directories with this name"
    ),
    skip_vcs: bool = typer.Option(
        False, "--skip-vcs", help=f"Skip version-control directories ({', '.join(VCS_DIRS)})"
    ),
    lazy: bool = typer.Option(
        False, "--lazy", help="Print matches as they are found instead of after the walk"
    ),
    count: bool = typer.Option(False, "--count", help="Print only the number of matches"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    List files under a directory, filtered by name, size and directory rules.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    try:
        files = _file_predicate(ext, glob, regex, min_size, max_size, ignore_case)
        dirs = _directory_predicate(recursive, max_depth, exclude_dir, skip_vcs)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))
    service = TraversalService()

    try:
        if lazy:
            with service.iterate_files(path, files, dirs) as seq:
                _emit(seq, count)
        else:
            _emit(service.list_files(path, files, dirs), count)
    except TraversalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def ext(
    path: Path = typer.Option(
        ...,
        "--path",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory to walk",
    ),
    extensions: Optional[List[str]] = typer.Argument(
        None, help="Extensions to accept, e.g. xml txt. Omit to accept every file."
    ),
    recursive: bool = typer.Option(
        False, "--recursive/--no-recursive", help="Descend into subdirectories"
    ),
    count: bool = typer.Option(False, "--count", help="Print only the number of matches"),
):
    """
    Stream files with the given extensions (case-sensitive).
    """
    try:
        with TraversalService().stream_files(path, recursive, extensions) as seq:
            _emit(seq, count)
    except TraversalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
