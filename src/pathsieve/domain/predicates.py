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

"""
Predicates over filesystem entries.

Every predicate is a frozen value object with no reference to the filesystem;
the same instance can be shared across any number of walks and threads.
Evaluation lives in a single `evaluate()` function that dispatches on the
predicate type, so the variants themselves only carry data.

Composition:
  * `And(())` accepts everything, `Or(())` rejects everything.
  * `a & b`, `a | b` and `~a` build `And`, `Or` and `Not`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional, Tuple, Type, Union

from .entry import Entry
from .errors import InvalidArgumentError

Timestamp = Union[float, int, datetime]


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_seconds(value: Optional[Timestamp]) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.timestamp()
    if not _is_number(value):
        raise InvalidArgumentError(f"Expected a timestamp or datetime, got {value!r}")
    return float(value)


class Predicate:
    """Base type for all predicates. Subclasses are frozen dataclasses."""

    __slots__ = ()

    def matches(self, entry: Entry) -> bool:
        return evaluate(self, entry)

    def __and__(self, other: "Predicate") -> "And":
        return And((self, other))

    def __or__(self, other: "Predicate") -> "Or":
        return Or((self, other))

    def __invert__(self) -> "Not":
        return Not(self)


def _strings(kind: str, values: Iterable[str], *, allow_empty: bool = False) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = (values,)
    out = tuple(values)
    for v in out:
        if not isinstance(v, str):
            raise InvalidArgumentError(f"{kind} expects strings, got {v!r}")
    if not out and not allow_empty:
        raise InvalidArgumentError(f"{kind} requires at least one value")
    return out


# ------------------------------
# Leaf predicates
# ------------------------------


@dataclass(frozen=True)
class NameEquals(Predicate):
    names: Tuple[str, ...]
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", _strings("NameEquals", self.names))


@dataclass(frozen=True)
class Prefix(Predicate):
    prefixes: Tuple[str, ...]
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "prefixes", _strings("Prefix", self.prefixes))


@dataclass(frozen=True)
class Suffix(Predicate):
    suffixes: Tuple[str, ...]
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "suffixes", _strings("Suffix", self.suffixes))


@dataclass(frozen=True)
class Extension(Predicate):
    """
    Matches the text after the final '.' of the name against `extensions`.

    Extensions may be given with or without a leading dot. A name without a
    dot never matches, and an empty extension set matches nothing.
    """

    extensions: frozenset
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        exts = _strings("Extension", self.extensions, allow_empty=True)
        object.__setattr__(self, "extensions", frozenset(e.lstrip(".") for e in exts))


def _wildcard_to_regex(pattern: str) -> str:
    parts = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


@dataclass(frozen=True)
class Wildcard(Predicate):
    """`*` matches any run of characters, `?` exactly one; anchored to the whole name."""

    patterns: Tuple[str, ...]
    case_sensitive: bool = True
    _compiled: Tuple["re.Pattern[str]", ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        pats = _strings("Wildcard", self.patterns)
        flags = re.DOTALL | (0 if self.case_sensitive else re.IGNORECASE)
        object.__setattr__(self, "patterns", pats)
        object.__setattr__(
            self,
            "_compiled",
            tuple(re.compile(_wildcard_to_regex(p), flags) for p in pats),
        )


@dataclass(frozen=True)
class Regex(Predicate):
    """Full-name regular expression match."""

    pattern: str
    case_sensitive: bool = True
    _compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, str):
            raise InvalidArgumentError(f"Regex expects a string pattern, got {self.pattern!r}")
        flags = 0 if self.case_sensitive else re.IGNORECASE
        try:
            compiled = re.compile(self.pattern, flags)
        except re.error as e:
            raise InvalidArgumentError(f"Invalid regex {self.pattern!r}: {e}") from e
        object.__setattr__(self, "_compiled", compiled)


@dataclass(frozen=True)
class Size(Predicate):
    """Inclusive size range in bytes; a `None` bound is open."""

    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def __post_init__(self) -> None:
        for bound in (self.minimum, self.maximum):
            if bound is not None and not _is_number(bound):
                raise InvalidArgumentError(f"Size bounds must be numbers, got {bound!r}")
            if bound is not None and bound < 0:
                raise InvalidArgumentError(f"Size bounds must be >= 0, got {bound}")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise InvalidArgumentError(
                f"Size minimum {self.minimum} exceeds maximum {self.maximum}"
            )


@dataclass(frozen=True)
class Age(Predicate):
    """Inclusive range on the modification time (POSIX seconds)."""

    newest: Optional[float] = None
    oldest: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "newest", _as_seconds(self.newest))
        object.__setattr__(self, "oldest", _as_seconds(self.oldest))
        if (
            self.newest is not None
            and self.oldest is not None
            and self.oldest > self.newest
        ):
            raise InvalidArgumentError(
                f"Age oldest bound {self.oldest} is after newest bound {self.newest}"
            )


@dataclass(frozen=True)
class MaxDepth(Predicate):
    """Accepts entries at most `limit` levels below the traversal root."""

    limit: int

    def __post_init__(self) -> None:
        if not isinstance(self.limit, int) or isinstance(self.limit, bool):
            raise InvalidArgumentError(f"MaxDepth limit must be an int, got {self.limit!r}")
        if self.limit < 0:
            raise InvalidArgumentError(f"MaxDepth limit must be >= 0, got {self.limit}")


@dataclass(frozen=True)
class IsDirectory(Predicate):
    pass


@dataclass(frozen=True)
class IsFile(Predicate):
    pass


@dataclass(frozen=True)
class AlwaysTrue(Predicate):
    pass


@dataclass(frozen=True)
class AlwaysFalse(Predicate):
    pass


IS_DIRECTORY = IsDirectory()
IS_FILE = IsFile()
ALWAYS_TRUE = AlwaysTrue()
ALWAYS_FALSE = AlwaysFalse()


# ------------------------------
# Combinators
# ------------------------------


def _children(kind: str, children: Iterable[Predicate]) -> Tuple[Predicate, ...]:
    out = tuple(children)
    for child in out:
        if not isinstance(child, Predicate):
            raise InvalidArgumentError(f"{kind} children must be predicates, got {child!r}")
    return out


@dataclass(frozen=True)
class And(Predicate):
    children: Tuple[Predicate, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _children("And", self.children))


@dataclass(frozen=True)
class Or(Predicate):
    children: Tuple[Predicate, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _children("Or", self.children))


@dataclass(frozen=True)
class Not(Predicate):
    child: Predicate

    def __post_init__(self) -> None:
        if not isinstance(self.child, Predicate):
            raise InvalidArgumentError(f"Not expects a predicate, got {self.child!r}")


# ------------------------------
# Evaluation
# ------------------------------


def _eval_name_equals(p: NameEquals, entry: Entry) -> bool:
    name = _fold(entry.name, p.case_sensitive)
    return any(name == _fold(n, p.case_sensitive) for n in p.names)


def _eval_prefix(p: Prefix, entry: Entry) -> bool:
    name = _fold(entry.name, p.case_sensitive)
    return any(name.startswith(_fold(s, p.case_sensitive)) for s in p.prefixes)


def _eval_suffix(p: Suffix, entry: Entry) -> bool:
    name = _fold(entry.name, p.case_sensitive)
    return any(name.endswith(_fold(s, p.case_sensitive)) for s in p.suffixes)


def _eval_extension(p: Extension, entry: Entry) -> bool:
    ext = entry.extension
    if ext is None:
        return False
    if p.case_sensitive:
        return ext in p.extensions
    folded = ext.casefold()
    return any(folded == e.casefold() for e in p.extensions)


def _eval_wildcard(p: Wildcard, entry: Entry) -> bool:
    return any(rx.fullmatch(entry.name) is not None for rx in p._compiled)


def _eval_regex(p: Regex, entry: Entry) -> bool:
    return p._compiled.fullmatch(entry.name) is not None


def _eval_size(p: Size, entry: Entry) -> bool:
    if p.minimum is not None and entry.size < p.minimum:
        return False
    if p.maximum is not None and entry.size > p.maximum:
        return False
    return True


def _eval_age(p: Age, entry: Entry) -> bool:
    if p.oldest is not None and entry.modified < p.oldest:
        return False
    if p.newest is not None and entry.modified > p.newest:
        return False
    return True


_EVALUATORS: Dict[Type[Predicate], Callable[..., bool]] = {
    NameEquals: _eval_name_equals,
    Prefix: _eval_prefix,
    Suffix: _eval_suffix,
    Extension: _eval_extension,
    Wildcard: _eval_wildcard,
    Regex: _eval_regex,
    Size: _eval_size,
    Age: _eval_age,
    MaxDepth: lambda p, e: e.depth <= p.limit,
    IsDirectory: lambda p, e: e.is_dir,
    IsFile: lambda p, e: not e.is_dir,
    AlwaysTrue: lambda p, e: True,
    AlwaysFalse: lambda p, e: False,
    And: lambda p, e: all(evaluate(c, e) for c in p.children),
    Or: lambda p, e: any(evaluate(c, e) for c in p.children),
    Not: lambda p, e: not evaluate(p.child, e),
}


def evaluate(predicate: Predicate, entry: Entry) -> bool:
    """Return whether `predicate` accepts `entry`. Pure; performs no I/O."""
    try:
        fn = _EVALUATORS[type(predicate)]
    except KeyError:
        raise InvalidArgumentError(
            f"Unsupported predicate type: {type(predicate).__name__}"
        ) from None
    return fn(predicate, entry)


# ------------------------------
# Builders
# ------------------------------


def name_equals(*names: str, case_sensitive: bool = True) -> NameEquals:
    return NameEquals(names, case_sensitive)


def prefix(*prefixes: str, case_sensitive: bool = True) -> Prefix:
    return Prefix(prefixes, case_sensitive)


def suffix(*suffixes: str, case_sensitive: bool = True) -> Suffix:
    return Suffix(suffixes, case_sensitive)


def extension(*extensions: str, case_sensitive: bool = True) -> Extension:
    return Extension(frozenset(extensions), case_sensitive)


def wildcard(*patterns: str, case_sensitive: bool = True) -> Wildcard:
    return Wildcard(patterns, case_sensitive)


def regex(pattern: str, case_sensitive: bool = True) -> Regex:
    return Regex(pattern, case_sensitive)


def size_range(minimum: Optional[int] = None, maximum: Optional[int] = None) -> Size:
    return Size(minimum, maximum)


def age_range(
    newer_than: Optional[Timestamp] = None, older_than: Optional[Timestamp] = None
) -> Age:
    """
    Accept entries modified within [newer_than, older_than].

    Bounds may be POSIX timestamps or datetimes; both ends are inclusive.
    """
    return Age(newest=_as_seconds(older_than), oldest=_as_seconds(newer_than))


def and_(*predicates: Predicate) -> And:
    return And(predicates)


def or_(*predicates: Predicate) -> Or:
    return Or(predicates)


def not_(predicate: Predicate) -> Not:
    return Not(predicate)


def file_only(predicate: Optional[Predicate] = None) -> And:
    return And((IS_FILE, predicate or ALWAYS_TRUE))


def directory_only(predicate: Optional[Predicate] = None) -> And:
    return And((IS_DIRECTORY, predicate or ALWAYS_TRUE))


def exclude_names(
    predicate: Optional[Predicate], *names: str, case_sensitive: bool = True
) -> And:
    """Compose `predicate` with a rejection of the given exact names."""
    return And((predicate or ALWAYS_TRUE, Not(NameEquals(names, case_sensitive))))


def cvs_aware(predicate: Optional[Predicate] = None) -> And:
    return exclude_names(predicate, "CVS")


def svn_aware(predicate: Optional[Predicate] = None) -> And:
    return exclude_names(predicate, ".svn")
