from pathlib import Path
from typing import Optional, Tuple

import pytest

from pathsieve.domain import InvalidArgumentError
from pathsieve.ports.naming import NamingRulesPort
from pathsieve.services import NamingService


class PosixLikeRules(NamingRulesPort):
    ILLEGAL = ("\0", "/")
    RESERVED = (".", "..")

    def is_legal_name(self, candidate: Optional[str]) -> bool:
        if not candidate or self.is_reserved_name(candidate):
            return False
        return not any(ch in candidate for ch in self.ILLEGAL)

    def is_reserved_name(self, candidate: str) -> bool:
        return candidate in self.RESERVED

    def illegal_characters(self) -> Tuple[str, ...]:
        return self.ILLEGAL

    def sanitize(self, candidate: str, replacement: str) -> str:
        return "".join(replacement if ch in self.ILLEGAL else ch for ch in candidate)


def test_legal_name_is_kept(tmp_path: Path):
    svc = NamingService(PosixLikeRules())
    assert svc.child_path(tmp_path, "report.txt") == tmp_path / "report.txt"


def test_illegal_characters_are_replaced(tmp_path: Path):
    svc = NamingService(PosixLikeRules())
    assert svc.child_path(tmp_path, "a/b\0c", "-") == tmp_path / "a-b-c"


def test_illegal_replacement_is_rejected(tmp_path: Path):
    svc = NamingService(PosixLikeRules())
    with pytest.raises(InvalidArgumentError) as exc:
        svc.child_path(tmp_path, "Test", "\0")
    assert str(exc.value).startswith("The replacement character")


@pytest.mark.parametrize("name", ["", ".."])
def test_unusable_names_are_rejected(tmp_path: Path, name):
    svc = NamingService(PosixLikeRules())
    with pytest.raises(InvalidArgumentError):
        svc.child_path(tmp_path, name)
