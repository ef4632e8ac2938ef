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

import logging
from pathlib import Path
from typing import Union

from ..domain.errors import InvalidArgumentError
from ..ports.naming import NamingRulesPort

logger = logging.getLogger(__name__)


class NamingService:
    """
    Builds paths for new entries using a platform's naming rules.

    Only meant for callers about to create files; walks never consult it.
    """

    def __init__(self, rules: NamingRulesPort) -> None:
        self._rules = rules

    def child_path(
        self, directory: Union[str, Path], candidate: str, replacement: str = "_"
    ) -> Path:
        """
        Return `directory / name`, where `name` is `candidate` made legal.

        Raises:
            InvalidArgumentError: if `replacement` is itself illegal, or the
            sanitized name is still illegal or reserved.
        """
        if len(replacement) != 1 or replacement in self._rules.illegal_characters():
            raise InvalidArgumentError(
                f"The replacement character {replacement!r} is not a legal name character"
            )
        if not candidate:
            raise InvalidArgumentError("Cannot build a path from an empty name")

        name = candidate
        if not self._rules.is_legal_name(name):
            name = self._rules.sanitize(candidate, replacement)
            logger.debug("NamingService: %r sanitized to %r", candidate, name)

        if self._rules.is_reserved_name(name) or not self._rules.is_legal_name(name):
            raise InvalidArgumentError(f"{candidate!r} cannot be made into a legal name")
        return Path(directory) / name
