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

from abc import ABC, abstractmethod
from typing import Optional, Tuple


class NamingRulesPort(ABC):
    """Platform rules for legal and reserved file names."""

    @abstractmethod
    def is_legal_name(self, candidate: Optional[str]) -> bool:
        """False for None, empty, reserved, or names with illegal characters."""
        raise NotImplementedError

    @abstractmethod
    def is_reserved_name(self, candidate: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def illegal_characters(self) -> Tuple[str, ...]:
        """Characters never allowed in a name, sorted ascending."""
        raise NotImplementedError

    @abstractmethod
    def sanitize(self, candidate: str, replacement: str) -> str:
        """Replace every illegal character of `candidate` with `replacement`."""
        raise NotImplementedError
