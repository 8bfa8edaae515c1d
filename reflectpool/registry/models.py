"""Registry data models — directory entries for identifiers and aliases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from reflectpool.deco.alias import Alias
from reflectpool.deco.identifier import Identifier


class EntryType(Enum):
    IDENTIFIER = "identifier"
    ALIAS = "alias"


@dataclass
class DirectoryEntry:
    """What a name or declaring function resolves to in the registry."""

    type: EntryType | None = None
    identifier: Identifier | None = None
    alias: Alias | None = None

    @property
    def found(self) -> bool:
        return self.type is not None

    @property
    def canonical(self) -> Identifier | None:
        """The identifier itself, or the one an alias forwards to."""
        if self.identifier is not None:
            return self.identifier
        if self.alias is not None:
            return self.alias.identifier
        return None

    @property
    def description(self) -> str:
        if self.identifier is not None:
            return self.identifier.description
        if self.alias is not None:
            return self.alias.description
        return "<missing>"
