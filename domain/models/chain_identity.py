"""
Exercise chain identity.

All instances of "the same exercise" across the weeks of a program enrollment
form a chain. A chain is identified by the canonical exercise id when present,
otherwise by the id of a user-defined substitute. Instances with neither
cannot be chained.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChainKind(str, Enum):
    ORIGINAL = "original"
    CUSTOM = "custom"
    NONE = "none"


# Store column holding the id for each kind
CHAIN_COLUMNS = {
    ChainKind.ORIGINAL: "exercicio_original_id",
    ChainKind.CUSTOM: "substituto_custom_id",
}


@dataclass(frozen=True)
class ChainIdentity:
    """Original(id) | Custom(id) | None."""

    kind: ChainKind
    value: Optional[str] = None

    @classmethod
    def original(cls, exercise_id: str) -> "ChainIdentity":
        return cls(ChainKind.ORIGINAL, exercise_id)

    @classmethod
    def custom(cls, custom_id: str) -> "ChainIdentity":
        return cls(ChainKind.CUSTOM, custom_id)

    @classmethod
    def none(cls) -> "ChainIdentity":
        return cls(ChainKind.NONE)

    @classmethod
    def from_ids(
        cls,
        exercicio_original_id: Optional[str],
        substituto_custom_id: Optional[str],
    ) -> "ChainIdentity":
        """Original id wins over the custom substitute id."""
        if exercicio_original_id:
            return cls.original(exercicio_original_id)
        if substituto_custom_id:
            return cls.custom(substituto_custom_id)
        return cls.none()

    @property
    def is_chainable(self) -> bool:
        return self.kind is not ChainKind.NONE

    @property
    def column(self) -> str:
        """Store column to filter on; raises for an unchainable identity."""
        if not self.is_chainable:
            raise ValueError("Unchainable exercise has no chain column")
        return CHAIN_COLUMNS[self.kind]

    def matches(self, row: dict) -> bool:
        """True if a store row belongs to this chain."""
        if not self.is_chainable:
            return False
        return row.get(self.column) == self.value

    def __str__(self) -> str:
        if not self.is_chainable:
            return "none"
        return f"{self.kind.value}:{self.value}"
