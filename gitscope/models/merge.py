"""Conflict section models"""
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class ConflictSection:
    """A run of lines between conflict markers, grouped by side label."""
    index: int
    sides: Mapping[str, Tuple[str, ...]]

    def __getitem__(self, side: str) -> Tuple[str, ...]:
        return self.sides[side]

    def get(self, side: str, default: Optional[Tuple[str, ...]] = None) -> Optional[Tuple[str, ...]]:
        return self.sides.get(side, default)

    @property
    def is_conflict(self) -> bool:
        """True when the section holds more than one side."""
        return len(self.sides) > 1


@dataclass(frozen=True)
class ConflictParse:
    """Result of parsing a file with conflict markers."""
    sections: Tuple[ConflictSection, ...]
    conflicts: int

    def __len__(self) -> int:
        return len(self.sections)
