"""
Bump levels for nexttag.

Levels form a small lattice: none < patch < minor < major. ``major`` is
absorbing (nothing overrides it) and ``wip`` is a marker meaning "ignore
this commit", not a level a resolution can end in.
"""

from enum import Enum
from typing import Union


class BumpLevel(Enum):
    """How far a release moves the version."""
    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    WIP = "wip"

    @classmethod
    def parse(cls, value: Union[str, 'BumpLevel']) -> 'BumpLevel':
        """
        Parse a level name (case-insensitive).

        Raises:
            ValueError: If the name is not a known level
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown bump level: {value!r}") from None

    @property
    def rank(self) -> int:
        if self is BumpLevel.WIP:
            raise TypeError("wip has no rank")
        return _RANKS[self]

    @property
    def is_release_level(self) -> bool:
        """True for levels that can be handed to an increment."""
        return self in (BumpLevel.PATCH, BumpLevel.MINOR, BumpLevel.MAJOR)

    def join(self, other: 'BumpLevel') -> 'BumpLevel':
        """Least upper bound of two levels; ``wip`` leaves the level as is."""
        if other is BumpLevel.WIP:
            return self
        if self is BumpLevel.WIP:
            return other
        return self if self.rank >= other.rank else other

    def __lt__(self, other: 'BumpLevel') -> bool:
        if not isinstance(other, BumpLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: 'BumpLevel') -> bool:
        if not isinstance(other, BumpLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: 'BumpLevel') -> bool:
        if not isinstance(other, BumpLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: 'BumpLevel') -> bool:
        if not isinstance(other, BumpLevel):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


_RANKS = {
    BumpLevel.NONE: 0,
    BumpLevel.PATCH: 1,
    BumpLevel.MINOR: 2,
    BumpLevel.MAJOR: 3,
}

# Levels accepted as the fallback bump of a release branch
RELEASE_LEVELS = ('patch', 'minor', 'major')
