"""Access levels granted by an ACL entry."""

from collections.abc import Iterable
from enum import StrEnum


class AccessLevel(StrEnum):
    """Access level on a shared entity: readwrite > readonly > none."""

    NONE = "n"
    READONLY = "r"
    READWRITE = "rw"

    @classmethod
    def sorted_levels(cls) -> tuple["AccessLevel", ...]:
        """Levels from most to least permissive."""
        return (cls.READWRITE, cls.READONLY, cls.NONE)

    @classmethod
    def highest(cls, levels: Iterable["AccessLevel"]) -> "AccessLevel":
        """Most permissive level among levels, NONE when there are none."""
        present = set(levels)
        for level in cls.sorted_levels():
            if level in present:
                return level
        return cls.NONE

    @property
    def rank(self) -> int:
        """Position in sorted_levels(); lower is more permissive."""
        return self.sorted_levels().index(self)

    @property
    def is_readable(self) -> bool:
        return self is not AccessLevel.NONE

    def allows(self, required: "AccessLevel") -> bool:
        """True if this level is at least as permissive as required."""
        return self.rank <= required.rank
