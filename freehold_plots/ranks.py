"""Permission ranks shared by groups, the ownership policy and configuration."""

from enum import IntEnum


class Rank(IntEnum):
    """Rank inside a group. Higher value means more rights."""

    OUTSIDER = 0
    MEMBER = 1
    ASSISTANT = 2
    OPERATOR = 3

    @classmethod
    def from_level(cls, level: int) -> "Rank":
        try:
            return cls(int(level))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid rank level: {level!r} (expected 0-3)") from e

    @classmethod
    def parse(cls, name: str) -> "Rank":
        try:
            return cls[name.strip().upper()]
        except KeyError as e:
            raise ValueError(
                f"Unknown rank: {name!r}. Must be one of {[r.name.lower() for r in cls]}"
            ) from e
