"""
Configuration schema for the plot engine.

Defines the wilderness identity, the capability that unlocks claiming in the
wilderness, and the minimum rank each plot or group action requires
(0=outsider, 1=member, 2=assistant, 3=operator).
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Union

import yaml

from freehold_plots.ranks import Rank

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


def _validate_levels(section: object) -> None:
    for f in fields(section):
        level = getattr(section, f.name)
        if not isinstance(level, int) or not 0 <= level <= 3:
            raise ValueError(
                f"{type(section).__name__}.{f.name} must be a rank level in [0, 3], got {level!r}"
            )


def _rank_for(section: object, action: str) -> Rank:
    names = {f.name for f in fields(section)}
    if action not in names:
        raise ValueError(
            f"Unknown action: {action!r}. Must be one of {sorted(names)}"
        )
    return Rank.from_level(getattr(section, action))


@dataclass(frozen=True)
class PlotRankConfig:
    """Minimum rank per plot action."""

    build: int = 2
    break_blocks: int = 2
    entity: int = 1
    use: int = 0
    claim: int = 2
    give: int = 2
    rename: int = 3
    delete: int = 3

    def __post_init__(self):
        _validate_levels(self)

    def rank_for(self, action: str) -> Rank:
        return _rank_for(self, action)


@dataclass(frozen=True)
class GroupRankConfig:
    """Minimum rank per group action."""

    add: int = 2
    list: int = 0
    remove: int = 3
    rank: int = 3

    def __post_init__(self):
        _validate_levels(self)

    def rank_for(self, action: str) -> Rank:
        return _rank_for(self, action)


@dataclass(frozen=True)
class PlotConfig:
    """
    Main configuration for the plot engine.

    Loaded from YAML and validated at construction.
    Immutable after construction (frozen dataclass).
    """

    wilderness_id: int = -1
    wilderness_group_name: str = "Wilderness"
    wilderness_claim_capability: str = "freehold.wilderness.claim"
    max_parent_chain: int = 100
    log_level: str = "INFO"

    plot_ranks: PlotRankConfig = field(default_factory=PlotRankConfig)
    group_ranks: GroupRankConfig = field(default_factory=GroupRankConfig)

    def __post_init__(self):
        """Validate plot configuration."""
        if self.wilderness_id >= 0:
            raise ValueError(
                f"wilderness_id must be negative, got {self.wilderness_id}"
            )

        if not self.wilderness_group_name:
            raise ValueError("wilderness_group_name cannot be empty")

        if not self.wilderness_claim_capability:
            raise ValueError("wilderness_claim_capability cannot be empty")

        if self.max_parent_chain < 1:
            raise ValueError(
                f"max_parent_chain must be >= 1, got {self.max_parent_chain}"
            )

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {sorted(_LOG_LEVELS)}"
            )

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "PlotConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            wilderness_group_name: "Wilderness"
            wilderness_claim_capability: "freehold.wilderness.claim"
            max_parent_chain: 100
            log_level: "INFO"

            plot_ranks:
              build: 2
              break_blocks: 2
              claim: 2
              give: 2

            group_ranks:
              add: 2
              remove: 3
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

        try:
            plot_ranks = PlotRankConfig(**data.get("plot_ranks", {}))
            group_ranks = GroupRankConfig(**data.get("group_ranks", {}))
            return cls(
                wilderness_id=data.get("wilderness_id", -1),
                wilderness_group_name=data.get("wilderness_group_name", "Wilderness"),
                wilderness_claim_capability=data.get(
                    "wilderness_claim_capability", "freehold.wilderness.claim"
                ),
                max_parent_chain=data.get("max_parent_chain", 100),
                log_level=data.get("log_level", "INFO"),
                plot_ranks=plot_ranks,
                group_ranks=group_ranks,
            )
        except TypeError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
