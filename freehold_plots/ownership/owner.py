"""
Owner Types
===========

Bounded Context: Principals that can own plots.

Types:
- Group: Named set of users with ranks
- Owner: Tagged union, either a single user or a group

Stored formats (kept for compatibility with existing rows):
- owner: ``P:<user-id>`` or ``G:<group-name>``
- group users: ``<user-id>,<RANK>|<user-id>,<RANK>|``
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional

from freehold_plots.ranks import Rank
from freehold_plots.results import Result


@dataclass
class Group:
    """
    Named user group.

    Membership operations return Result values:
    ALREADY_PRESENT when adding an existing member, NOT_PRESENT when removing
    or re-ranking a non-member.

    Attributes:
        name: Unique group name
        users: user id -> rank
        chat_color: Optional display color name
        is_everyone: Marks the reserved group that stands for every user
    """

    name: str
    users: Dict[str, Rank] = field(default_factory=dict)
    chat_color: Optional[str] = None
    is_everyone: bool = False

    @classmethod
    def founded(cls, name: str, founder: str) -> "Group":
        """New group whose founder is its operator."""
        return cls(name=name, users={founder: Rank.OPERATOR})

    @classmethod
    def everyone(cls, name: str = "Wilderness") -> "Group":
        return cls(name=name, users={}, is_everyone=True)

    def rank_of(self, user_id: str) -> Optional[Rank]:
        return self.users.get(user_id)

    def add_user(self, user_id: str, rank: Rank = Rank.MEMBER) -> Result:
        if user_id in self.users:
            return Result.FAILURE_ALREADY_PRESENT
        self.users[user_id] = rank
        return Result.SUCCESS

    def remove_user(self, user_id: str) -> Result:
        if user_id not in self.users:
            return Result.FAILURE_NOT_PRESENT
        del self.users[user_id]
        return Result.SUCCESS

    def rank_user(self, user_id: str, rank: Rank) -> Result:
        if user_id not in self.users:
            return Result.FAILURE_NOT_PRESENT
        self.users[user_id] = rank
        return Result.SUCCESS

    def serialize_users(self) -> str:
        return "".join(f"{user_id},{rank.name}|" for user_id, rank in self.users.items())

    @staticmethod
    def parse_users(text: str) -> Dict[str, Rank]:
        """
        Decode ``id,RANK|`` entries.

        Raises:
            ValueError: If a rank name is unknown
        """
        users: Dict[str, Rank] = {}
        for part in (text or "").split("|"):
            if "," not in part:
                continue
            user_id, rank_name = part.split(",", 1)
            users[user_id.strip()] = Rank.parse(rank_name)
        return users


class OwnerKind(str, Enum):
    USER = "P"
    GROUP = "G"


@dataclass(frozen=True)
class Owner:
    """
    Plot owner: exactly one of a user id or a group, selected by ``kind``.

    Build with Owner.user() or Owner.of_group(); branch on ``kind``.
    """

    kind: OwnerKind
    user_id: Optional[str] = None
    group: Optional[Group] = field(default=None, compare=False)
    group_name: Optional[str] = None

    def __post_init__(self):
        if self.kind is OwnerKind.USER and not self.user_id:
            raise ValueError("User owner requires a user_id")
        if self.kind is OwnerKind.GROUP and self.group is None:
            raise ValueError("Group owner requires a group")

    @classmethod
    def user(cls, user_id: str) -> "Owner":
        return cls(kind=OwnerKind.USER, user_id=user_id)

    @classmethod
    def of_group(cls, group: Group) -> "Owner":
        return cls(kind=OwnerKind.GROUP, group=group, group_name=group.name)

    @property
    def name(self) -> str:
        if self.kind is OwnerKind.USER:
            return self.user_id
        return self.group.name

    def serialize(self) -> str:
        if self.kind is OwnerKind.USER:
            return f"P:{self.user_id}"
        return f"G:{self.group.name}"

    @classmethod
    def parse(
        cls,
        text: Optional[str],
        group_lookup: Callable[[str], Optional[Group]],
    ) -> Optional["Owner"]:
        """
        Decode a stored owner string.

        Args:
            text: ``P:<id>``, ``G:<name>``, or empty/None for a vacant plot
            group_lookup: Resolves a group name to a Group

        Returns:
            Owner, or None for empty text or a group that no longer exists

        Raises:
            ValueError: If the prefix is unknown
        """
        if not text:
            return None
        prefix, _, value = text.partition(":")
        if prefix == OwnerKind.USER.value and value:
            return cls.user(value)
        if prefix == OwnerKind.GROUP.value and value:
            group = group_lookup(value)
            return cls.of_group(group) if group is not None else None
        raise ValueError(f"Invalid owner string: {text!r}")
