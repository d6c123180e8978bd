"""
Table and index definitions shared by every document store backend.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from teamchat.store.exceptions import UnknownIndexError


@dataclass(frozen=True)
class Index:
    name: str
    fields: Tuple[str, ...]
    unique: bool = False


@dataclass(frozen=True)
class Table:
    name: str
    columns: Tuple[str, ...]
    indexes: Dict[str, Index] = field(default_factory=dict)

    def index(self, name: str) -> Index:
        try:
            return self.indexes[name]
        except KeyError:
            raise UnknownIndexError(self.name, name)


def _table(name: str, columns: Tuple[str, ...], *indexes: Index) -> Table:
    return Table(name=name, columns=columns, indexes={i.name: i for i in indexes})


BY_WORKSPACE_ID = Index("by_workspace_id", ("workspace_id",))

TABLES: Dict[str, Table] = {
    t.name: t
    for t in (
        _table("workspaces", ("name", "join_code", "user_id")),
        _table(
            "members",
            ("user_id", "workspace_id", "role"),
            Index("by_user_id", ("user_id",)),
            BY_WORKSPACE_ID,
            Index("by_workspace_id_user_id", ("workspace_id", "user_id"), unique=True),
        ),
        _table("channels", ("name", "workspace_id"), BY_WORKSPACE_ID),
        _table(
            "conversations",
            ("workspace_id", "member_one_id", "member_two_id"),
            BY_WORKSPACE_ID,
            Index("by_member_one_id", ("member_one_id",)),
            Index("by_member_two_id", ("member_two_id",)),
        ),
        _table(
            "messages",
            (
                "body", "image", "member_id", "workspace_id", "channel_id",
                "parent_message_id", "conversation_id", "updated_at",
            ),
            BY_WORKSPACE_ID,
            Index("by_member_id", ("member_id",)),
            Index("by_channel_id", ("channel_id",)),
        ),
        _table(
            "reactions",
            ("workspace_id", "message_id", "member_id", "value"),
            BY_WORKSPACE_ID,
            Index("by_member_id", ("member_id",)),
        ),
    )
}

# Tables removed together with their workspace
WORKSPACE_DEPENDENT_TABLES: Tuple[str, ...] = (
    "members", "channels", "conversations", "messages", "reactions",
)
