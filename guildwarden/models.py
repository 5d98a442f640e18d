"""Snapshots of guild state read by the authorization layer.

These are read-only views of what the entity cache (or the live discord.py
cache) knows about a guild. Nothing in guildwarden mutates them; changes flow
back through the gateway event stream after a remote mutation succeeds.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

import discord


class _Unset:
    """Marker for an edit field that was not provided."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class AgentContext:
    """The acting bot identity, passed explicitly into every check."""

    agent_id: int


@dataclass(frozen=True)
class Role:
    id: int
    position: int
    guild_id: int
    permissions: discord.Permissions = field(default_factory=discord.Permissions.none)


@dataclass(frozen=True)
class Member:
    user_id: int
    guild_id: int
    role_ids: frozenset[int] = frozenset()
    nick: str | None = None
    mute: bool = False
    deaf: bool = False
    channel_id: int | None = None


@dataclass(frozen=True)
class Guild:
    """
    A guild with its roles and resident members.

    The default role shares the guild's id and is implicitly held by every
    member, so it never appears in Member.role_ids.
    """

    id: int
    owner_id: int | None = None
    roles: Mapping[int, Role] = field(default_factory=dict)
    members: Mapping[int, Member] = field(default_factory=dict)

    @property
    def default_role(self) -> Role | None:
        return self.roles.get(self.id)

    def get_role(self, role_id: int) -> Role | None:
        return self.roles.get(role_id)

    def get_member(self, user_id: int) -> Member | None:
        return self.members.get(user_id)


@dataclass
class EditMemberOptions:
    """
    Fields to patch on a member.

    Anything left as UNSET is neither validated nor sent. Setting nick to
    None clears the nickname; channel_id=None disconnects from voice.
    """

    nick: str | None | _Unset = UNSET
    roles: list[int] | _Unset = UNSET
    mute: bool | _Unset = UNSET
    deaf: bool | _Unset = UNSET
    channel_id: int | None | _Unset = UNSET
    reason: str | None = None

    def provided_fields(self) -> dict:
        """Return the patch body: only the fields that were set."""
        fields = {}
        for name in ("nick", "roles", "mute", "deaf", "channel_id"):
            value = getattr(self, name)
            if value is not UNSET:
                fields[name] = value
        return fields


@dataclass(frozen=True)
class DMChannel:
    """Normalized handle for a private one-to-one channel."""

    id: int
    recipient_id: int
    data: Mapping = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping, user_id: int) -> "DMChannel":
        """Build a handle from a create-DM response payload."""
        recipients = payload.get("recipients") or []
        recipient_id = int(recipients[0]["id"]) if recipients else user_id
        return cls(id=int(payload["id"]), recipient_id=recipient_id, data=dict(payload))
