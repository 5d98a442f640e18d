"""Permission gate - does the bot hold a capability in a guild?"""

import enum
from collections.abc import Iterable

import discord

from .errors import ErrorKind
from .models import AgentContext, Guild


class Capability(str, enum.Enum):
    """Capabilities gating member mutations, named after discord.Permissions flags."""

    MANAGE_ROLES = "manage_roles"
    KICK_MEMBERS = "kick_members"
    MANAGE_NICKNAMES = "manage_nicknames"
    MUTE_MEMBERS = "mute_members"
    DEAFEN_MEMBERS = "deafen_members"
    MOVE_MEMBERS = "move_members"

    @property
    def error_kind(self) -> ErrorKind:
        return ErrorKind[f"MISSING_{self.name}"]


def permissions_for(guild: Guild | None, agent_id: int) -> discord.Permissions:
    """
    Compute an agent's guild-level permissions from cached roles.

    Combines the default role with every role the agent holds. The guild
    owner and administrators get everything. Unknown guild or a member that
    isn't resident in the cache yields no permissions.
    """
    if guild is None:
        return discord.Permissions.none()
    if guild.owner_id is not None and guild.owner_id == agent_id:
        return discord.Permissions.all()

    member = guild.get_member(agent_id)
    if member is None:
        return discord.Permissions.none()

    value = 0
    default_role = guild.default_role
    if default_role is not None:
        value |= default_role.permissions.value
    for role_id in member.role_ids:
        role = guild.get_role(role_id)
        if role is not None:
            value |= role.permissions.value

    permissions = discord.Permissions(value)
    if permissions.administrator:
        return discord.Permissions.all()
    return permissions


def has_capability(
    guild: Guild | None,
    agent: AgentContext,
    required: Iterable[Capability],
) -> bool:
    """Return True only if the agent holds every required capability."""
    if guild is None:
        return False
    permissions = permissions_for(guild, agent.agent_id)
    return all(getattr(permissions, capability.value) for capability in required)
