"""
Entity cache collaborators.

The authorization layer reads guild state through GuildStateReader and keeps
DM channels in an EntityCache. InMemoryEntityCache covers both and is what
tests and the default wiring use; DiscordClientState reads guild state
straight from a connected discord.py client.
"""

from collections.abc import Iterator, Mapping
from typing import Any, Protocol

import discord

from .models import Guild, Member, Role

GUILDS = "guilds"
CHANNELS = "channels"


class EntityCache(Protocol):
    def get(self, table: str, key: Any) -> Any | None: ...

    def set(self, table: str, key: Any, value: Any) -> None: ...

    def delete(self, table: str, key: Any) -> None: ...


class GuildStateReader(Protocol):
    def get_guild(self, guild_id: int) -> Guild | None: ...


class InMemoryEntityCache:
    """Dict-backed cache keyed by table name then entity key."""

    def __init__(self):
        self._tables: dict[str, dict[Any, Any]] = {}

    def get(self, table: str, key: Any) -> Any | None:
        return self._tables.get(table, {}).get(key)

    def set(self, table: str, key: Any, value: Any) -> None:
        self._tables.setdefault(table, {})[key] = value

    def delete(self, table: str, key: Any) -> None:
        self._tables.get(table, {}).pop(key, None)

    def keys(self, table: str) -> list:
        return list(self._tables.get(table, {}))

    def get_guild(self, guild_id: int) -> Guild | None:
        return self.get(GUILDS, guild_id)

    def put_guild(self, guild: Guild) -> None:
        self.set(GUILDS, guild.id, guild)


def role_from_discord(role: discord.Role) -> Role:
    return Role(
        id=role.id,
        position=role.position,
        guild_id=role.guild.id,
        permissions=role.permissions,
    )


def member_from_discord(member: discord.Member) -> Member:
    guild_id = member.guild.id
    voice = member.voice
    return Member(
        user_id=member.id,
        guild_id=guild_id,
        # member.roles always includes the default role
        role_ids=frozenset(role.id for role in member.roles if role.id != guild_id),
        nick=member.nick,
        mute=bool(voice and voice.mute),
        deaf=bool(voice and voice.deaf),
        channel_id=voice.channel.id if voice and voice.channel else None,
    )


class _MemberView(Mapping):
    """Lazy member lookup over a discord.Guild's member cache."""

    def __init__(self, guild: discord.Guild):
        self._guild = guild

    def __getitem__(self, user_id: int) -> Member:
        member = self._guild.get_member(user_id)
        if member is None:
            raise KeyError(user_id)
        return member_from_discord(member)

    def __iter__(self) -> Iterator[int]:
        return (member.id for member in self._guild.members)

    def __len__(self) -> int:
        return len(self._guild.members)


class DiscordClientState:
    """GuildStateReader backed by a connected discord.py client's cache."""

    def __init__(self, client: discord.Client):
        self._client = client

    def get_guild(self, guild_id: int) -> Guild | None:
        guild = self._client.get_guild(int(guild_id))
        if guild is None:
            return None
        return Guild(
            id=guild.id,
            owner_id=guild.owner_id,
            roles={role.id: role_from_discord(role) for role in guild.roles},
            members=_MemberView(guild),
        )
