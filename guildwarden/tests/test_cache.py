"""Tests for cache collaborators."""

from unittest.mock import MagicMock

import discord

from guildwarden.tests.helpers import GUILD_ID


def make_discord_role(role_id: int, position: int, guild, **permissions):
    role = MagicMock(spec=discord.Role)
    role.id = role_id
    role.position = position
    role.guild = guild
    role.permissions = discord.Permissions(**permissions)
    return role


def make_discord_guild():
    guild = MagicMock(spec=discord.Guild)
    guild.id = GUILD_ID
    guild.owner_id = 1
    default_role = make_discord_role(GUILD_ID, 0, guild)
    mod_role = make_discord_role(500, 4, guild, kick_members=True)
    guild.roles = [default_role, mod_role]

    member = MagicMock(spec=discord.Member)
    member.id = 42
    member.guild = guild
    member.nick = "Mod"
    member.roles = [default_role, mod_role]
    member.voice = MagicMock()
    member.voice.mute = True
    member.voice.deaf = False
    member.voice.channel.id = 900

    guild.members = [member]
    guild.get_member = MagicMock(side_effect=lambda user_id: member if user_id == 42 else None)
    return guild


class TestInMemoryEntityCache:
    def test_get_set_delete(self):
        from guildwarden.cache import InMemoryEntityCache

        cache = InMemoryEntityCache()
        cache.set("channels", 1, "a")

        assert cache.get("channels", 1) == "a"
        assert cache.get("guilds", 1) is None

        cache.delete("channels", 1)
        cache.delete("channels", 1)  # deleting a missing key is a no-op

        assert cache.get("channels", 1) is None
        assert cache.keys("channels") == []

    def test_put_and_get_guild(self):
        from guildwarden.cache import InMemoryEntityCache
        from guildwarden.models import Guild

        cache = InMemoryEntityCache()
        guild = Guild(id=GUILD_ID)
        cache.put_guild(guild)

        assert cache.get_guild(GUILD_ID) is guild


class TestDiscordClientState:
    def test_maps_roles_and_members(self):
        from guildwarden.cache import DiscordClientState
        from guildwarden.permissions import permissions_for

        discord_guild = make_discord_guild()
        client = MagicMock(spec=discord.Client)
        client.get_guild = MagicMock(return_value=discord_guild)

        guild = DiscordClientState(client).get_guild(GUILD_ID)

        assert guild.owner_id == 1
        assert guild.default_role.id == GUILD_ID
        assert guild.get_role(500).position == 4

        member = guild.get_member(42)
        assert member.role_ids == frozenset({500})
        assert member.nick == "Mod"
        assert member.mute is True
        assert member.channel_id == 900
        assert guild.get_member(43) is None
        assert list(guild.members) == [42]
        assert permissions_for(guild, 42).kick_members

    def test_unknown_guild_is_none(self):
        from guildwarden.cache import DiscordClientState

        client = MagicMock(spec=discord.Client)
        client.get_guild = MagicMock(return_value=None)

        assert DiscordClientState(client).get_guild(GUILD_ID) is None
