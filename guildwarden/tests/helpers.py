"""Builders for cached guild state and a recording transport."""

from unittest.mock import AsyncMock, MagicMock

import discord

from guildwarden.cache import InMemoryEntityCache
from guildwarden.models import AgentContext, Guild, Member, Role

GUILD_ID = 100
OWNER_ID = 1
BOT_ID = 10
TARGET_ID = 20

BOT_ROLE_ID = 200
TARGET_ROLE_ID = 300


def build_guild(
    bot_position: int = 10,
    target_position: int = 3,
    bot_permissions: discord.Permissions | None = None,
    bot_has_role: bool = True,
    target_has_role: bool = True,
    default_permissions: discord.Permissions | None = None,
) -> Guild:
    """
    Build a guild with the bot and one target member.

    The bot holds BOT_ROLE_ID at bot_position; the target member holds
    TARGET_ROLE_ID at target_position.
    """
    roles = {
        GUILD_ID: Role(
            id=GUILD_ID,
            position=0,
            guild_id=GUILD_ID,
            permissions=default_permissions or discord.Permissions.none(),
        ),
        BOT_ROLE_ID: Role(
            id=BOT_ROLE_ID,
            position=bot_position,
            guild_id=GUILD_ID,
            permissions=bot_permissions or discord.Permissions.none(),
        ),
        TARGET_ROLE_ID: Role(id=TARGET_ROLE_ID, position=target_position, guild_id=GUILD_ID),
    }
    members = {
        BOT_ID: Member(
            user_id=BOT_ID,
            guild_id=GUILD_ID,
            role_ids=frozenset({BOT_ROLE_ID}) if bot_has_role else frozenset(),
        ),
        TARGET_ID: Member(
            user_id=TARGET_ID,
            guild_id=GUILD_ID,
            role_ids=frozenset({TARGET_ROLE_ID}) if target_has_role else frozenset(),
        ),
        OWNER_ID: Member(user_id=OWNER_ID, guild_id=GUILD_ID),
    }
    return Guild(id=GUILD_ID, owner_id=OWNER_ID, roles=roles, members=members)


def cache_with(guild: Guild | None = None) -> InMemoryEntityCache:
    cache = InMemoryEntityCache()
    if guild is not None:
        cache.put_guild(guild)
    return cache


def make_transport() -> MagicMock:
    """A transport whose calls are all AsyncMocks."""
    transport = MagicMock()
    transport.add_role = AsyncMock(return_value=None)
    transport.remove_role = AsyncMock(return_value=None)
    transport.kick = AsyncMock(return_value=None)
    transport.edit_member = AsyncMock(return_value={"user": {"id": str(TARGET_ID)}})
    transport.start_private_message = AsyncMock()
    transport.send_message = AsyncMock(return_value=None)
    return transport


def http_error(cls=discord.HTTPException, status: int = 500, message: str = "Error"):
    """Build a discord.py HTTP exception around a fake response."""
    response = MagicMock()
    response.status = status
    response.reason = message
    return cls(response, message)


BOT = AgentContext(agent_id=BOT_ID)
