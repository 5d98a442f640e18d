# guildwarden/bot.py
from dataclasses import replace

import discord
from discord import Client

from .cache import DiscordClientState, EntityCache, InMemoryEntityCache
from .config import get_default_audit_reason, get_dm_send_delay
from .dm import DMChannelResolver
from .members import MemberService
from .models import AgentContext, EditMemberOptions
from .transport import DiscordHTTPTransport

_bot: Client | None = None
_member_service: MemberService | None = None
_dm_resolver: DMChannelResolver | None = None
# Outlives set_bot so DM entries survive reconnects
_channel_cache: EntityCache = InMemoryEntityCache()


def set_bot(bot: Client, channel_cache: EntityCache | None = None) -> None:
    """
    Set the Discord bot instance and wire services to it. Called on every ready.

    Pass channel_cache to share the DM channel cache with whatever ingests
    gateway channel events; otherwise the module-level cache is reused.
    """
    global _bot, _member_service, _dm_resolver, _channel_cache
    if channel_cache is not None:
        _channel_cache = channel_cache
    transport = DiscordHTTPTransport(bot)
    _bot = bot
    _member_service = MemberService(DiscordClientState(bot), transport)
    _dm_resolver = DMChannelResolver(
        _channel_cache, transport, send_delay=get_dm_send_delay()
    )


def get_bot() -> Client | None:
    """Get the Discord bot instance."""
    return _bot


def get_channel_cache() -> EntityCache:
    return _channel_cache


def get_member_service() -> MemberService | None:
    return _member_service


def get_dm_resolver() -> DMChannelResolver | None:
    return _dm_resolver


def get_agent_context() -> AgentContext | None:
    """Build the acting identity from the logged-in bot user."""
    if _bot is None or _bot.user is None:
        return None
    return AgentContext(agent_id=_bot.user.id)


def _require_ready() -> tuple[MemberService, AgentContext]:
    agent = get_agent_context()
    if _member_service is None or agent is None:
        raise RuntimeError("Bot is not set or not logged in")
    return _member_service, agent


async def add_role(guild_id: int, member_id: int, role_id: int, reason: str | None = None):
    service, agent = _require_ready()
    return await service.add_role(
        agent, guild_id, member_id, role_id, reason or get_default_audit_reason()
    )


async def remove_role(guild_id: int, member_id: int, role_id: int, reason: str | None = None):
    service, agent = _require_ready()
    return await service.remove_role(
        agent, guild_id, member_id, role_id, reason or get_default_audit_reason()
    )


async def kick(guild_id: int, member_id: int, reason: str | None = None):
    service, agent = _require_ready()
    return await service.kick(agent, guild_id, member_id, reason or get_default_audit_reason())


async def edit_member(guild_id: int, member_id: int, options: EditMemberOptions):
    service, agent = _require_ready()
    if options.reason is None:
        options = replace(options, reason=get_default_audit_reason())
    return await service.edit_member(agent, guild_id, member_id, options)


async def send_direct_message(user_id: int, content: str) -> discord.Message:
    if _dm_resolver is None:
        raise RuntimeError("Bot is not set")
    return await _dm_resolver.send(user_id, content)
