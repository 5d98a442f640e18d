"""
Remote request transport.

Retries, rate limiting and connection handling belong to discord.py's
HTTPClient; this module only maps member operations onto it. Errors it
raises (discord.Forbidden, discord.NotFound, discord.HTTPException,
aiohttp.ClientError) reach the caller unchanged.
"""

from typing import Any, Protocol

import discord


class Transport(Protocol):
    async def add_role(
        self, guild_id: int, member_id: int, role_id: int, *, reason: str | None = None
    ) -> Any: ...

    async def remove_role(
        self, guild_id: int, member_id: int, role_id: int, *, reason: str | None = None
    ) -> Any: ...

    async def kick(
        self, guild_id: int, member_id: int, *, reason: str | None = None
    ) -> Any: ...

    async def edit_member(
        self, guild_id: int, member_id: int, fields: dict, *, reason: str | None = None
    ) -> Any: ...

    async def start_private_message(self, user_id: int) -> dict: ...

    async def send_message(self, channel_id: int, content: str) -> Any: ...


class DiscordHTTPTransport:
    """Transport over a discord.py client's HTTP session."""

    def __init__(self, client: discord.Client):
        self._client = client

    async def add_role(self, guild_id, member_id, role_id, *, reason=None):
        # PUT /guilds/{guild_id}/members/{member_id}/roles/{role_id}
        return await self._client.http.add_role(guild_id, member_id, role_id, reason=reason)

    async def remove_role(self, guild_id, member_id, role_id, *, reason=None):
        # DELETE /guilds/{guild_id}/members/{member_id}/roles/{role_id}
        return await self._client.http.remove_role(
            guild_id, member_id, role_id, reason=reason
        )

    async def kick(self, guild_id, member_id, *, reason=None):
        # DELETE /guilds/{guild_id}/members/{member_id}
        return await self._client.http.kick(member_id, guild_id, reason=reason)

    async def edit_member(self, guild_id, member_id, fields, *, reason=None):
        # PATCH /guilds/{guild_id}/members/{member_id}
        return await self._client.http.edit_member(
            guild_id, member_id, reason=reason, **fields
        )

    async def start_private_message(self, user_id):
        # POST /users/@me/channels
        return await self._client.http.start_private_message(user_id)

    async def send_message(self, channel_id, content):
        channel = self._client.get_partial_messageable(
            channel_id, type=discord.ChannelType.private
        )
        return await channel.send(content)
