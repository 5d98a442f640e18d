"""
Member mutations - authorize locally, then dispatch.

Every operation follows the same sequence: validate the request, check role
hierarchy and permissions against cached guild state, and only then send the
request. The first failing check raises; nothing is sent for a rejected
request.

Main entry points:
- MemberService.add_role / remove_role - attach or detach a role
- MemberService.kick - remove a member from the guild
- MemberService.edit_member - patch nickname, roles, voice flags, channel
- MemberService.apply - run a batch and collect one outcome per mutation
"""

import enum
import logging
from dataclasses import dataclass, replace
from typing import Any

import aiohttp
import discord
import sentry_sdk

from .cache import GuildStateReader
from .errors import (
    ErrorKind,
    HierarchyTooLow,
    InvalidNickname,
    MemberMutationError,
    MissingCapability,
    RoleNotFound,
)
from .hierarchy import highest_role, is_higher_position, position_of
from .models import UNSET, AgentContext, EditMemberOptions, Guild
from .permissions import Capability, has_capability
from .transport import Transport

logger = logging.getLogger(__name__)

NICKNAME_MAX_LENGTH = 32


class MutationKind(str, enum.Enum):
    add_role = "add_role"
    remove_role = "remove_role"
    kick = "kick"
    edit_member = "edit_member"


@dataclass
class MemberMutation:
    """One queued mutation for MemberService.apply."""

    kind: MutationKind
    guild_id: int
    member_id: int
    role_id: int | None = None
    options: EditMemberOptions | None = None
    reason: str | None = None


@dataclass
class MutationOutcome:
    """Result of one mutation in a batch: ok with a result, or a failure kind."""

    mutation: MemberMutation
    ok: bool
    kind: ErrorKind | None = None
    error: BaseException | None = None
    result: Any = None


def classify_remote_error(error: BaseException) -> ErrorKind:
    """Map a transport exception onto an ErrorKind without reinterpreting it."""
    if isinstance(error, discord.RateLimited):
        return ErrorKind.REMOTE_RATE_LIMITED
    if isinstance(error, discord.HTTPException) and error.status == 429:
        return ErrorKind.REMOTE_RATE_LIMITED
    if isinstance(error, discord.Forbidden):
        return ErrorKind.REMOTE_FORBIDDEN
    if isinstance(error, discord.NotFound):
        return ErrorKind.REMOTE_NOT_FOUND
    if isinstance(error, discord.HTTPException):
        return ErrorKind.REMOTE_HTTP_ERROR
    return ErrorKind.TRANSPORT_UNREACHABLE


class MemberService:
    """Authorization-and-dispatch layer for member mutations."""

    def __init__(self, guilds: GuildStateReader, transport: Transport):
        self._guilds = guilds
        self._transport = transport

    def _guild(self, guild_id: int) -> Guild | None:
        return self._guilds.get_guild(guild_id)

    def _require(self, guild: Guild | None, agent: AgentContext, capability: Capability) -> None:
        if not has_capability(guild, agent, [capability]):
            raise MissingCapability(capability)

    def _require_outranks_role(self, guild: Guild | None, agent: AgentContext, role_id: int) -> None:
        if guild is None:
            raise HierarchyTooLow(f"Guild not in cache, cannot rank role {role_id}")
        role = guild.get_role(role_id)
        if role is None:
            raise RoleNotFound(role_id)
        if guild.owner_id == agent.agent_id:
            return
        if not is_higher_position(guild, highest_role(guild, agent.agent_id), role):
            raise HierarchyTooLow()

    def _require_outranks_member(
        self, guild: Guild | None, agent: AgentContext, member_id: int
    ) -> None:
        if guild is None:
            raise HierarchyTooLow(f"Guild not in cache, cannot rank member {member_id}")
        if guild.owner_id == member_id:
            raise HierarchyTooLow("The guild owner cannot be targeted")
        if guild.owner_id == agent.agent_id:
            return
        bot_position = position_of(guild, highest_role(guild, agent.agent_id))
        member_position = position_of(guild, highest_role(guild, member_id))
        if bot_position <= member_position:
            raise HierarchyTooLow()

    async def add_role(
        self,
        agent: AgentContext,
        guild_id: int,
        member_id: int,
        role_id: int,
        reason: str | None = None,
    ):
        """
        Add a role to a member.

        Raises:
            HierarchyTooLow: The bot's highest role doesn't outrank the role.
            RoleNotFound: The role isn't in cached guild state.
            MissingCapability: The bot lacks manage_roles.
            discord.HTTPException: The request itself failed.
        """
        guild = self._guild(guild_id)
        try:
            self._require_outranks_role(guild, agent, role_id)
            self._require(guild, agent, Capability.MANAGE_ROLES)
        except MemberMutationError as e:
            logger.warning(f"Refusing to add role {role_id} to {member_id} in {guild_id}: {e.kind.value}")
            raise

        logger.info(f"Adding role {role_id} to member {member_id} in guild {guild_id}")
        return await self._transport.add_role(guild_id, member_id, role_id, reason=reason)

    async def remove_role(
        self,
        agent: AgentContext,
        guild_id: int,
        member_id: int,
        role_id: int,
        reason: str | None = None,
    ):
        """Remove a role from a member. Same checks as add_role."""
        guild = self._guild(guild_id)
        try:
            self._require_outranks_role(guild, agent, role_id)
            self._require(guild, agent, Capability.MANAGE_ROLES)
        except MemberMutationError as e:
            logger.warning(
                f"Refusing to remove role {role_id} from {member_id} in {guild_id}: {e.kind.value}"
            )
            raise

        logger.info(f"Removing role {role_id} from member {member_id} in guild {guild_id}")
        return await self._transport.remove_role(guild_id, member_id, role_id, reason=reason)

    async def kick(
        self,
        agent: AgentContext,
        guild_id: int,
        member_id: int,
        reason: str | None = None,
    ):
        """
        Kick a member from the guild.

        The bot must strictly outrank the member's highest role; equal rank
        is refused, as is targeting the guild owner.
        """
        guild = self._guild(guild_id)
        try:
            self._require_outranks_member(guild, agent, member_id)
            self._require(guild, agent, Capability.KICK_MEMBERS)
        except MemberMutationError as e:
            logger.warning(f"Refusing to kick {member_id} from {guild_id}: {e.kind.value}")
            raise

        logger.info(f"Kicking member {member_id} from guild {guild_id}")
        return await self._transport.kick(guild_id, member_id, reason=reason)

    def _validate_edit(self, guild: Guild | None, agent: AgentContext, options: EditMemberOptions) -> None:
        # Each field is checked only when present
        if options.nick is not UNSET:
            if options.nick is not None and len(options.nick) > NICKNAME_MAX_LENGTH:
                raise InvalidNickname(options.nick, NICKNAME_MAX_LENGTH)
            self._require(guild, agent, Capability.MANAGE_NICKNAMES)

        if options.roles is not UNSET:
            self._require(guild, agent, Capability.MANAGE_ROLES)

        if options.mute is not UNSET:
            self._require(guild, agent, Capability.MUTE_MEMBERS)

        if options.deaf is not UNSET:
            self._require(guild, agent, Capability.DEAFEN_MEMBERS)

        if options.channel_id is not UNSET:
            self._require(guild, agent, Capability.MOVE_MEMBERS)

    async def edit_member(
        self,
        agent: AgentContext,
        guild_id: int,
        member_id: int,
        options: EditMemberOptions,
    ):
        """
        Patch a member's attributes.

        All provided fields are validated before anything is sent. Only the
        provided fields go into the patch body.

        Raises:
            InvalidNickname: nick is longer than 32 characters.
            MissingCapability: The bot lacks the permission for a field.
        """
        guild = self._guild(guild_id)
        try:
            self._validate_edit(guild, agent, options)
        except MemberMutationError as e:
            logger.warning(f"Refusing to edit member {member_id} in {guild_id}: {e.kind.value}")
            raise

        fields = options.provided_fields()
        logger.info(f"Editing member {member_id} in guild {guild_id}: {sorted(fields)}")
        return await self._transport.edit_member(
            guild_id, member_id, fields, reason=options.reason
        )

    async def _dispatch(self, agent: AgentContext, mutation: MemberMutation):
        if mutation.kind == MutationKind.add_role:
            return await self.add_role(
                agent, mutation.guild_id, mutation.member_id, mutation.role_id, mutation.reason
            )
        if mutation.kind == MutationKind.remove_role:
            return await self.remove_role(
                agent, mutation.guild_id, mutation.member_id, mutation.role_id, mutation.reason
            )
        if mutation.kind == MutationKind.kick:
            return await self.kick(agent, mutation.guild_id, mutation.member_id, mutation.reason)
        if mutation.kind == MutationKind.edit_member:
            options = mutation.options or EditMemberOptions()
            if mutation.reason is not None and options.reason is None:
                options = replace(options, reason=mutation.reason)
            return await self.edit_member(agent, mutation.guild_id, mutation.member_id, options)
        raise ValueError(f"Unknown mutation kind: {mutation.kind}")

    async def apply(
        self, agent: AgentContext, mutations: list[MemberMutation]
    ) -> list[MutationOutcome]:
        """
        Run mutations in order and collect one outcome per mutation.

        Failures don't stop the batch. Client-side rejections report their
        own ErrorKind; remote failures report a REMOTE_* or
        TRANSPORT_UNREACHABLE kind so a platform-side refusal stays
        distinguishable from a local hierarchy check.
        """
        outcomes = []
        for mutation in mutations:
            try:
                result = await self._dispatch(agent, mutation)
            except MemberMutationError as e:
                outcomes.append(MutationOutcome(mutation, ok=False, kind=e.kind, error=e))
            # RateLimited is a DiscordException, not an HTTPException
            except (discord.DiscordException, aiohttp.ClientError, OSError) as e:
                logger.error(
                    f"Remote {mutation.kind.value} failed for member {mutation.member_id}: {e}"
                )
                sentry_sdk.capture_exception(e)
                outcomes.append(
                    MutationOutcome(mutation, ok=False, kind=classify_remote_error(e), error=e)
                )
            else:
                outcomes.append(MutationOutcome(mutation, ok=True, result=result))
        return outcomes
