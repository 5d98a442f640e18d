"""
Member moderation for Discord guilds.

Checks role hierarchy and bot permissions against cached guild state before
any member mutation is sent, and resolves DM channels without creating
duplicates.
"""

from .bot import (
    add_role,
    edit_member,
    get_agent_context,
    get_bot,
    get_channel_cache,
    get_dm_resolver,
    get_member_service,
    kick,
    remove_role,
    send_direct_message,
    set_bot,
)
from .cache import DiscordClientState, EntityCache, GuildStateReader, InMemoryEntityCache
from .dm import DMChannelResolver
from .errors import (
    ErrorKind,
    HierarchyTooLow,
    InvalidNickname,
    MemberMutationError,
    MissingCapability,
    RoleNotFound,
)
from .hierarchy import highest_role, is_higher_position
from .members import (
    NICKNAME_MAX_LENGTH,
    MemberMutation,
    MemberService,
    MutationKind,
    MutationOutcome,
)
from .models import UNSET, AgentContext, DMChannel, EditMemberOptions, Guild, Member, Role
from .permissions import Capability, has_capability, permissions_for
from .transport import DiscordHTTPTransport, Transport

__all__ = [
    # Bot wiring
    "set_bot",
    "get_bot",
    "get_member_service",
    "get_channel_cache",
    "get_dm_resolver",
    "get_agent_context",
    "add_role",
    "remove_role",
    "kick",
    "edit_member",
    "send_direct_message",
    # Services
    "MemberService",
    "MemberMutation",
    "MutationKind",
    "MutationOutcome",
    "NICKNAME_MAX_LENGTH",
    "DMChannelResolver",
    # Checks
    "Capability",
    "has_capability",
    "permissions_for",
    "highest_role",
    "is_higher_position",
    # Collaborators
    "EntityCache",
    "GuildStateReader",
    "InMemoryEntityCache",
    "DiscordClientState",
    "Transport",
    "DiscordHTTPTransport",
    # Models
    "AgentContext",
    "Guild",
    "Member",
    "Role",
    "DMChannel",
    "EditMemberOptions",
    "UNSET",
    # Errors
    "ErrorKind",
    "MemberMutationError",
    "HierarchyTooLow",
    "RoleNotFound",
    "MissingCapability",
    "InvalidNickname",
]
