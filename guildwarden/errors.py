"""
Error taxonomy for member mutations.

Client-side failures are raised before any request is sent. Each carries an
ErrorKind code so callers (and the batch runner) can branch on the cause.
Remote failures are discord.py exceptions and are never wrapped.
"""

import enum


class ErrorKind(str, enum.Enum):
    BOTS_HIGHEST_ROLE_TOO_LOW = "BOTS_HIGHEST_ROLE_TOO_LOW"
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"
    NICKNAMES_MAX_LENGTH = "NICKNAMES_MAX_LENGTH"
    MISSING_MANAGE_ROLES = "MISSING_MANAGE_ROLES"
    MISSING_KICK_MEMBERS = "MISSING_KICK_MEMBERS"
    MISSING_MANAGE_NICKNAMES = "MISSING_MANAGE_NICKNAMES"
    MISSING_MUTE_MEMBERS = "MISSING_MUTE_MEMBERS"
    MISSING_DEAFEN_MEMBERS = "MISSING_DEAFEN_MEMBERS"
    MISSING_MOVE_MEMBERS = "MISSING_MOVE_MEMBERS"
    # Remote outcomes, only used in MutationOutcome
    REMOTE_FORBIDDEN = "REMOTE_FORBIDDEN"
    REMOTE_NOT_FOUND = "REMOTE_NOT_FOUND"
    REMOTE_RATE_LIMITED = "REMOTE_RATE_LIMITED"
    REMOTE_HTTP_ERROR = "REMOTE_HTTP_ERROR"
    TRANSPORT_UNREACHABLE = "TRANSPORT_UNREACHABLE"


class MemberMutationError(Exception):
    """Base class for mutations rejected before dispatch."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str | None = None):
        self.kind = kind
        super().__init__(message or kind.value)


class HierarchyTooLow(MemberMutationError):
    """Raised when the bot's highest role does not outrank the target."""

    def __init__(self, message: str | None = None):
        super().__init__(ErrorKind.BOTS_HIGHEST_ROLE_TOO_LOW, message)


class RoleNotFound(HierarchyTooLow):
    """Raised when the target role is not in cached guild state.

    An unknown role can't be ranked, so this is a hierarchy failure.
    """

    def __init__(self, role_id: int):
        self.role_id = role_id
        super().__init__(f"Role {role_id} not found in cached guild state")
        self.kind = ErrorKind.ROLE_NOT_FOUND


class MissingCapability(MemberMutationError):
    """Raised when the bot lacks a permission the operation requires."""

    def __init__(self, capability, message: str | None = None):
        self.capability = capability
        super().__init__(capability.error_kind, message)


class InvalidNickname(MemberMutationError):
    """Raised when a nickname is longer than the platform allows."""

    def __init__(self, nickname: str, max_length: int):
        self.nickname = nickname
        self.max_length = max_length
        super().__init__(
            ErrorKind.NICKNAMES_MAX_LENGTH,
            f"Nickname is {len(nickname)} characters, max is {max_length}",
        )
