"""Role hierarchy comparisons over cached guild state."""

from .models import Guild, Member, Role

# Position of the implicit default role
DEFAULT_POSITION = 0


def highest_role(guild: Guild | None, user_id: int) -> Role | None:
    """
    Get the role with the highest position held by a user.

    Returns None when the user holds no explicit roles or isn't resident in
    the cached guild. Callers treat None as "only the default role".
    """
    if guild is None:
        return None
    member = guild.get_member(user_id)
    if member is None:
        return None

    roles = [guild.get_role(role_id) for role_id in member.role_ids]
    roles = [role for role in roles if role is not None]
    if not roles:
        return None
    # Ties on position are broken by id, matching the platform's ordering
    return max(roles, key=lambda role: (role.position, -role.id))


def position_of(guild: Guild | None, subject: Role | Member | None) -> int:
    """Get the ordinal rank of a role, or of a member's highest role."""
    if subject is None:
        return DEFAULT_POSITION
    if isinstance(subject, Role):
        return subject.position
    role = highest_role(guild, subject.user_id)
    return role.position if role else DEFAULT_POSITION


def is_higher_position(
    guild: Guild | None,
    first: Role | Member | None,
    second: Role | Member | None,
) -> bool:
    """Check whether first strictly outranks second. Equal rank is not higher."""
    return position_of(guild, first) > position_of(guild, second)
