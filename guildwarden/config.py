"""
Environment-driven settings for guildwarden.

Values come from the process environment; `.env` and `.env.local` are loaded
by the entry point (and by the test conftest) with python-dotenv.
"""

import logging
import os

import sentry_sdk

logger = logging.getLogger(__name__)


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_bot_token() -> str | None:
    return os.environ.get("DISCORD_BOT_TOKEN")


def get_server_id() -> int | None:
    """Get the default guild id, if configured."""
    value = os.environ.get("DISCORD_SERVER_ID")
    return int(value) if value else None


def get_dm_send_delay() -> float:
    """Seconds to wait after each DM, keeping sends to about one per second."""
    return float(os.getenv("DM_SEND_DELAY_SECONDS", "1.0"))


def get_default_audit_reason() -> str | None:
    """Audit log reason used when a caller doesn't provide one."""
    return os.environ.get("DEFAULT_AUDIT_REASON") or None


def init_sentry() -> bool:
    """Initialize Sentry if SENTRY_DSN is set. Returns True if enabled."""
    dsn = os.environ.get("SENTRY_DSN")
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        environment="development" if is_dev_mode() else "production",
    )
    return True


# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DISCORD_BOT_TOKEN", "Discord bot token", True),
    ("DISCORD_SERVER_ID", "Default Discord server ID", False),
    ("SENTRY_DSN", "Sentry DSN for error reporting", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in REQUIRED_ENV_VARS:
        if os.environ.get(name):
            continue
        if required_in_dev:
            errors.append(f"  ✗ {name}: Not set ({description})")
        elif not in_dev:
            warnings.append(f"  ⚠ {name}: Not set ({description})")

    if errors:
        for error in errors:
            logger.error(error)
        return False, warnings

    return True, warnings
