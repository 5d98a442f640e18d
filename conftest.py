"""Root pytest configuration."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables before tests run
_root = Path(__file__).parent
load_dotenv(_root / ".env")
load_dotenv(_root / ".env.local", override=True)


@pytest.fixture(autouse=True)
def reset_bot_wiring():
    """Clear module-level bot wiring so tests don't leak a client."""
    from guildwarden import bot
    from guildwarden.cache import InMemoryEntityCache

    yield

    bot._channel_cache = InMemoryEntityCache()
    bot._bot = None
    bot._member_service = None
    bot._dm_resolver = None
