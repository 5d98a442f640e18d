"""
guildwarden bot entry point.

Connects a discord.py client and wires the member and DM services to it.
Other code imports the module-level helpers from guildwarden once the bot
is ready.

Run with: python main.py
"""

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).parent

# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")
load_dotenv()

import discord

from guildwarden import set_bot
from guildwarden.config import check_required_env_vars, get_bot_token, init_sentry

logger = logging.getLogger(__name__)


def create_bot() -> discord.Client:
    """Create the client with the intents the guild cache needs."""
    intents = discord.Intents.default()
    intents.members = True  # Role and hierarchy checks read the member cache
    intents.voice_states = True
    return discord.Client(intents=intents)


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ok, warnings = check_required_env_vars()
    for warning in warnings:
        print(warning)
    if not ok:
        return 1

    if init_sentry():
        logger.info("Sentry enabled")

    bot = create_bot()

    @bot.event
    async def on_ready():
        set_bot(bot)
        print(f"Bot is ready! Logged in as {bot.user}")

    bot.run(get_bot_token(), log_handler=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
