import asyncio
import logging

import aiohttp
import asyncio_atexit
from rich import traceback
from rich.logging import RichHandler

from claimer import ClaimRunner, ConfigError, Settings

logger = logging.getLogger(__name__)
traceback.install()


async def main() -> None:
    logging.basicConfig(
        format="%(message)s",
        datefmt="%H:%M:%S",
        level=logging.INFO,
        handlers=[RichHandler(show_path=False)],
    )

    try:
        settings = Settings.from_toml("config.toml")
    except ConfigError as err:
        logger.error(err)
        return

    logging.getLogger().setLevel(settings.log_level)

    session = aiohttp.ClientSession(
        raise_for_status=True,
        timeout=aiohttp.ClientTimeout(total=settings.request_timeout),
    )

    asyncio_atexit.register(session.close)

    runner = ClaimRunner.from_settings(session, settings)
    logger.info(
        "Claiming from %s for %s", settings.faucet.website_url, settings.faucet.address
    )
    await runner.run()


if __name__ == "__main__":
    asyncio.run(main())
