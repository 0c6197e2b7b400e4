# main.py
import asyncio
import logging
from shop_admin.bot import AdminConsoleBot
from shop_admin.config import setup_logging

async def main():
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        bot = AdminConsoleBot()
        logger.info("Starting admin console...")
        await bot.start()
    except Exception as e:
        logger.error(f"Error starting bot: {e}", exc_info=True)
        raise

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
