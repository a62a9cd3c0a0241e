"""Main entry point for the Telegram bot."""

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from tortoise import Tortoise

from tenantbill.bots.tg.handlers import (
    bills,
    common,
    history,
    readings,
    tenants,
    water,
)
from tenantbill.config import settings
from tenantbill.core.db import TORTOISE_ORM
from tenantbill.core.repositories.reading import ReadingRepository
from tenantbill.core.repositories.tenant import TenantRepository
from tenantbill.services.bill_text import build_text_generator
from tenantbill.services.billing import BillingService
from tenantbill.services.directory import TenantDirectory
from tenantbill.services.export import ExportService
from tenantbill.services.store import ReadingStore

logger = logging.getLogger(__name__)


async def on_startup(dispatcher: Dispatcher, bot: Bot):
    """Actions on bot startup."""
    logger.info("Initializing database...")
    await Tortoise.init(config=TORTOISE_ORM)
    await Tortoise.generate_schemas(safe=True)
    logger.info("Database initialized.")

    store = ReadingStore(
        tenant_repo=TenantRepository(),
        reading_repo=ReadingRepository(),
    )
    await store.seed_default_tenants(settings.DEFAULT_TENANTS)

    dispatcher["store"] = store
    dispatcher["directory"] = TenantDirectory(store)
    dispatcher["billing_service"] = BillingService(
        store=store, text_generator=build_text_generator(settings)
    )
    dispatcher["export_service"] = ExportService()
    logger.info("Services injected into dispatcher.")

    logger.info("Deleting webhook and dropping pending updates...")
    await bot.delete_webhook(drop_pending_updates=True)
    logger.info("Bot started.")


async def on_shutdown(bot: Bot):
    """Actions on bot shutdown."""
    logger.info("Closing connections...")
    await Tortoise.close_connections()
    await bot.session.close()
    logger.info("Connections closed.")


async def main():
    """Initializes and starts the bot."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    logger.info("Starting bot initialization...")

    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode="HTML"),
    )
    dp = Dispatcher()

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    dp.include_router(common.router)
    dp.include_router(tenants.router)
    dp.include_router(readings.router)
    dp.include_router(bills.router)
    dp.include_router(water.router)
    dp.include_router(history.router)

    await dp.start_polling(bot, dispatcher=dp)


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Bot stopped manually.")


if __name__ == "__main__":
    run()
