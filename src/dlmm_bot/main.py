import asyncio
import logging
import os
import sys

from aiogram import Bot, Dispatcher

from dlmm_bot.handlers import commands as commands_router
from dlmm_bot.services.alert_registry import AlertRegistry
from dlmm_bot.services.alert_scheduler import AlertScheduler
from dlmm_bot.services.liquidity import LiquidityService
from dlmm_bot.services.notification import TelegramNotifier
from dlmm_bot.services.price_oracle import CoinGeckoPriceOracle
from dlmm_bot.services.wallet_registry import WalletRegistry
from dlmm_bot.storage.exceptions import StorageInitError
from dlmm_bot.storage.kv_store import KeyValueStore
from dlmm_bot.utils.config import load_config
from dlmm_bot.utils.logger import setup_logging


async def main():
    """Запускает Telegram-бота и фоновую проверку алертов."""
    config = load_config(env_path=os.path.join(os.getcwd(), '.env'))
    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)
    logger.info("🚀 Starting Saros DLMM Bot...")

    if not config.telegram_bot_token:
        logger.critical("❌ TELEGRAM_BOT_TOKEN is not set in environment variables")
        sys.exit(1)

    # 1. Хранилище: локальное обязательно, удаленное - по возможности
    store = KeyValueStore.from_config(config.storage)
    try:
        await store.initialize()
    except StorageInitError as e:
        logger.critical(f"❌ Storage is unusable: {e}")
        sys.exit(1)

    alert_registry = AlertRegistry(store)
    wallet_registry = WalletRegistry(store)
    price_oracle = CoinGeckoPriceOracle(
        coin_id=config.price.coin_id,
        api_url=config.price.api_url,
        timeout_seconds=config.price.request_timeout_seconds,
    )

    # 2. Telegram
    bot = Bot(token=config.telegram_bot_token)
    dp = Dispatcher()
    dp.workflow_data.update({
        "store": store,
        "alert_registry": alert_registry,
        "wallet_registry": wallet_registry,
        "price_oracle": price_oracle,
        "liquidity_service": LiquidityService(price_oracle, wallet_registry),
    })
    dp.include_router(commands_router.router)

    # 3. Фоновая проверка алертов
    scheduler = AlertScheduler(
        registry=alert_registry,
        price_oracle=price_oracle,
        notifier=TelegramNotifier(bot),
        interval_seconds=config.check_interval_seconds,
    )
    scheduler.start()

    try:
        logger.info("✅ Bot is ready to receive messages...")
        await dp.start_polling(bot)
    finally:
        logger.info("🛑 Shutting down bot...")
        await scheduler.stop()
        await price_oracle.close()
        await store.close()
        await bot.session.close()
        logger.info("✅ Bot stopped successfully")


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit) as e:
        if isinstance(e, SystemExit) and e.code not in (None, 0):
            raise


if __name__ == "__main__":
    run()
