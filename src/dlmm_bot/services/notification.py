"""Notification Service - Telegram delivery of alert messages"""
import asyncio
import logging

import aiohttp
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

logger = logging.getLogger(__name__)


class TelegramNotifier:
    def __init__(self, bot: Bot, parse_mode: str = "Markdown"):
        self.bot = bot
        self.parse_mode = parse_mode

    async def send(self, user_id: int, message: str) -> bool:
        """
        Sends a message to the user's private chat.
        Delivery errors are logged and reported as False, never raised.
        """
        try:
            await self.bot.send_message(user_id, message, parse_mode=self.parse_mode)
        except TelegramAPIError as e:
            logger.error(f"Failed to send Telegram message to {user_id}: {e}")
            return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Network error while sending Telegram message to {user_id}: {e}")
            return False
        logger.info(f"Alert message sent to Telegram chat {user_id}")
        return True
