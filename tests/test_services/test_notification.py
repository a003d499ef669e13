"""
Юнит-тесты для TelegramNotifier
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.exceptions import TelegramBadRequest, TelegramNetworkError

from dlmm_bot.services.notification import TelegramNotifier


@pytest.fixture
def bot():
    mock = MagicMock()
    mock.send_message = AsyncMock()
    return mock


@pytest.mark.asyncio
async def test_send_success(bot):
    notifier = TelegramNotifier(bot)

    assert await notifier.send(42, "🚨 *Price Alert!*") is True
    bot.send_message.assert_awaited_once_with(42, "🚨 *Price Alert!*", parse_mode="Markdown")


@pytest.mark.asyncio
async def test_telegram_error_returns_false(bot):
    """Тест: пользователь заблокировал бота / чат не найден"""
    bot.send_message.side_effect = TelegramBadRequest(method=MagicMock(), message="chat not found")
    notifier = TelegramNotifier(bot)

    assert await notifier.send(42, "hi") is False


@pytest.mark.asyncio
async def test_network_error_returns_false(bot):
    bot.send_message.side_effect = TelegramNetworkError(method=MagicMock(), message="timeout")
    notifier = TelegramNotifier(bot)

    assert await notifier.send(42, "hi") is False
