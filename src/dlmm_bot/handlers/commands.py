# Это файл src/dlmm_bot/handlers/commands.py

import logging
import re
from typing import Optional

from aiogram import F, Router, types
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import ErrorEvent, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from dlmm_bot.services.alert_registry import AlertRegistry
from dlmm_bot.services.liquidity import LiquidityService
from dlmm_bot.services.price_oracle import CoinGeckoPriceOracle
from dlmm_bot.services.wallet_registry import WalletRegistry
from dlmm_bot.storage.exceptions import PersistenceError
from dlmm_bot.storage.kv_store import KeyValueStore
from dlmm_bot.utils import messages

logger = logging.getLogger(__name__)

# Solana address: base58, 32-44 символа
SOLANA_ADDRESS_RE = re.compile(r'^[1-9A-HJ-NP-Za-km-z]{32,44}$')

router = Router()


def is_valid_wallet_address(address: str) -> bool:
    return bool(SOLANA_ADDRESS_RE.match(address))


def build_main_menu() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="📊 Positions", callback_data="menu_positions")
    builder.button(text="📈 Analytics", callback_data="menu_analytics")
    builder.button(text="🔔 Alerts", callback_data="menu_alerts")
    builder.button(text="ℹ️ Status", callback_data="menu_status")
    builder.button(text="🔄 Refresh", callback_data="menu_refresh")
    builder.adjust(2, 2, 1)
    return builder.as_markup()


async def _user_id(message: types.Message) -> Optional[int]:
    """ID автора; у постов в каналах from_user нет - отвечаем ошибкой."""
    if message.from_user is None:
        await message.answer(messages.format_error("Unable to identify user."))
        return None
    return message.from_user.id


async def _alerts_menu_text(user_id: int, alert_registry: AlertRegistry, price_oracle: CoinGeckoPriceOracle) -> str:
    current_alert = await alert_registry.get_alert(user_id)
    current_price = await price_oracle.get_current_price()
    return messages.format_alerts_menu(current_alert, current_price)


async def _status_text(
    user_id: int,
    store: KeyValueStore,
    alert_registry: AlertRegistry,
    wallet_registry: WalletRegistry,
) -> str:
    wallet = await wallet_registry.get_wallet(user_id)
    alert = await alert_registry.get_alert(user_id)
    return messages.format_status(store.status(), wallet, alert)


@router.message(CommandStart())
async def handle_start(message: types.Message):
    await message.answer(messages.format_welcome(), parse_mode="Markdown")


@router.message(Command("help"))
async def handle_help(message: types.Message):
    await message.answer(messages.format_help(), parse_mode="Markdown")


@router.message(Command("menu"))
async def handle_menu(message: types.Message):
    await message.answer(messages.MAIN_MENU_TEXT, parse_mode="Markdown", reply_markup=build_main_menu())


@router.message(Command("positions"))
async def handle_positions(message: types.Message, liquidity_service: LiquidityService):
    user_id = await _user_id(message)
    if user_id is None:
        return
    positions = await liquidity_service.get_positions(user_id)
    await message.answer(messages.format_positions(positions), parse_mode="Markdown")


@router.message(Command("analytics"))
async def handle_analytics(message: types.Message, liquidity_service: LiquidityService):
    """Сначала сообщение 'загрузка', потом редактируем его результатом"""
    user_id = await _user_id(message)
    if user_id is None:
        return
    loading_message = await message.answer(messages.LOADING_ANALYTICS_TEXT, parse_mode="Markdown")
    analytics = await liquidity_service.get_portfolio_analytics(user_id)
    await loading_message.edit_text(messages.format_analytics(analytics), parse_mode="Markdown")


@router.message(Command("rebalance"))
async def handle_rebalance(message: types.Message, liquidity_service: LiquidityService):
    user_id = await _user_id(message)
    if user_id is None:
        return
    await liquidity_service.simulate_rebalance(user_id)
    await message.answer(messages.REBALANCE_TEXT, parse_mode="Markdown")


@router.message(Command("wallet"))
async def handle_wallet(message: types.Message, command: CommandObject, wallet_registry: WalletRegistry):
    """
    /wallet            - показать текущий адрес
    /wallet <address>  - сохранить адрес
    """
    user_id = await _user_id(message)
    if user_id is None:
        return
    address = (command.args or "").strip()

    if not address:
        current_wallet = await wallet_registry.get_wallet(user_id)
        await message.answer(messages.format_wallet_status(current_wallet), parse_mode="Markdown")
        return

    if not is_valid_wallet_address(address):
        await message.answer(messages.format_error("Invalid Solana wallet address. Please check and try again."))
        return

    try:
        await wallet_registry.set_wallet(user_id, address)
    except PersistenceError:
        await message.answer(messages.format_error("Failed to set wallet address. Please try again."))
        return
    await message.answer(messages.format_success(f"Wallet address set to: `{address}`"), parse_mode="Markdown")


@router.message(Command("alert"))
async def handle_alert(
    message: types.Message,
    command: CommandObject,
    alert_registry: AlertRegistry,
    price_oracle: CoinGeckoPriceOracle,
):
    """
    /alert          - статус алерта
    /alert <price>  - установить алерт
    /alert off      - удалить алерт
    """
    user_id = await _user_id(message)
    if user_id is None:
        return
    args = (command.args or "").strip()

    if not args:
        await message.answer(await _alerts_menu_text(user_id, alert_registry, price_oracle), parse_mode="Markdown")
        return

    if args.lower() == "off":
        await alert_registry.remove_alert(user_id)
        await message.answer(messages.format_alert_removed(), parse_mode="Markdown")
        return

    try:
        price = float(args.lstrip("$"))
    except ValueError:
        price = None
    if price is None or not 0 < price < float("inf"):
        await message.answer(messages.format_error("Invalid price. Please enter a valid number (e.g., /alert 30)"))
        return

    try:
        await alert_registry.set_alert(user_id, price)
    except PersistenceError:
        await message.answer(messages.format_error("Failed to set alert. Please try again."))
        return
    await message.answer(messages.format_alert_set(price), parse_mode="Markdown")


@router.message(Command("alerts"))
async def handle_alerts(message: types.Message, alert_registry: AlertRegistry, price_oracle: CoinGeckoPriceOracle):
    user_id = await _user_id(message)
    if user_id is None:
        return
    await message.answer(await _alerts_menu_text(user_id, alert_registry, price_oracle), parse_mode="Markdown")


@router.message(Command("status"))
async def handle_status(
    message: types.Message,
    store: KeyValueStore,
    alert_registry: AlertRegistry,
    wallet_registry: WalletRegistry,
):
    user_id = await _user_id(message)
    if user_id is None:
        return
    text = await _status_text(user_id, store, alert_registry, wallet_registry)
    await message.answer(text, parse_mode="Markdown")


# --- Кнопки меню ---

@router.callback_query(F.data == "menu_positions")
async def handle_menu_positions(callback: types.CallbackQuery, liquidity_service: LiquidityService):
    positions = await liquidity_service.get_positions(callback.from_user.id)
    await callback.message.edit_text(messages.format_positions(positions), parse_mode="Markdown")
    await callback.answer("📊 Positions loaded")


@router.callback_query(F.data == "menu_analytics")
async def handle_menu_analytics(callback: types.CallbackQuery, liquidity_service: LiquidityService):
    await callback.message.edit_text(messages.LOADING_ANALYTICS_TEXT, parse_mode="Markdown")
    analytics = await liquidity_service.get_portfolio_analytics(callback.from_user.id)
    await callback.message.edit_text(messages.format_analytics(analytics), parse_mode="Markdown")
    await callback.answer("📈 Analytics loaded")


@router.callback_query(F.data == "menu_alerts")
async def handle_menu_alerts(
    callback: types.CallbackQuery,
    alert_registry: AlertRegistry,
    price_oracle: CoinGeckoPriceOracle,
):
    text = await _alerts_menu_text(callback.from_user.id, alert_registry, price_oracle)
    await callback.message.edit_text(text, parse_mode="Markdown")
    await callback.answer("🔔 Alerts loaded")


@router.callback_query(F.data == "menu_status")
async def handle_menu_status(
    callback: types.CallbackQuery,
    store: KeyValueStore,
    alert_registry: AlertRegistry,
    wallet_registry: WalletRegistry,
):
    text = await _status_text(callback.from_user.id, store, alert_registry, wallet_registry)
    await callback.message.edit_text(text, parse_mode="Markdown")
    await callback.answer("ℹ️ Status loaded")


@router.callback_query(F.data == "menu_refresh")
async def handle_menu_refresh(callback: types.CallbackQuery):
    await callback.message.edit_text(messages.MAIN_MENU_TEXT, parse_mode="Markdown", reply_markup=build_main_menu())
    await callback.answer("🔄 Menu refreshed")


# Должен быть последним: ловит команды, которые не обработали хендлеры выше
@router.message(F.text.startswith("/"))
async def handle_unknown_command(message: types.Message):
    await message.answer(messages.UNKNOWN_COMMAND_TEXT, parse_mode="Markdown")


@router.errors()
async def handle_error(event: ErrorEvent):
    """Любая ошибка в хендлере: логируем и отвечаем пользователю общим сообщением"""
    logger.error(f"Unhandled error in handler: {event.exception}", exc_info=event.exception)
    update = event.update
    try:
        if update.message is not None:
            await update.message.answer(messages.format_error("An unexpected error occurred. Please try again."))
        elif update.callback_query is not None:
            await update.callback_query.answer("Something went wrong, please try again")
    except TelegramAPIError as e:
        logger.error(f"Error sending error message: {e}")
    return True
