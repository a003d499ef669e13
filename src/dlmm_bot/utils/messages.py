"""Telegram message texts (Markdown)"""
from typing import List, Optional

from dlmm_bot.models.liquidity import LPPosition, PortfolioAnalytics
from dlmm_bot.storage.kv_store import StoreStatus

MAIN_MENU_TEXT = "🎛️ *Main Menu*\n\nChoose an option below:"
LOADING_ANALYTICS_TEXT = "🔄 *Fetching live pool data...*"
UNKNOWN_COMMAND_TEXT = "❓ *Unknown command.*\n\nUse /help to see available commands."
REBALANCE_TEXT = "🔄 *Rebalancing simulated! (Demo mode)*"


def format_error(error: str) -> str:
    return f"❌ *Error:* {error}\n\nPlease try again or contact support if the issue persists."


def format_success(message: str) -> str:
    return f"✅ {message}"


def format_alert_set(price: float) -> str:
    return (
        f"✅ *Alert Set!*\n\n"
        f"I'll notify you when SOL price reaches *${price:g}* 🚀\n\n"
        f"Use `/alerts` to manage your alerts."
    )


def format_price_alert(current_price: float, target_price: float) -> str:
    return (
        f"🚨 *Price Alert!*\n\n"
        f"SOL has reached *${current_price:,.2f}* 🚀\n\n"
        f"*Target:* ${target_price:g}\n"
        f"*Current:* ${current_price:,.2f}"
    )


def format_alerts_menu(current_alert: Optional[float], current_price: Optional[float]) -> str:
    message = "🔔 *Price Alerts*\n\n"
    if current_alert:
        message += f"• *Current Alert:* ${current_alert:g}\n"
        if current_price:
            # Alerts only fire when the price reaches the target from below
            status = "✅ At or above target" if current_price >= current_alert else "⏳ Below target"
            message += f"• *Current Price:* ${current_price:,.2f} ({status})\n"
        message += "\nUse `/alert <new_price>` to update or `/alert off` to remove."
    else:
        message += "• *No alerts set*\n\n"
        if current_price:
            message += f"• *Current SOL Price:* ${current_price:,.2f}\n"
        message += "\nUse `/alert <price>` to set a price alert."
    return message


def format_alert_removed() -> str:
    return "✅ *Alert Removed*\n\nYour price alert has been removed. Use `/alert <price>` to set a new one."


def format_wallet_status(address: Optional[str]) -> str:
    if address:
        return f"📝 *Current wallet:* `{address}`\n\nTo update, send: /wallet <new_address>"
    return "📝 *No wallet set.*\n\nTo set your wallet, send: /wallet <your_solana_address>"


def format_status(store_status: StoreStatus, wallet: Optional[str], alert: Optional[float]) -> str:
    storage_line = {
        "remote": f"✅ Remote ({store_status.remote_backend})",
        "degraded": "⚠️ Local fallback (remote unavailable)",
        "local": "✅ Local",
    }[store_status.mode]
    return (
        "🔍 *Bot Status:*\n\n"
        f"• *Storage:* {storage_line}\n"
        f"• *Wallet:* {f'✅ Set ({wallet[:8]}...)' if wallet else '❌ Not set'}\n"
        f"• *Alert:* {f'✅ Set (${alert:g})' if alert else '❌ Not set'}\n"
        "• *Mode:* Demo (Mock data + Live SOL price)"
    )


def format_help() -> str:
    return (
        "🤖 *Saros DLMM Bot - Command Center*\n\n"
        "🎛️ *Main Menu*\n"
        "• /menu → Show interactive menu with buttons\n\n"
        "🏊 *Pool Commands*\n"
        "• /positions → View your liquidity positions\n"
        "• /analytics → Check portfolio analytics and live data\n"
        "• /rebalance → Simulate pool rebalancing (demo mode)\n\n"
        "🔔 *Alert Commands*\n"
        "• /alert <price> → Set SOL price alert\n"
        "• /alert off → Remove price alert\n"
        "• /alerts → View current alerts\n\n"
        "ℹ️ *Info Commands*\n"
        "• /status → Check bot and storage status\n"
        "• /help → Show this command center\n\n"
        "🔧 *Utility Commands*\n"
        "• /wallet → Set or view your Solana wallet address\n"
        "• /start → Show the welcome message"
    )


def format_welcome() -> str:
    return (
        "🎉 *Welcome to Saros DLMM Bot!*\n\n"
        "*Step 1: Connect Wallet* 🔗\n"
        "→ Use `/wallet <your_address>`\n\n"
        "*Step 2: Set a Price Alert* 🔔\n"
        "→ Use `/alert <price>` and I'll ping you once SOL gets there\n\n"
        "*Step 3: Learn More* 📚\n"
        "→ Use `/help` for the command center"
    )


def format_positions(positions: List[LPPosition]) -> str:
    if not positions:
        return "📊 *No LP positions found.*\n\nAdd your wallet address to start tracking positions!"
    message = "📊 *Your LP Positions:*\n\n"
    for position in positions:
        message += f"• *{position.pair}* → {position.amount}"
        if position.value:
            message += f" ({position.value})"
        message += "\n"
    return message


def format_analytics(analytics: Optional[PortfolioAnalytics]) -> str:
    if analytics is None:
        return "📈 *No portfolio analytics available.*\n\nAdd your wallet address to start tracking analytics!"

    message = (
        "📈 *Portfolio Analytics:*\n\n"
        f"• *Total Liquidity:* {analytics.total_liquidity}\n"
        f"• *Fees Earned:* {analytics.fees_earned}\n"
        f"• *Mock IL:* {analytics.mock_il}"
    )
    pool = analytics.pool
    if pool is None:
        return message + "\n\n⚪ *Live pool data unavailable*"
    message += (
        "\n\n🟡 *Live Pool Data (SOL/USDC, simulated reserves):*"
        f"\n• *SOL Price:* ${pool.sol_price:,.2f}"
        f"\n• *Pool Reserves:* {pool.reserve_sol:,.0f} SOL / {pool.reserve_usdc:,.0f} USDC"
        f"\n• *Total Value Locked:* ${pool.tvl:,.0f}"
        f"\n• *Fee Growth:* {pool.fee_growth:.2f}%"
    )
    return message
