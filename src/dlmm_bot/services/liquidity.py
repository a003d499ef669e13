"""
Liquidity Service - LP positions and pool analytics for the demo mode.

Positions and portfolio totals are mock data. Pool analytics are simulated
around the live SOL price from the price oracle.
"""
import logging
import random
from typing import List, Optional

from dlmm_bot.models.liquidity import LPPosition, PoolAnalytics, PortfolioAnalytics
from dlmm_bot.services.wallet_registry import WalletRegistry

logger = logging.getLogger(__name__)

DEMO_POSITIONS = (
    LPPosition(pair="SOL/USDC", amount="150 USDC + 0.05 SOL", value="$200"),
    LPPosition(pair="BONK/USDC", amount="50 USDC + 2000 BONK", value="$75"),
)


class LiquidityService:
    def __init__(self, price_oracle, wallet_registry: WalletRegistry, rng: Optional[random.Random] = None):
        self.price_oracle = price_oracle
        self.wallet_registry = wallet_registry
        self.rng = rng or random.Random()

    async def get_positions(self, user_id: int) -> List[LPPosition]:
        """Demo positions, the same with or without a wallet set"""
        wallet = await self.wallet_registry.get_wallet(user_id)
        if wallet:
            logger.debug(f"Returning demo positions for user {user_id} (wallet {wallet[:8]}...)")
        return [position.model_copy() for position in DEMO_POSITIONS]

    async def get_pool_analytics(self) -> Optional[PoolAnalytics]:
        """
        Simulated SOL/USDC pool around the live price:
        2500-3000 SOL, USDC at 98-102% of the fair ratio, 12-20% fee growth.
        None if the price is unavailable.
        """
        sol_price = await self.price_oracle.get_current_price()
        if sol_price is None:
            logger.warning("SOL price unavailable, no pool analytics")
            return None

        reserve_sol = 2500 + self.rng.random() * 500
        reserve_usdc = sol_price * reserve_sol * (0.98 + self.rng.random() * 0.04)
        return PoolAnalytics(
            sol_price=sol_price,
            reserve_sol=round(reserve_sol, 2),
            reserve_usdc=round(reserve_usdc, 2),
            tvl=round(reserve_usdc * 2, 2),
            fee_growth=round((0.12 + self.rng.random() * 0.08) * 100, 2),
        )

    async def get_portfolio_analytics(self, user_id: int) -> PortfolioAnalytics:
        return PortfolioAnalytics(
            total_liquidity="$200",
            fees_earned="$12.50",
            mock_il="-2.1%",
            pool=await self.get_pool_analytics(),
        )

    async def simulate_rebalance(self, user_id: int) -> None:
        # TODO: real rebalancing needs the DLMM SDK bin ranges and signed transactions
        wallet = await self.wallet_registry.get_wallet(user_id)
        logger.info(f"Simulating rebalance for user {user_id}{f' ({wallet})' if wallet else ''}")
