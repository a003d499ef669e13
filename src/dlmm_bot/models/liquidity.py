"""
Liquidity pool data models (demo data + live SOL price)
"""
from typing import Optional

from pydantic import BaseModel, Field


class LPPosition(BaseModel):
    """One liquidity position of a user"""
    pair: str = Field(..., description="Pool pair, e.g. SOL/USDC")
    amount: str = Field(..., description="Deposited token amounts")
    value: Optional[str] = Field(None, description="Position value in USD")


class PoolAnalytics(BaseModel):
    """SOL/USDC pool snapshot"""
    sol_price: float = Field(..., gt=0)
    reserve_sol: float
    reserve_usdc: float
    tvl: float
    fee_growth: float = Field(..., description="Fee growth, percent")
    is_simulated: bool = True


class PortfolioAnalytics(BaseModel):
    """Portfolio summary shown by /analytics"""
    total_liquidity: str
    fees_earned: str
    mock_il: str
    pool: Optional[PoolAnalytics] = None
