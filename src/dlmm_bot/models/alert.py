"""
Alert-related data models
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AlertEntry(BaseModel):
    """Price alert of one user (at most one active alert per user)"""
    user_id: int = Field(..., description="Telegram user identifier")
    target_price: float = Field(..., gt=0, description="Target price in USD")

    # Metadata
    created_at: datetime = Field(default_factory=datetime.now)


class AlertResult(BaseModel):
    """Result of a triggered alert"""
    user_id: int
    target_price: float
    current_price: float
    delivered: bool = False
    timestamp: datetime = Field(default_factory=datetime.now)
    error: Optional[str] = None
