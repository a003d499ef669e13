"""
Wallet data models
"""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class WalletEntry(BaseModel):
    """Solana wallet address of one user"""
    user_id: int = Field(..., description="Telegram user identifier")
    address: str = Field(..., min_length=1, description="Wallet address")
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator('address')
    @classmethod
    def strip_address(cls, v):
        """Addresses are stored without surrounding whitespace"""
        v = v.strip()
        if not v:
            raise ValueError('Wallet address must not be empty')
        return v
