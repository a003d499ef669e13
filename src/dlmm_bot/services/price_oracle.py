"""Price Oracle - current SOL price from CoinGecko"""
import asyncio
import logging
from typing import Optional

import aiohttp

logger = logging.getLogger(__name__)


class CoinGeckoPriceOracle:
    """
    Returns the current USD price of one coin, or None if the price
    is unavailable for any reason. None never means zero.
    """
    DEFAULT_API_URL = "https://api.coingecko.com/api/v3"

    def __init__(self, coin_id: str = "solana", api_url: str = DEFAULT_API_URL, timeout_seconds: float = 10.0):
        self.coin_id = coin_id
        self.api_url = api_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def price_url(self) -> str:
        return f"{self.api_url}/simple/price"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def get_current_price(self) -> Optional[float]:
        params = {"ids": self.coin_id, "vs_currencies": "usd"}
        try:
            async with self._get_session().get(self.price_url, params=params) as response:
                response.raise_for_status()
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error fetching {self.coin_id} price: {e}")
            return None

        try:
            price = float(data[self.coin_id]["usd"])
        except (KeyError, TypeError, ValueError):
            logger.error(f"Unexpected price response for {self.coin_id}: {data}")
            return None
        if price <= 0:
            logger.warning(f"Price API returned non-positive price for {self.coin_id}: {price}")
            return None
        return price

    async def close(self):
        """Close aiohttp session"""
        if self._session and not self._session.closed:
            await self._session.close()
