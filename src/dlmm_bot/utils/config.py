"""
Configuration data models
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from dlmm_bot.storage.kv_store import WritePolicy


class StorageConfig(BaseModel):
    """Storage settings"""
    remote_url: Optional[str] = Field(None, description="Redis/DynamoDB connection string, None = local only")
    data_dir: str = Field("./data", description="Directory of the local JSON store")
    write_policy: WritePolicy = Field(WritePolicy.PREFERENCE, description="preference | mirror")

    @field_validator('remote_url')
    @classmethod
    def empty_url_is_none(cls, v):
        """An empty connection string means the remote backend is not configured"""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class PriceConfig(BaseModel):
    """Price API settings"""
    api_url: str = Field("https://api.coingecko.com/api/v3", description="CoinGecko API base URL")
    coin_id: str = Field("solana", description="CoinGecko coin id")
    request_timeout_seconds: float = Field(10.0, gt=0, description="HTTP request timeout")


class AppConfig(BaseModel):
    """Main application configuration"""
    app_name: str = Field("Saros DLMM Bot", description="Application name")
    telegram_bot_token: Optional[str] = Field(None, description="Telegram bot token")

    # Scheduling
    check_interval_seconds: int = Field(300, gt=0, description="Alert check interval in seconds")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    price: PriceConfig = Field(default_factory=PriceConfig)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level


def load_config(env_path: Optional[str] = None) -> AppConfig:
    """
    Загружает конфигурацию из .env файла и переменных окружения

    Args:
        env_path: Путь к .env файлу

    Returns:
        AppConfig: Объект конфигурации
    """
    if env_path and os.path.exists(env_path):
        load_dotenv(env_path)
    else:
        load_dotenv()

    storage = StorageConfig(
        remote_url=os.getenv("REMOTE_STORE_URL") or os.getenv("REDIS_URL"),
        data_dir=os.getenv("DATA_DIR", "./data"),
        write_policy=os.getenv("STORE_WRITE_POLICY", WritePolicy.PREFERENCE.value).lower(),
    )

    price = PriceConfig(
        api_url=os.getenv("PRICE_API_URL", "https://api.coingecko.com/api/v3"),
        coin_id=os.getenv("PRICE_COIN_ID", "solana"),
    )

    return AppConfig(
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN") or None,
        check_interval_seconds=int(os.getenv("ALERT_CHECK_INTERVAL_SECONDS", "300")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        storage=storage,
        price=price,
    )
