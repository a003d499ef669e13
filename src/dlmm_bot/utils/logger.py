"""Настройка логирования"""
import logging
import sys
from typing import Union

NOISY_LOGGERS = ('aiogram', 'aiohttp', 'asyncio', 'botocore', 'boto3', 'urllib3', 'redis')


def setup_logging(level: Union[int, str] = logging.INFO):
    """
    Логи в stdout; level - число или имя уровня из LOG_LEVEL ("DEBUG", "INFO", ...)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Библиотеки пишут только предупреждения, если мы сами не в DEBUG
    library_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
