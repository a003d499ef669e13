"""
DynamoDB storage backend
Альтернатива Redis для удаленного хранения (dynamodb://<table>?region=<region>)
"""
import asyncio
import json
import logging
import os
from typing import Any, Dict, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from dlmm_bot.storage.base import StoreBackend

logger = logging.getLogger(__name__)


class DynamoDBBackend(StoreBackend):
    """
    DynamoDB backend для коллекций бота

    Таблица:
        PK (hash): collection#{collection}
        SK (range): ключ записи (user_id)
        Attributes: value - JSON строка
    """

    name = "dynamodb"

    def __init__(self, table_name: str = "dlmm-bot", region: str = None):
        """
        Args:
            table_name: Имя DynamoDB таблицы
            region: AWS регион (если None - читает из AWS_REGION)
        """
        self.table_name = table_name
        self.region = region or os.getenv('AWS_REGION', 'us-east-2')

        self.dynamodb = boto3.resource('dynamodb', region_name=self.region)
        self.table = self.dynamodb.Table(table_name)

    @staticmethod
    def _pk(collection: str) -> str:
        return f"collection#{collection}"

    async def connect(self) -> bool:
        """Проверяем, что таблица существует и доступна"""
        try:
            await asyncio.to_thread(self.table.load)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"DynamoDB table '{self.table_name}' is unavailable: {e}")
            return False
        logger.info(f"DynamoDB storage initialized: {self.table_name} in {self.region}")
        return True

    async def get(self, collection: str, key: str) -> Optional[Any]:
        response = await asyncio.to_thread(
            self.table.get_item,
            Key={'PK': self._pk(collection), 'SK': str(key)}
        )
        item = response.get('Item')
        return json.loads(item['value']) if item else None

    async def set(self, collection: str, key: str, value: Any) -> None:
        item = {
            'PK': self._pk(collection),
            'SK': str(key),
            'value': json.dumps(value, default=str),
        }
        await asyncio.to_thread(self.table.put_item, Item=item)

    async def delete(self, collection: str, key: str) -> None:
        await asyncio.to_thread(
            self.table.delete_item,
            Key={'PK': self._pk(collection), 'SK': str(key)}
        )

    async def items(self, collection: str) -> Dict[str, Any]:
        """Query по PK, с пагинацией"""
        result: Dict[str, Any] = {}
        query_kwargs = {'KeyConditionExpression': Key('PK').eq(self._pk(collection))}
        while True:
            response = await asyncio.to_thread(self.table.query, **query_kwargs)
            for item in response.get('Items', []):
                result[item['SK']] = json.loads(item['value'])
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                break
            query_kwargs['ExclusiveStartKey'] = last_key
        return result
