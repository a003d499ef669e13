"""
Юнит-тесты для DynamoDB backend
Используем moto для мокирования AWS
"""
import boto3
import pytest
from moto import mock_aws

from dlmm_bot.storage.dynamodb_storage import DynamoDBBackend


@pytest.fixture
def aws_credentials(monkeypatch):
    """Мокируем AWS credentials для тестов"""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')


@pytest.fixture
def mock_dynamodb(aws_credentials):
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_table(mock_dynamodb):
    """Создает мок DynamoDB таблицу для тестов"""
    dynamodb = boto3.resource('dynamodb', region_name='us-east-1')
    table = dynamodb.create_table(
        TableName='dlmm-bot',
        KeySchema=[
            {'AttributeName': 'PK', 'KeyType': 'HASH'},
            {'AttributeName': 'SK', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'PK', 'AttributeType': 'S'},
            {'AttributeName': 'SK', 'AttributeType': 'S'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )
    table.meta.client.get_waiter('table_exists').wait(TableName='dlmm-bot')
    return table


@pytest.fixture
def backend(dynamodb_table):
    return DynamoDBBackend(table_name='dlmm-bot', region='us-east-1')


@pytest.mark.asyncio
async def test_connect_existing_table(backend):
    assert await backend.connect() is True


@pytest.mark.asyncio
async def test_connect_missing_table(mock_dynamodb):
    """Тест: таблицы нет - backend недоступен, без исключения"""
    backend = DynamoDBBackend(table_name='no-such-table', region='us-east-1')
    assert await backend.connect() is False


@pytest.mark.asyncio
async def test_set_get_delete(backend, dynamodb_table):
    await backend.set('alerts', '42', {'user_id': 42, 'target_price': 30.5})

    item = dynamodb_table.get_item(Key={'PK': 'collection#alerts', 'SK': '42'})['Item']
    assert item['SK'] == '42'
    assert await backend.get('alerts', '42') == {'user_id': 42, 'target_price': 30.5}

    await backend.delete('alerts', '42')
    assert await backend.get('alerts', '42') is None


@pytest.mark.asyncio
async def test_items_scoped_by_collection(backend):
    await backend.set('alerts', '1', 30.0)
    await backend.set('alerts', '2', 50.0)
    await backend.set('wallets', '1', 'addr')

    assert await backend.items('alerts') == {'1': 30.0, '2': 50.0}
    assert await backend.items('wallets') == {'1': 'addr'}


@pytest.mark.asyncio
async def test_delete_missing_key_is_noop(backend):
    await backend.delete('alerts', '999')
    assert await backend.items('alerts') == {}
