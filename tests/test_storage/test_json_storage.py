"""
Юнит-тесты для локального JSON backend
"""
import json

import pytest

from dlmm_bot.storage.exceptions import StorageInitError
from dlmm_bot.storage.json_storage import JSONBackend


@pytest.mark.asyncio
async def test_connect_creates_data_dir(data_dir, local_backend):
    """Тест: connect создает папку и повторный вызов ничего не ломает"""
    assert await local_backend.connect() is True
    assert await local_backend.connect() is True
    assert data_dir.is_dir()


@pytest.mark.asyncio
async def test_connect_fails_when_path_is_a_file(tmp_path):
    """Тест: непригодная папка - фатальная ошибка инициализации"""
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")

    with pytest.raises(StorageInitError):
        await JSONBackend(str(blocker)).connect()


@pytest.mark.asyncio
async def test_set_get_delete(local_backend):
    await local_backend.set("alerts", "42", {"target_price": 30.0})
    assert await local_backend.get("alerts", "42") == {"target_price": 30.0}

    await local_backend.delete("alerts", "42")
    assert await local_backend.get("alerts", "42") is None


@pytest.mark.asyncio
async def test_delete_missing_key_is_noop(local_backend):
    await local_backend.delete("alerts", "404")
    assert await local_backend.items("alerts") == {}


@pytest.mark.asyncio
async def test_collections_do_not_collide(local_backend):
    """Тест: одинаковый ключ в разных коллекциях - разные записи"""
    await local_backend.set("alerts", "1", 30.0)
    await local_backend.set("wallets", "1", "So1anaAddr")

    assert await local_backend.get("alerts", "1") == 30.0
    assert await local_backend.get("wallets", "1") == "So1anaAddr"
    assert await local_backend.items("alerts") == {"1": 30.0}


@pytest.mark.asyncio
async def test_data_survives_restart(data_dir):
    """Тест: новый экземпляр на той же папке видит старые данные"""
    first = JSONBackend(str(data_dir))
    await first.set("alerts", "7", 52.5)

    second = JSONBackend(str(data_dir))
    assert await second.get("alerts", "7") == 52.5
    assert (data_dir / "alerts.json").exists()


@pytest.mark.asyncio
async def test_corrupt_file_is_treated_as_empty(data_dir, local_backend):
    await local_backend.connect()
    (data_dir / "alerts.json").write_text("{broken json", encoding="utf-8")

    assert await local_backend.items("alerts") == {}

    await local_backend.set("alerts", "1", 10.0)
    with open(data_dir / "alerts.json", encoding="utf-8") as f:
        assert json.load(f) == {"1": 10.0}


@pytest.mark.asyncio
async def test_invalid_collection_name_rejected(local_backend):
    with pytest.raises(ValueError):
        await local_backend.set("../escape", "1", 1)
