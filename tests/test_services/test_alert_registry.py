"""
Тесты AlertRegistry и WalletRegistry поверх KeyValueStore
"""
import pytest

from conftest import FailingBackend
from dlmm_bot.services.alert_registry import ALERTS_COLLECTION, AlertRegistry
from dlmm_bot.services.wallet_registry import WalletRegistry
from dlmm_bot.storage.exceptions import PersistenceError
from dlmm_bot.storage.json_storage import JSONBackend
from dlmm_bot.storage.kv_store import KeyValueStore


@pytest.fixture
def registry(local_store):
    return AlertRegistry(local_store)


@pytest.fixture
def wallets(local_store):
    return WalletRegistry(local_store)


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id,price", [(1, 30.0), (123456789, 0.01), (42, 250.75)])
async def test_set_then_get_returns_price(registry, user_id, price):
    await registry.set_alert(user_id, price)
    assert await registry.get_alert(user_id) == price


@pytest.mark.asyncio
async def test_second_alert_overwrites_first(registry):
    """Тест: у пользователя только один активный алерт"""
    await registry.set_alert(7, 30.0)
    await registry.set_alert(7, 45.0)

    assert await registry.get_alert(7) == 45.0
    assert await registry.list_all_alerts() == {7: 45.0}


@pytest.mark.asyncio
@pytest.mark.parametrize("price", [0, -5.0, float("nan")])
async def test_non_positive_price_rejected(registry, price):
    with pytest.raises(ValueError):
        await registry.set_alert(1, price)
    assert await registry.get_alert(1) is None


@pytest.mark.asyncio
async def test_remove_missing_alert_is_noop(registry):
    await registry.remove_alert(404)
    assert await registry.get_alert(404) is None


@pytest.mark.asyncio
async def test_remove_twice_same_as_once(registry):
    await registry.set_alert(1, 30.0)
    await registry.set_alert(2, 50.0)

    await registry.remove_alert(1)
    after_once = await registry.list_all_alerts()
    await registry.remove_alert(1)

    assert await registry.list_all_alerts() == after_once == {2: 50.0}


@pytest.mark.asyncio
async def test_list_all_alerts_reflects_current_state(registry):
    await registry.set_alert(1, 30.0)
    await registry.set_alert(2, 50.0)
    assert await registry.list_all_alerts() == {1: 30.0, 2: 50.0}

    await registry.remove_alert(2)
    assert await registry.list_all_alerts() == {1: 30.0}


@pytest.mark.asyncio
async def test_invalid_records_are_skipped(registry, local_store):
    await registry.set_alert(1, 30.0)
    await local_store.set(ALERTS_COLLECTION, 2, {"user_id": 2, "target_price": "not a number"})
    await local_store.set(ALERTS_COLLECTION, "abc", {"user_id": 3, "target_price": 10.0})

    assert await registry.list_all_alerts() == {1: 30.0}


@pytest.mark.asyncio
async def test_alerts_survive_restart(data_dir):
    await AlertRegistry(KeyValueStore(local=JSONBackend(str(data_dir)))).set_alert(11, 31.5)

    restarted = AlertRegistry(KeyValueStore(local=JSONBackend(str(data_dir))))
    assert await restarted.get_alert(11) == 31.5


@pytest.mark.asyncio
async def test_registry_works_with_failing_remote(local_backend):
    registry = AlertRegistry(KeyValueStore(local=local_backend, remote=FailingBackend()))

    await registry.set_alert(1, 30.0)
    assert await registry.get_alert(1) == 30.0
    await registry.remove_alert(1)
    assert await registry.list_all_alerts() == {}


@pytest.mark.asyncio
async def test_set_alert_raises_persistence_error_when_storage_unusable(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("file")
    registry = AlertRegistry(KeyValueStore(local=JSONBackend(str(blocker))))

    with pytest.raises(PersistenceError):
        await registry.set_alert(1, 30.0)
    assert await registry.get_alert(1) is None


@pytest.mark.asyncio
async def test_wallet_set_get_overwrite(wallets):
    assert await wallets.get_wallet(1) is None

    await wallets.set_wallet(1, "  7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU ")
    await wallets.set_wallet(1, "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")

    assert await wallets.get_wallet(1) == "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


@pytest.mark.asyncio
async def test_wallets_and_alerts_do_not_collide(registry, wallets):
    await registry.set_alert(1, 30.0)
    await wallets.set_wallet(1, "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")

    assert await registry.get_alert(1) == 30.0
    assert await wallets.get_wallet(1) == "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


@pytest.mark.asyncio
async def test_empty_wallet_rejected(wallets):
    with pytest.raises(ValueError):
        await wallets.set_wallet(1, "   ")


@pytest.mark.asyncio
async def test_remove_wallet(wallets):
    await wallets.set_wallet(1, "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")

    await wallets.remove_wallet(1)
    await wallets.remove_wallet(1)

    assert await wallets.get_wallet(1) is None
