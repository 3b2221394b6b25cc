import asyncio

from vs_chatbot.core.orchestrator import KeyedLock


async def test_lock_is_released_from_registry():
    locks = KeyedLock()

    async with locks.acquire("a"):
        assert "a" in locks
        assert len(locks) == 1

    assert "a" not in locks
    assert len(locks) == 0


async def test_same_key_waits_for_holder():
    locks = KeyedLock()
    order = []

    async def worker(name, delay):
        async with locks.acquire("conn"):
            order.append(f"{name}-in")
            await asyncio.sleep(delay)
            order.append(f"{name}-out")

    await asyncio.gather(worker("first", 0.02), worker("second", 0))

    assert order == ["first-in", "first-out", "second-in", "second-out"]
    assert len(locks) == 0


async def test_different_keys_do_not_block():
    locks = KeyedLock()

    async with locks.acquire("a"):
        async with locks.acquire("b"):
            assert len(locks) == 2


async def test_lock_released_on_error():
    locks = KeyedLock()

    try:
        async with locks.acquire("a"):
            raise ValueError("boom")
    except ValueError:
        pass

    assert "a" not in locks
