import asyncio

from apps.reaper import Reaper
from lib.contracts.errors import StoreError
from lib.contracts.participant import Participant
from lib.store.memory import MemoryStore
from lib.utils.clock import ManualClock

START_MS = 1_700_000_000_000


async def _store_with(*participants):
    store = MemoryStore()
    await store.connect()
    for name, last_status in participants:
        await store.insert_participant(Participant(name=name, last_status=last_status))
    return store


def test_sweep_removes_only_stale_participants():
    async def scenario():
        clock = ManualClock(START_MS)
        store = await _store_with(("old", START_MS - 10_001), ("edge", START_MS - 10_000), ("fresh", START_MS - 9_999))
        removed = await Reaper(store, clock).sweep()
        remaining = [p.name for p in await store.list_participants()]
        messages = await store.list_messages(None)
        return removed, remaining, messages

    removed, remaining, messages = asyncio.run(scenario())
    assert sorted(removed) == ["edge", "old"]
    assert remaining == ["fresh"]
    assert sorted(m.sender for m in messages) == ["edge", "old"]
    assert all(m.text == "sai da sala..." and m.to == "Todos" and m.type == "status" for m in messages)


def test_sweep_with_nobody_inactive_writes_nothing():
    async def scenario():
        store = await _store_with(("ana", START_MS))
        removed = await Reaper(store, ManualClock(START_MS)).sweep()
        return removed, await store.list_messages(None)

    assert asyncio.run(scenario()) == ([], [])


class _FailingDeleteStore(MemoryStore):
    async def delete_participants(self, names):
        raise StoreError("delete failed")


def test_failed_sweep_is_swallowed_and_departure_still_recorded():
    async def scenario():
        store = _FailingDeleteStore()
        await store.connect()
        await store.insert_participant(Participant(name="ana", last_status=0))
        removed = await Reaper(store, ManualClock(START_MS)).sweep()
        return removed, await store.list_participants(), await store.list_messages(None)

    removed, participants, messages = asyncio.run(scenario())
    assert removed == []
    assert [p.name for p in participants] == ["ana"]
    assert [m.sender for m in messages] == ["ana"]


def test_sweep_on_disconnected_store_does_not_raise():
    assert asyncio.run(Reaper(MemoryStore(), ManualClock(START_MS)).sweep()) == []


def test_run_sweeps_on_schedule():
    async def scenario():
        store = await _store_with(("ana", 0))
        reaper = Reaper(store, ManualClock(START_MS), interval=0.01)
        reaper.start()
        for _ in range(100):
            if not await store.list_participants():
                break
            await asyncio.sleep(0.01)
        await reaper.stop()
        return await store.list_participants(), reaper.running

    participants, running = asyncio.run(scenario())
    assert participants == []
    assert running is False
