import pytest
from fastapi.testclient import TestClient

from apps.chat_room.main import create_app
from lib.config.chat_room_loader import RoomConfig
from lib.store.memory import MemoryStore
from lib.store.sqlite import SqliteStore
from lib.utils.clock import ManualClock

START_MS = 1_700_000_000_000


@pytest.fixture
def clock():
    return ManualClock(START_MS)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SqliteStore(str(tmp_path / "chat_room.db"))


@pytest.fixture
def app(store, clock):
    return create_app(RoomConfig(reaper_enabled=False, store_url=store.url), store=store, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
