import os

from lib.config.chat_room_loader import load_room_config
from lib.utils.clock import ManualClock, SystemClock, format_clock_time


def test_defaults_without_file(tmp_path):
    cfg = load_room_config(str(tmp_path / "missing.yaml"), env={})
    assert cfg.port == 5000
    assert cfg.reaper_interval_seconds == 15.0
    assert cfg.inactive_after_seconds == 10.0
    assert cfg.store_url == "sqlite:///chat_room.db"


def test_yaml_values_and_env_override(tmp_path):
    path = tmp_path / "chat_room.yaml"
    path.write_text(
        "server:\n  port: 8080\nstore:\n  url: memory://\nreaper:\n  enabled: false\n  interval_seconds: 2\n",
        encoding="utf-8",
    )
    cfg = load_room_config(str(path), env={})
    assert cfg.port == 8080
    assert cfg.store_url == "memory://"
    assert cfg.reaper_enabled is False
    assert cfg.reaper_interval_seconds == 2.0

    cfg = load_room_config(str(path), env={"DATABASE_URL": "sqlite:///other.db"})
    assert cfg.store_url == "sqlite:///other.db"


def test_repository_config_loads():
    cfg = load_room_config("config/chat_room.yaml", env={})
    assert cfg.reaper_enabled is True
    assert cfg.cors_origins == ["*"]


def test_clocks():
    clock = ManualClock(1_000)
    clock.advance(1.5)
    assert clock.timestamp_ms() == 2_500
    assert len(format_clock_time(clock.timestamp_ms())) == 8
    assert abs(SystemClock().timestamp_ms() - SystemClock().timestamp_ms()) < 1_000


def test_loading_config_leaves_environment_alone(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    (tmp_path / ".env").write_text("DATABASE_URL=memory://\n", encoding="utf-8")

    cfg = load_room_config("missing.yaml")

    assert cfg.store_url == "sqlite:///chat_room.db"
    assert "DATABASE_URL" not in os.environ
