import pytest

from config import Settings
from errors import ConfigError
from models import ServiceConfig
from services.config_watcher import ConfigHolder, ConfigWatcher


class FakeEvictor:
    def __init__(self, ttl, stops_cleanly=True):
        self.ttl = ttl
        self.stops_cleanly = stops_cleanly
        self.started = False
        self.stop_grace = None

    def start(self):
        self.started = True

    def stop(self, grace):
        self.stop_grace = grace
        return self.stops_cleanly


class EvictorFactory:
    def __init__(self):
        self.created: list[FakeEvictor] = []
        self.stops_cleanly = True

    def __call__(self, ttl):
        evictor = FakeEvictor(ttl, stops_cleanly=self.stops_cleanly)
        self.created.append(evictor)
        return evictor


@pytest.fixture
def factory():
    return EvictorFactory()


@pytest.fixture
def watcher(holder, factory):
    w = ConfigWatcher(holder, factory)
    w.start()
    return w


def test_start_spawns_evictor_with_current_ttl(watcher, factory):
    assert [e.ttl for e in factory.created] == [60]
    assert factory.created[0].started


def test_apply_replaces_config_and_respawns_evictor(watcher, holder, factory):
    watcher.apply(ServiceConfig(request_timeout=10, ttl=120))

    assert holder.get() == ServiceConfig(request_timeout=10, ttl=120)
    old, new = factory.created
    assert old.stop_grace == 1.0
    assert new.ttl == 120 and new.started
    assert watcher.evictor is new


def test_last_applied_config_wins(watcher, holder, factory):
    watcher.apply(ServiceConfig(request_timeout=10, ttl=120))
    watcher.apply(ServiceConfig(request_timeout=5, ttl=30))

    config = holder.get()
    assert (config.request_timeout, config.ttl) == (5, 30)
    assert [e.ttl for e in factory.created] == [60, 120, 30]
    assert watcher.evictor.ttl == 30


def test_stuck_evictor_is_reported_but_replaced(watcher, holder, factory):
    factory.created[0].stops_cleanly = False

    with pytest.raises(ConfigError) as exc_info:
        watcher.apply(ServiceConfig(request_timeout=5, ttl=30))

    assert exc_info.value.status_code == 500
    assert holder.get().ttl == 30
    assert factory.created[-1].ttl == 30
    assert factory.created[-1].started


def test_stop_cancels_current_evictor(watcher, factory):
    assert watcher.stop()
    assert factory.created[0].stop_grace == 1.0
    assert watcher.evictor is None


def test_holder_replace_returns_previous():
    holder = ConfigHolder(ServiceConfig(request_timeout=3, ttl=60))

    old = holder.replace(ServiceConfig(request_timeout=4, ttl=70))

    assert old.ttl == 60
    assert holder.get().ttl == 70


@pytest.mark.parametrize("timeout,ttl", [(0, 60), (-1, 60), (3, -1)])
def test_invalid_service_config_is_rejected(timeout, ttl):
    with pytest.raises(ConfigError):
        ServiceConfig(request_timeout=timeout, ttl=ttl)


def test_settings_build_service_config(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "10")
    monkeypatch.setenv("CACHE_TTL", "120")

    assert Settings().service_config() == ServiceConfig(request_timeout=10, ttl=120)


def test_settings_reject_non_integer_values(monkeypatch):
    monkeypatch.setenv("CACHE_TTL", "an hour")

    with pytest.raises(ConfigError):
        Settings().service_config()
