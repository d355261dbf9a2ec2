import pytest

from hotstring.config import EngineSettings
from hotstring.core.events import EngineObserver
from hotstring.host import MemoryTextHost
from hotstring.services.hotstring_engine import HotstringEngine


class RecordingObserver(EngineObserver):
    def __init__(self) -> None:
        self.snapshots = []
        self.statuses = []
        self.fired = []

    def on_buffer(self, snapshot):
        self.snapshots.append(snapshot)

    def on_status(self, status):
        self.statuses.append(status)

    def on_fire(self, definition):
        self.fired.append(definition)


@pytest.fixture
def host():
    return MemoryTextHost()


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def engine(host, observer):
    engine = HotstringEngine(EngineSettings(), host, observer)
    host.subscribe(engine.handle_change)
    return engine
