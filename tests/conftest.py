import httpx
import pytest

from trellocord.relay.store import CrossReferenceStore
from trellocord.service import RelayService

from helpers import FakeRedis, FakeRemote, make_config


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    """Keep webhook and error log files out of the working directory."""
    path = tmp_path / "logs"
    monkeypatch.setenv("TRELLOCORD_LOG_DIR", str(path))
    return path


@pytest.fixture
def config(tmp_path):
    return make_config(tmp_path)


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(fake_redis):
    return CrossReferenceStore(client=fake_redis)


@pytest.fixture
def service(config, remote, store):
    http = httpx.AsyncClient(transport=remote.transport())
    return RelayService(config, http=http, store=store)
