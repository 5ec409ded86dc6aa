import time

import pytest

from hostrepl.client import ReplClient
from hostrepl.config import ReplConfig
from hostrepl.context import EvaluationContext
from hostrepl.server import ReplServer

# Every server in the suite binds an ephemeral port on the loopback interface
# and is driven by calling tick() from the test itself.


@pytest.fixture
def context():
    return EvaluationContext({})


@pytest.fixture
def config():
    return ReplConfig(host="127.0.0.1", port=0)


@pytest.fixture
def server(config, context):
    srv = ReplServer(config, context)
    assert srv.start()
    yield srv
    srv.stop()


@pytest.fixture
def client(server):
    host, port = server.address
    c = ReplClient(host, port, timeout=2.0)
    c.connect()
    yield c
    c.close()


@pytest.fixture
def pump():
    """Tick `server` until `predicate()` holds or `timeout` expires."""
    def _pump(server, predicate, timeout=2.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            server.tick()
            if predicate():
                return True
            time.sleep(0.005)
        return False
    return _pump
