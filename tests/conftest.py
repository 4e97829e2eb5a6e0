from fakes import FakeRpc, cln_responses, lnd_responses
from pyln.regtest import ClnClient, LndClient, poll
from pyln.regtest.utils import TEST_DEBUG

import logging
import pytest
import sys


@pytest.fixture(autouse=True)
def setup_logging():
    """Enable logging before a test, and remove all handlers afterwards.

    pytest swaps out sys.stdout and sys.stderr to capture output; handlers
    still pointing at them after the test would write to closed buffers.
    """
    if TEST_DEBUG:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stdout)

    yield

    loggers = [logging.getLogger()] + list(logging.Logger.manager.loggerDict.values())
    for logger in loggers:
        handlers = getattr(logger, 'handlers', [])
        for handler in handlers:
            logger.removeHandler(handler)


@pytest.fixture
def sleeps(monkeypatch):
    """Make the poller's sleeps instant, and record what it asked for."""
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(poll, 'sleep', fake_sleep)
    return delays


@pytest.fixture
def cln_rpc():
    return FakeRpc(cln_responses())


@pytest.fixture
def lnd_rpc():
    return FakeRpc(lnd_responses())


@pytest.fixture
def cln(cln_rpc):
    return ClnClient(rpc=cln_rpc)


@pytest.fixture
def lnd(lnd_rpc):
    return LndClient(rpc=lnd_rpc)


def fake_client(kind):
    """A client for {kind}, with its fake transport on `.fake`."""
    if kind == "cln":
        rpc = FakeRpc(cln_responses())
        client = ClnClient(rpc=rpc)
    else:
        rpc = FakeRpc(lnd_responses())
        client = LndClient(rpc=rpc)
    client.fake = rpc
    return client


@pytest.fixture(params=["cln", "lnd"])
def node(request):
    return fake_client(request.param)


@pytest.fixture(params=["cln", "lnd"])
def peer(request):
    return fake_client(request.param)
