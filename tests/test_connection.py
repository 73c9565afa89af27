import threading
import time

import pytest
from sqlalchemy.exc import OperationalError

from services.connection import DurableConnection


class ProbeStub:
    """可控的探测：前 fail_times 次失败，之后成功"""

    def __init__(self, fail_times=0, delay=0.0):
        self.fail_times = fail_times
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, conn):
        with self._lock:
            self.calls += 1
            n = self.calls
        if self.delay:
            time.sleep(self.delay)
        if n <= self.fail_times:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.fixture()
def probe(monkeypatch):
    def install(**kwargs):
        stub = ProbeStub(**kwargs)
        monkeypatch.setattr(DurableConnection, "_probe", lambda self: stub(self))
        return stub
    return install


def test_disabled_store_is_never_probed(app, probe):
    stub = probe()
    app.config["DURABLE_STORE_ENABLED"] = False
    conn = DurableConnection()
    assert conn.acquire() is False
    assert stub.calls == 0
    assert "not configured" in conn.last_error


def test_success_is_cached(app, probe):
    stub = probe()
    conn = DurableConnection()
    assert conn.acquire() and conn.acquire() and conn.acquire()
    assert stub.calls == 1
    assert conn.ready


def test_failure_is_retried_after_backoff(app, probe):
    stub = probe(fail_times=1)
    app.config["DURABLE_RETRY_BACKOFF"] = 0
    conn = DurableConnection()
    assert conn.acquire() is False
    assert "connection refused" in conn.last_error
    assert conn.acquire() is True
    assert stub.calls == 2
    assert conn.last_error is None


def test_no_retry_inside_backoff_window(app, probe):
    stub = probe(fail_times=10)
    app.config["DURABLE_RETRY_BACKOFF"] = 30
    conn = DurableConnection()
    assert conn.acquire() is False
    assert conn.acquire() is False
    assert stub.calls == 1


def test_backoff_grows_and_is_capped(app):
    app.config["DURABLE_RETRY_BACKOFF"] = 2
    app.config["DURABLE_RETRY_BACKOFF_MAX"] = 10
    conn = DurableConnection()
    waits = []
    for failures in range(1, 6):
        conn._failures = failures
        waits.append(conn._backoff())
    assert waits == [2, 4, 8, 10, 10]


def test_invalidate_forces_a_new_probe(app, probe):
    stub = probe()
    conn = DurableConnection()
    assert conn.acquire()
    conn.invalidate("server closed the connection")
    assert not conn.ready
    assert conn.acquire()
    assert stub.calls == 2


def test_concurrent_callers_share_one_attempt(app, probe):
    stub = probe(delay=0.05)
    conn = DurableConnection()
    results = []

    def worker():
        with app.app_context():
            results.append(conn.acquire())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == [True] * 8
    assert stub.calls == 1


def test_real_probe_against_sqlite(app):
    conn = DurableConnection()
    assert conn.acquire() is True
