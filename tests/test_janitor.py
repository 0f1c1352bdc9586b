"""Tests for LoginJanitor - TTL clean-up of unconfirmed login attempts."""

import time
from datetime import datetime, timedelta, timezone

from qrlogin.schemas import LoginAttempt, is_confirmed
from qrlogin.services.janitor import LoginJanitor

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def add_attempt(logins, token, age_seconds, **extra):
    doc = {"apiKey": "partner-42", "loginToken": token, "createdAt": NOW - timedelta(seconds=age_seconds)}
    doc.update(extra)
    logins.create(token, doc)


def test_sweep_removes_only_stale_pending(store, logins):
    add_attempt(logins, "fresh", 30)
    add_attempt(logins, "stale", 300)
    add_attempt(logins, "stale-confirmed", 300, user="alice", confirmedAt=NOW - timedelta(seconds=250))
    add_attempt(logins, "stale-partial", 300, user="alice")

    deleted = LoginJanitor(store, ttl_seconds=120).sweep(now=NOW)

    assert deleted == 2
    assert "fresh" in logins
    assert "stale-confirmed" in logins
    assert "stale" not in logins
    assert "stale-partial" not in logins


def test_sweep_boundary_and_naive_timestamps(store, logins):
    add_attempt(logins, "exactly-ttl", 120)
    logins.create("naive", {"createdAt": (NOW - timedelta(seconds=500)).replace(tzinfo=None)})
    logins.create("no-timestamp", {"apiKey": "partner-42"})

    assert LoginJanitor(store, ttl_seconds=120).sweep(now=NOW) == 2
    assert list(key for key, _ in logins.items()) == ["no-timestamp"]


def test_sweep_on_empty_store(store):
    assert LoginJanitor(store, ttl_seconds=1).sweep() == 0


def test_background_thread_sweeps(store, logins):
    logins.create("old", {"createdAt": datetime.now(timezone.utc) - timedelta(hours=1)})
    janitor = LoginJanitor(store, ttl_seconds=60, interval_seconds=0.05)

    janitor.start()
    try:
        deadline = time.time() + 2
        while "old" in logins and time.time() < deadline:
            time.sleep(0.02)
        assert janitor.running
    finally:
        janitor.stop()

    assert "old" not in logins
    assert not janitor.running


def test_confirmation_rule_is_shared():
    doc = {"apiKey": "partner-42", "loginToken": "t", "createdAt": NOW}
    assert not is_confirmed(doc)
    assert not is_confirmed({**doc, "user": "alice"})
    assert is_confirmed({**doc, "user": "alice", "confirmedAt": NOW})
    assert LoginAttempt.model_validate({**doc, "user": "alice", "confirmedAt": NOW}).is_confirmed
    assert not LoginAttempt.model_validate({**doc, "confirmedAt": NOW}).is_confirmed
