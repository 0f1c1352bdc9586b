# Scheduled clean-up of login attempts that were never confirmed.

import logging
import threading
from datetime import datetime, timedelta, timezone

from qrlogin.core.config import settings
from qrlogin.db import DocumentStore, LOGINS
from qrlogin.schemas import is_confirmed

logger = logging.getLogger(__name__)


class LoginJanitor:
    def __init__(self, store: DocumentStore, ttl_seconds: int | None = None, interval_seconds: int | None = None):
        self.logins = store.collection(LOGINS)
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.LOGIN_TTL_SECONDS
        self.interval_seconds = interval_seconds if interval_seconds is not None else settings.JANITOR_INTERVAL_SECONDS
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def sweep(self, now: datetime | None = None) -> int:
        """
        Deletes pending login attempts created more than ttl_seconds ago.
        Confirmed attempts are left alone. Returns the number deleted.
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(seconds=self.ttl_seconds)

        def expired(doc: dict) -> bool:
            created_at = doc.get("createdAt")
            if is_confirmed(doc) or not isinstance(created_at, datetime):
                return False
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
            return created_at <= cutoff

        deleted = 0
        for key, doc in self.logins.items():
            # Re-checked inside delete() in case the attempt was confirmed meanwhile
            if expired(doc) and self.logins.delete(key, only_if=expired):
                deleted += 1

        if deleted:
            logger.info(f"Janitor removed {deleted} expired login attempt(s) older than {self.ttl_seconds}s")
        return deleted

    def _run(self):
        while not self._stop.wait(self.interval_seconds):
            try:
                self.sweep()
            except Exception:
                logger.exception("Janitor sweep failed")

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="login-janitor", daemon=True)
        self._thread.start()
        logger.info(f"Janitor started: ttl={self.ttl_seconds}s, interval={self.interval_seconds}s")

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
