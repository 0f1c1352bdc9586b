import logging
from typing import Callable, Iterable

from pydantic import ValidationError

from qrlogin.schemas import ConfirmationPayload, ConfirmationState, WatchResult
from qrlogin.services.logger import log_event

logger = logging.getLogger(__name__)

ConfirmationSink = Callable[[WatchResult], object]


class ConfirmationWatcher:
    """
    Reacts to updates of login documents.

    Every call is treated as an independent snapshot: the store may deliver the
    same update twice or out of order, so nothing is remembered between calls.
    Sinks receive each confirmation and must tolerate duplicates.
    """

    def __init__(self, sinks: Iterable[ConfirmationSink] = ()):
        self.sinks = list(sinks)

    def add_sink(self, sink: ConfirmationSink) -> None:
        self.sinks.append(sink)

    def handle(self, login_token: str, snapshot) -> WatchResult:
        logger.info(f"Document login/{login_token[:12]}... updated. Checking...")

        try:
            state = ConfirmationState.model_validate(snapshot)
        except ValidationError as e:
            logger.warning(f"Malformed snapshot for login/{login_token[:12]}..., treating as pending: {e.error_count()} error(s)")
            return self._pending(login_token)

        if not (state.user and state.confirmed_at is not None):
            return self._pending(login_token)

        result = WatchResult(
            status="SUCCESS",
            message="Login confirmed.",
            login_token=login_token,
            payload=ConfirmationPayload(user_id=state.user, confirmed_at=state.confirmed_at),
        )
        logger.info(f"CONFIRMED: login/{login_token[:12]}... user={state.user} confirmed_at={state.confirmed_at.isoformat()}")
        log_event("LOGIN_CONFIRMED", login_token, "SUCCESS")

        for sink in self.sinks:
            try:
                sink(result)
            except Exception:
                logger.exception(f"Confirmation sink failed for login/{login_token[:12]}...")
        return result

    @staticmethod
    def _pending(login_token: str) -> WatchResult:
        logger.info(f"PENDING: update to login/{login_token[:12]}... did not confirm the login yet")
        return WatchResult(
            status="PENDING",
            message="Login not confirmed yet.",
            login_token=login_token,
        )
