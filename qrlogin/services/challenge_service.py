import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from qrlogin.core.config import settings
from qrlogin.core.errors import ChallengeError, DocumentExistsError, ErrorKind
from qrlogin.db import DocumentStore, LOGINS, PARTNERS
from qrlogin.schemas import ChallengePayload, ChallengeResponse, LoginAttempt
from qrlogin.services.logger import log_event
from qrlogin.services.qr_service import QRService
from qrlogin.services.token_service import TokenService

"""ChallengeIssuer: validates a partner API key and hands out a QR login challenge"""

logger = logging.getLogger(__name__)


def _mask(api_key: str) -> str:
    return api_key[:4] + "***" if len(api_key) > 4 else "***"


class ChallengeIssuer:
    def __init__(
        self,
        store: DocumentStore,
        render: Callable[[str], str] = QRService.to_data_url,
        new_token: Callable[[], str] = TokenService.generate,
        max_attempts: int | None = None,
    ):
        self.partners = store.collection(PARTNERS)
        self.logins = store.collection(LOGINS)
        self.render = render
        self.new_token = new_token
        self.max_attempts = max_attempts if max_attempts is not None else settings.TOKEN_MAX_ATTEMPTS
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def issue(self, api_key: Any) -> ChallengeResponse:
        """
        Validates api_key against the partners collection, persists a pending
        login attempt and returns its token rendered as a QR data URL.
        """
        if not api_key or not isinstance(api_key, str):
            logger.warning("Challenge rejected: called without an API key")
            raise ChallengeError(ErrorKind.INVALID_ARGUMENT, "API key not provided.")

        started = time.perf_counter()
        try:
            if self.partners.find_one("apiKey", api_key) is None:
                logger.warning(f"Challenge rejected: unknown API key {_mask(api_key)}")
                raise ChallengeError(ErrorKind.PERMISSION_DENIED, "API key not found or invalid.")

            attempt = self._create_attempt(api_key)
            qr_code = self.render(attempt.login_token)
            if not qr_code:
                logger.error(f"QR rendering returned nothing for API key {_mask(api_key)}")
                raise ChallengeError(ErrorKind.INTERNAL, "Failed to generate login data or QR code.")
        except ChallengeError:
            raise
        except Exception as e:
            logger.exception(f"Challenge failed for API key {_mask(api_key)}")
            raise ChallengeError(
                ErrorKind.INTERNAL, str(e) or "Internal server error while processing the login."
            ) from e

        latency_ms = int((time.perf_counter() - started) * 1000)
        logger.info(f"Challenge issued: token={attempt.login_token[:12]}..., partner={_mask(api_key)}")
        log_event("CHALLENGE_ISSUED", attempt.login_token, "SUCCESS", latency_ms)

        return ChallengeResponse(
            message="QR code generated successfully.",
            payload=ChallengePayload(qr_code=qr_code, login_token=attempt.login_token),
        )

    def _create_attempt(self, api_key: str) -> LoginAttempt:
        # A key conflict is astronomically unlikely; draw a fresh token rather than overwrite
        for attempt_no in range(1, self.max_attempts + 1):
            token = self.new_token()
            attempt = LoginAttempt(
                api_key=api_key,
                login_token=token,
                created_at=datetime.now(timezone.utc),
            )
            try:
                self.logins.create(token, attempt.to_document())
                return attempt
            except DocumentExistsError:
                logger.warning(f"Login token collision on attempt {attempt_no}/{self.max_attempts}")

        logger.error(f"Gave up allocating a login token after {self.max_attempts} collisions")
        raise ChallengeError(ErrorKind.INTERNAL, "Could not allocate a unique login token.")
