# Centralised application configuration
# (environment variables, token sizes, timeouts).

import os


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    APP_NAME = os.getenv("APP_NAME", "QR Login Handshake")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # 192 random bytes -> 256 base64url characters
    TOKEN_BYTES = int(os.getenv("TOKEN_BYTES", "192"))
    TOKEN_MAX_ATTEMPTS = int(os.getenv("TOKEN_MAX_ATTEMPTS", "3"))

    LOGIN_TTL_SECONDS = int(os.getenv("LOGIN_TTL_SECONDS", "120"))  # 2 Minutes
    JANITOR_ENABLED = _env_bool("JANITOR_ENABLED", "1")
    JANITOR_INTERVAL_SECONDS = int(os.getenv("JANITOR_INTERVAL_SECONDS", "30"))
    POLL_MIN_INTERVAL_MS = int(os.getenv("POLL_MIN_INTERVAL_MS", "800"))

    # Comma separated keys seeded into the partners collection at start-up
    PARTNER_API_KEYS = [k.strip() for k in os.getenv("PARTNER_API_KEYS", "").split(",") if k.strip()]

    QR_BOX_SIZE = int(os.getenv("QR_BOX_SIZE", "10"))
    QR_BORDER = int(os.getenv("QR_BORDER", "4"))

    EVENT_LOG_ENABLED = _env_bool("EVENT_LOG_ENABLED", "0")
    EVENT_LOG_FILE = os.getenv("EVENT_LOG_FILE", "login_events.csv")

settings = Settings()
