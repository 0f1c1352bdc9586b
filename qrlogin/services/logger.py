# CSV event log of issuance and confirmation outcomes, kept next to the
# regular application log for latency analysis.

import csv
import logging
import os
import time
from qrlogin.core.config import settings

logger = logging.getLogger(__name__)

HEADER = ["timestamp", "event_type", "login_token", "outcome", "latency_ms"]


def log_event(event_type: str, login_token: str, outcome: str, latency_ms: int = 0):
    """Appends one row to the CSV event log. Write failures are logged, never raised."""
    if not settings.EVENT_LOG_ENABLED:
        return

    log_file = settings.EVENT_LOG_FILE
    try:
        write_header = not os.path.exists(log_file)
        with open(log_file, "a", newline="") as f:
            writer = csv.writer(f)
            if write_header:
                writer.writerow(HEADER)
            # Only a token prefix; the full token is a bearer secret until confirmed
            writer.writerow([time.time(), event_type, login_token[:12], outcome, latency_ms])
    except OSError:
        logger.exception(f"Could not write {event_type} event to {log_file}")
