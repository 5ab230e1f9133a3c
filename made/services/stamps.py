"""Identity and time stamps for new records."""

import time
import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    """Epoch milliseconds, the timestamp unit of the persisted document."""
    return int(time.time() * 1000)
