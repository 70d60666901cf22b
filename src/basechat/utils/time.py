import time


def get_current_timestamp() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // 1_000_000
