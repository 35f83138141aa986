import time


def get_current_timestamp() -> int:
    """Milliseconds since the epoch, the resolution the hosted store uses for 'created_at'."""
    return int(time.time() * 1000)
