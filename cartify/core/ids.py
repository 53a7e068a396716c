# cartify/core/ids.py
import time
from typing import Callable


def timestamp_id(prefix: str, exists: Callable[[str], bool]) -> str:
    """
    Millisecond-timestamp identifier, e.g. "ORD1718000000000".

    If the candidate is already taken (two ids minted in the same
    millisecond) the timestamp is bumped until a free one is found.
    """
    millis = int(time.time() * 1000)
    candidate = f"{prefix}{millis}"
    while exists(candidate):
        millis += 1
        candidate = f"{prefix}{millis}"
    return candidate
