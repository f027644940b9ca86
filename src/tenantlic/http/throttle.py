# src/tenantlic/http/throttle.py
import random
import time

# Statuses we retry (Graph throttling + gateway hiccups)
RETRY_STATUSES = {429, 502, 503, 504}

MAX_SLEEP_SECONDS = 8


def compute_sleep_seconds(attempt: int, retry_after_header: str | None) -> float:
    # Honor Retry-After (integer seconds)
    if retry_after_header and retry_after_header.strip().isdigit():
        return int(retry_after_header.strip())
    base = min(2 ** attempt, MAX_SLEEP_SECONDS)  # 1,2,4,8 cap
    return base * (0.6 + 0.8 * random.random())  # jitter 60–140%


def sleep_backoff(seconds: float) -> None:
    if seconds > 0:
        time.sleep(seconds)
