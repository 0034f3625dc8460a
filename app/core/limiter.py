"""Rate limiter instance for SlowAPI plus the failed-login tracker.

Shared so both main (app.state.limiter) and route modules (e.g. auth) can use
the same instance without circular imports. Central limit strings and decorators
keep rate limits DRY.
"""

import math
import time
from collections import defaultdict
from threading import Lock

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.domain.exceptions import TooManyAttemptsException

limiter = Limiter(key_func=get_remote_address)

# Single source of truth for rate limit strings and decorators.
LOGIN_LIMIT = "10/minute"
CHECK_SESSION_LIMIT = "20/minute"
PASSWORD_RESET_REQUEST_LIMIT = "5/minute"
PASSWORD_RESET_VERIFY_LIMIT = "10/minute"
PASSWORD_RESET_LIMIT = "5/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"

limit_auth = limiter.limit(LOGIN_LIMIT)
limit_check_session = limiter.limit(CHECK_SESSION_LIMIT)
limit_reset_request = limiter.limit(PASSWORD_RESET_REQUEST_LIMIT)
limit_reset_verify = limiter.limit(PASSWORD_RESET_VERIFY_LIMIT)
limit_reset = limiter.limit(PASSWORD_RESET_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)


class LoginAttemptTracker:
    """In-memory sliding window of failed logins per identifier (email/username).

    After max_attempts failures inside window_seconds, check() raises
    TooManyAttemptsException until the oldest failure leaves the window.
    Per process; a multi-worker deployment gets one window per worker.
    """

    def __init__(self, max_attempts: int = 5, window_seconds: int = 60) -> None:
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._failures: defaultdict[str, list[float]] = defaultdict(list)
        self._lock = Lock()

    @staticmethod
    def _key(identifier: str) -> str:
        return identifier.strip().lower()

    def configure(self, max_attempts: int, window_seconds: int) -> None:
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds

    def check(self, identifier: str) -> None:
        """Raise TooManyAttemptsException if identifier is locked out."""
        if not identifier:
            return
        now = time.monotonic()
        cutoff = now - self.window_seconds
        key = self._key(identifier)
        with self._lock:
            recent = [t for t in self._failures.get(key, ()) if t > cutoff]
            if not recent:
                self._failures.pop(key, None)
                return
            self._failures[key] = recent
            if len(recent) >= self.max_attempts:
                retry_after = math.ceil(recent[0] + self.window_seconds - now)
                raise TooManyAttemptsException(max(retry_after, 1))

    def hit(self, identifier: str) -> None:
        """Record one failed attempt."""
        if not identifier:
            return
        with self._lock:
            self._failures[self._key(identifier)].append(time.monotonic())

    def clear(self, identifier: str) -> None:
        """Forget failures after a successful login."""
        with self._lock:
            self._failures.pop(self._key(identifier), None)

    def reset(self) -> None:
        with self._lock:
            self._failures.clear()


login_attempts = LoginAttemptTracker()
