import itertools
import logging
from typing import Callable, Dict, List, Optional, Tuple

ROLL = 'roll'
QUESTION = 'question'
RESULTS = 'results'
EVICT_PREFIX = 'evict:'


def eviction_kind(player_id: str) -> str:
    return f'{EVICT_PREFIX}{player_id}'


class StageTimers:
    """Single-shot, cancellable timers keyed by (venue_id, kind).

    - Scheduling a kind that is already pending for the venue replaces it
    - Each schedule gets a fresh token; a worker whose token is no longer
      current when it wakes does nothing
    - The callback receives its token and must ``consume`` it under the
      session lock before acting, so a cancel issued in between wins
    """

    def __init__(self, start_task: Callable, sleep: Callable, logger: Optional[logging.Logger] = None):
        self._start_task = start_task
        self._sleep = sleep
        self.logger = logger or logging.getLogger(__name__)
        self._tokens: Dict[Tuple[str, str], int] = {}
        self._counter = itertools.count(1)

    def schedule(self, venue_id: str, kind: str, delay: float, callback: Callable[[int], None]) -> int:
        key = (venue_id, kind)
        token = next(self._counter)
        if key in self._tokens:
            self.logger.info(f"[timer-replace] venue={venue_id} kind={kind} previous={self._tokens[key]}")
        self._tokens[key] = token
        self.logger.info(f"[timer-set] venue={venue_id} kind={kind} delay={delay}s token={token}")
        self._start_task(self._worker, key, token, delay, callback)
        return token

    def cancel(self, venue_id: str, kind: str) -> bool:
        token = self._tokens.pop((venue_id, kind), None)
        if token is not None:
            self.logger.info(f"[timer-cancel] venue={venue_id} kind={kind} token={token}")
        return token is not None

    def cancel_all(self, venue_id: str) -> int:
        keys = [k for k in self._tokens if k[0] == venue_id]
        for key in keys:
            self.cancel(*key)
        return len(keys)

    def pending(self, venue_id: str) -> List[str]:
        return sorted(kind for (vid, kind) in self._tokens if vid == venue_id)

    def is_pending(self, venue_id: str, kind: str) -> bool:
        return (venue_id, kind) in self._tokens

    def is_current(self, venue_id: str, kind: str, token: int) -> bool:
        return self._tokens.get((venue_id, kind)) == token

    def consume(self, venue_id: str, kind: str, token: int) -> bool:
        """Claim a firing timer. False means it was cancelled or replaced."""
        if not self.is_current(venue_id, kind, token):
            return False
        del self._tokens[(venue_id, kind)]
        return True

    def _worker(self, key: Tuple[str, str], token: int, delay: float, callback: Callable[[int], None]) -> None:
        self._sleep(delay)
        venue_id, kind = key
        if not self.is_current(venue_id, kind, token):
            self.logger.info(f"[timer-abort] venue={venue_id} kind={kind} token={token} superseded")
            return
        self.logger.info(f"[timer-fire] venue={venue_id} kind={kind} token={token}")
        callback(token)
