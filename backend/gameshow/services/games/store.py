import threading
from typing import Callable, Dict, List, TypeVar

from gameshow.errors import NotFoundError
from gameshow.models import Phase, Player, Session, SessionSettings

T = TypeVar('T')


class SessionStore:
    """One authoritative Session per venue.

    Every write goes through ``apply_mutation``, which runs the callable
    under a single process-wide re-entrant lock so inbound actions and
    timer callbacks never interleave.
    """

    def __init__(self, venue_ids, admin_password_hash: str, capacities: Dict[str, int]):
        self._lock = threading.RLock()
        self._admin_password_hash = admin_password_hash
        self._sessions: Dict[str, Session] = {}
        for venue_id in venue_ids:
            self._sessions[venue_id] = self._new_session(venue_id, capacities[venue_id])

    def _new_session(self, venue_id: str, capacity: int) -> Session:
        return Session(
            id=f'game-{venue_id}',
            venue_id=venue_id,
            settings=SessionSettings(admin_password_hash=self._admin_password_hash, max_players=capacity),
        )

    def get(self, venue_id: str) -> Session:
        session = self._sessions.get(venue_id)
        if session is None:
            raise NotFoundError(f'Unknown venue: {venue_id}')
        return session

    def apply_mutation(self, venue_id: str, fn: Callable[[Session], T]) -> T:
        with self._lock:
            return fn(self.get(venue_id))

    def reset_to(self, venue_id: str, preserve_admin: bool = True) -> List[Player]:
        """Return the session to its pre-game state; returns removed players."""
        with self._lock:
            session = self.get(venue_id)
            admin = session.admin if preserve_admin else None
            removed = [p for pid, p in session.players.items() if admin is None or pid != admin.id]

            session.current_scenario = None
            session.pending_scenario = None
            session.dice_result = None
            session.is_rolling = False
            session.question_start_time = None
            session.stage_deadline = None
            session.used_scenarios = []
            session.players = {admin.id: admin} if admin else {}
            session.admin_id = admin.id if admin else None
            session.phase = Phase.WAITING if admin else Phase.LOBBY
            return removed
