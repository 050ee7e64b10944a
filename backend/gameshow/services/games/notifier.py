from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Binding:
    venue_id: str
    player_id: str


def venue_room(venue_id: str) -> str:
    return f"venue:{venue_id}"


class Notifier:
    """Connection <-> player bindings plus outbound delivery.

    Transports subclass this and implement ``emit_to`` and ``broadcast``
    (and optionally ``enter``/``leave`` for room-based fan-out). The
    engine calls every method while holding the session lock.
    """

    def __init__(self):
        self._by_connection: Dict[str, Binding] = {}
        self._by_player: Dict[Tuple[str, str], str] = {}

    def lookup(self, connection_id: str) -> Optional[Binding]:
        return self._by_connection.get(connection_id)

    def connection_for(self, venue_id: str, player_id: str) -> Optional[str]:
        return self._by_player.get((venue_id, player_id))

    def attach(self, connection_id: str, venue_id: str, player_id: str) -> Optional[str]:
        """Bind a connection to a player; returns a displaced connection id."""
        key = (venue_id, player_id)
        previous = self._by_player.get(key)
        if previous is not None and previous != connection_id:
            self._by_connection.pop(previous, None)
            self.leave(previous, venue_id)
        self._by_connection[connection_id] = Binding(venue_id, player_id)
        self._by_player[key] = connection_id
        self.enter(connection_id, venue_id)
        return previous if previous != connection_id else None

    def detach(self, venue_id: str, player_id: str) -> Optional[str]:
        connection_id = self._by_player.pop((venue_id, player_id), None)
        if connection_id is not None:
            self._by_connection.pop(connection_id, None)
            self.leave(connection_id, venue_id)
        return connection_id

    def send(self, venue_id: str, player_id: str, event: str, payload: Any = None) -> bool:
        connection_id = self.connection_for(venue_id, player_id)
        if connection_id is None:
            return False
        self.emit_to(connection_id, event, payload)
        return True

    # ---- transport hooks ----

    def emit_to(self, connection_id: str, event: str, payload: Any = None) -> None:
        raise NotImplementedError

    def broadcast(self, venue_id: str, event: str, payload: Any) -> None:
        raise NotImplementedError

    def enter(self, connection_id: str, venue_id: str) -> None:
        pass

    def leave(self, connection_id: str, venue_id: str) -> None:
        pass
