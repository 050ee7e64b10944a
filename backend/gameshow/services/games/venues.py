from typing import Dict, Iterable, List, Optional

from gameshow.errors import CapacityError, NotFoundError
from gameshow.models import Venue


DEFAULT_VENUE_TEMPLATES = [
    {'id': 'main-hall', 'name': 'Main Hall'},
    {'id': 'auditorium', 'name': 'Auditorium'},
    {'id': 'seminar-room', 'name': 'Seminar Room'},
    {'id': 'library', 'name': 'Library'},
]


class VenueRegistry:
    """Fixed set of capacity-bounded venues, created once at startup.

    Occupancy here is bookkeeping only; the session roster remains the
    authority on who is playing.
    """

    def __init__(self, templates: Optional[Iterable[dict]] = None, default_capacity: int = 25):
        self._venues: Dict[str, Venue] = {}
        for tpl in templates or DEFAULT_VENUE_TEMPLATES:
            venue = Venue(
                id=str(tpl['id']),
                name=tpl.get('name') or str(tpl['id']),
                capacity=int(tpl.get('capacity') or default_capacity),
            )
            self._venues[venue.id] = venue
        if not self._venues:
            raise ValueError('At least one venue is required')

    def __contains__(self, venue_id) -> bool:
        return venue_id in self._venues

    def ids(self) -> List[str]:
        return list(self._venues)

    def get(self, venue_id: str) -> Venue:
        venue = self._venues.get(venue_id)
        if venue is None:
            raise NotFoundError(f'Unknown venue: {venue_id}')
        return venue

    def all(self) -> List[Venue]:
        return list(self._venues.values())

    def occupy(self, venue_id: str, player_id: str) -> Venue:
        venue = self.get(venue_id)
        if player_id in venue.occupants:
            return venue
        if venue.is_full():
            raise CapacityError(f'{venue.name} is full')
        venue.occupants.append(player_id)
        return venue

    def release(self, venue_id: str, player_id: str) -> bool:
        venue = self.get(venue_id)
        if player_id in venue.occupants:
            venue.occupants.remove(player_id)
            return True
        return False

    def summary(self):
        return {v.id: v.to_dict() for v in self._venues.values()}
