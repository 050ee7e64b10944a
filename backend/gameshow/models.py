from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
import secrets


class Phase(str, Enum):
    LOBBY = 'lobby'
    WAITING = 'waiting'
    ROLLING = 'rolling'
    QUESTION = 'question'
    RESULTS = 'results'
    FINISHED = 'finished'


class Role(str, Enum):
    ADMIN = 'admin'
    PARTICIPANT = 'participant'


EXPIRED_JUSTIFICATION = '[Time expired - no answer]'


def generate_resume_token(length=16):
    """Secret handed to a joining connection so it can re-bind later."""
    return secrets.token_urlsafe(length)


@dataclass
class Answer:
    scenario_id: int
    justification: str
    submitted_at: int
    selected_option: Optional[str] = None
    expired: bool = False

    def to_dict(self):
        data = {
            'scenarioId': self.scenario_id,
            'justification': self.justification,
            'submittedAt': self.submitted_at,
            'expired': self.expired,
        }
        if self.selected_option is not None:
            data['selectedOption'] = self.selected_option
        return data


@dataclass
class Player:
    id: str
    name: str
    role: Role = Role.PARTICIPANT
    team_name: Optional[str] = None
    venue_id: Optional[str] = None
    connected: bool = True
    answers: List[Answer] = field(default_factory=list)
    score: int = 0
    eliminated: bool = False
    resume_token: str = field(default_factory=generate_resume_token)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def answer_for(self, scenario_id: int) -> Optional[Answer]:
        for answer in self.answers:
            if answer.scenario_id == scenario_id:
                return answer
        return None

    def has_answered(self, scenario_id: Optional[int]) -> bool:
        return scenario_id is not None and self.answer_for(scenario_id) is not None

    def to_dict(self, current_scenario: Optional[int] = None):
        # resume_token is private to the owning connection; never serialized here
        return {
            'id': self.id,
            'name': self.name,
            'teamName': self.team_name,
            'venueId': self.venue_id,
            'role': self.role.value,
            'isAdmin': self.is_admin,
            'connected': self.connected,
            'answers': [a.to_dict() for a in self.answers],
            'score': self.score,
            'eliminated': self.eliminated,
            'hasAnsweredCurrent': self.has_answered(current_scenario),
        }


@dataclass
class Venue:
    id: str
    name: str
    capacity: int
    occupants: List[str] = field(default_factory=list)

    @property
    def current_players(self) -> int:
        return len(self.occupants)

    def is_full(self) -> bool:
        return len(self.occupants) >= self.capacity

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'maxPlayers': self.capacity,
            'currentPlayers': self.current_players,
            'occupants': list(self.occupants),
        }


@dataclass
class SessionSettings:
    admin_password_hash: str
    max_players: int

    def to_dict(self):
        # The credential hash stays server-side
        return {'maxPlayers': self.max_players}


@dataclass
class Session:
    id: str
    venue_id: str
    settings: SessionSettings
    phase: Phase = Phase.LOBBY
    current_scenario: Optional[int] = None
    dice_result: Optional[int] = None
    is_rolling: bool = False
    question_start_time: Optional[int] = None
    stage_deadline: Optional[int] = None
    pending_scenario: Optional[int] = None
    used_scenarios: List[int] = field(default_factory=list)
    players: Dict[str, Player] = field(default_factory=dict)
    admin_id: Optional[str] = None

    @property
    def admin(self) -> Optional[Player]:
        if self.admin_id is None:
            return None
        return self.players.get(self.admin_id)

    def participants(self):
        return [p for p in self.players.values() if not p.is_admin]

    def to_dict(self):
        return {
            'id': self.id,
            'venueId': self.venue_id,
            'phase': self.phase.value,
            'currentScenario': self.current_scenario,
            'diceResult': self.dice_result,
            'isRolling': self.is_rolling,
            'questionStartTime': self.question_start_time,
            'stageDeadline': self.stage_deadline,
            'usedScenarios': list(self.used_scenarios),
            'players': {pid: p.to_dict(self.current_scenario) for pid, p in self.players.items()},
            'adminId': self.admin_id,
            'settings': self.settings.to_dict(),
        }
