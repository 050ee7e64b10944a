"""Inbound event payloads.

Each Socket.IO event maps to exactly one action model; ``parse_action``
turns the raw transport payload into a typed, validated action before
anything reaches the engine. Range and game-rule checks (scenario ids,
justification length, options) belong to the engine, which knows the
session they apply to.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from gameshow.errors import ValidationError


class _Action(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True, str_strip_whitespace=True)


class JoinGame(_Action):
    type: Literal['joinGame'] = 'joinGame'
    name: str = Field(min_length=1, max_length=40)
    is_admin: bool = Field(False, validation_alias=AliasChoices('isAdmin', 'is_admin'))
    admin_credential: Optional[str] = Field(
        None, validation_alias=AliasChoices('adminCredential', 'adminPassword', 'admin_credential')
    )
    team_name: Optional[str] = Field(None, max_length=40, validation_alias=AliasChoices('teamName', 'team_name'))
    venue_id: Optional[str] = Field(None, validation_alias=AliasChoices('venueId', 'venue_id'))
    resume_token: Optional[str] = Field(
        None, max_length=64, pattern=r'^[A-Za-z0-9_-]+$', validation_alias=AliasChoices('resumeToken', 'resume_token')
    )


class RollDice(_Action):
    type: Literal['rollDice'] = 'rollDice'
    target_scenario_id: StrictInt = Field(
        validation_alias=AliasChoices('targetScenarioId', 'targetNumber', 'target_scenario_id')
    )


class SubmitAnswer(_Action):
    type: Literal['submitAnswer'] = 'submitAnswer'
    scenario_id: StrictInt = Field(validation_alias=AliasChoices('scenarioId', 'scenario_id'))
    selected_option: Optional[str] = Field(None, validation_alias=AliasChoices('selectedOption', 'selected_option'))
    justification: str = ''


class EliminatePlayer(_Action):
    type: Literal['eliminatePlayer'] = 'eliminatePlayer'
    player_id: str = Field(min_length=1, validation_alias=AliasChoices('playerId', 'player_id'))


class EndQuestion(_Action):
    type: Literal['endQuestion'] = 'endQuestion'


class ResetGame(_Action):
    type: Literal['resetGame'] = 'resetGame'


class GetAvailableScenarios(_Action):
    type: Literal['getAvailableScenarios'] = 'getAvailableScenarios'


Action = Annotated[
    Union[JoinGame, RollDice, SubmitAnswer, EliminatePlayer, EndQuestion, ResetGame, GetAvailableScenarios],
    Field(discriminator='type'),
]

EVENTS = (
    'joinGame',
    'rollDice',
    'submitAnswer',
    'eliminatePlayer',
    'endQuestion',
    'resetGame',
    'getAvailableScenarios',
)

# Events whose clients may send a bare scalar instead of an object
_BARE_FIELDS = {
    'rollDice': 'targetScenarioId',
    'eliminatePlayer': 'playerId',
}

_adapter = TypeAdapter(Action)


def _describe(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    # First loc entry is the union tag
    loc = '.'.join(str(part) for part in err.get('loc', ())[1:])
    return f"{loc}: {err['msg']}" if loc else err['msg']


def parse_action(event: str, payload: Any = None):
    if event not in EVENTS:
        raise ValidationError(f'Unknown event: {event}')
    if payload is None:
        data = {}
    elif isinstance(payload, dict):
        data = dict(payload)
    elif event in _BARE_FIELDS:
        data = {_BARE_FIELDS[event]: payload}
    else:
        raise ValidationError(f'{event} expects an object payload')
    data['type'] = event
    try:
        return _adapter.validate_python(data)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc
