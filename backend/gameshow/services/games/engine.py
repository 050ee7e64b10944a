import logging
import random
import secrets
import time
from functools import partial
from typing import Optional

from werkzeug.security import check_password_hash

from gameshow.actions import (
    EliminatePlayer,
    EndQuestion,
    GetAvailableScenarios,
    JoinGame,
    ResetGame,
    RollDice,
    SubmitAnswer,
)
from gameshow.catalog import all_scenario_ids, get_scenario
from gameshow.errors import (
    AuthorizationError,
    DuplicateSubmissionError,
    NotFoundError,
    PhaseError,
    ValidationError,
)
from gameshow.models import Answer, Phase, Player, Role, Session
from .scoring import award_submission, expire_unanswered
from .timers import QUESTION, RESULTS, ROLL, eviction_kind

JUSTIFICATION_MAX = 60


class GameEngine:
    """Validates inbound actions and drives each venue's session.

    Every handler runs inside ``store.apply_mutation``: guards first, then
    mutation, then timer changes and outbound events. A guard failure
    raises a ``GameError`` before anything is touched.
    """

    def __init__(self, store, venues, timers, notifier, config=None, logger=None, clock=time.time, rng=None):
        self.store = store
        self.venues = venues
        self.timers = timers
        self.notifier = notifier
        self.config = config if config is not None else {}
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._rng = rng or random.Random()
        self._handlers = {
            JoinGame: self.join,
            RollDice: self.roll_dice,
            SubmitAnswer: self.submit_answer,
            EliminatePlayer: self.eliminate_player,
            EndQuestion: self.end_question,
            ResetGame: self.reset_game,
            GetAvailableScenarios: self.get_available_scenarios,
        }

    # ---- settings ----

    def _seconds(self, key: str, default: float) -> float:
        return float(self.config.get(key, default))

    def durations(self):
        return {
            'rolling': self._seconds('ROLL_DURATION_SEC', 3),
            'question': self._seconds('QUESTION_DURATION_SEC', 60),
            'results': self._seconds('RESULTS_DURATION_SEC', 5),
            'disconnectGrace': self._seconds('DISCONNECT_GRACE_SEC', 30),
        }

    @property
    def default_venue_id(self) -> str:
        return self.config.get('DEFAULT_VENUE_ID') or self.venues.ids()[0]

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _deadline(self, delay: float) -> int:
        return self._now_ms() + int(delay * 1000)

    # ---- snapshots ----

    def snapshot_of(self, session: Session):
        data = session.to_dict()
        data['durations'] = self.durations()
        data['venues'] = self.venues.summary()
        return data

    def snapshot(self, venue_id: Optional[str] = None):
        return self.store.apply_mutation(venue_id or self.default_venue_id, self.snapshot_of)

    def available_scenarios(self, session: Session):
        return [sid for sid in all_scenario_ids() if sid not in session.used_scenarios]

    def _broadcast(self, session: Session) -> None:
        self.notifier.broadcast(session.venue_id, 'gameState', self.snapshot_of(session))

    # ---- actor resolution ----

    def _venue_for(self, connection_id: str) -> str:
        binding = self.notifier.lookup(connection_id)
        if binding is None:
            raise NotFoundError('Join the game first')
        return binding.venue_id

    def _actor(self, session: Session, connection_id: str) -> Player:
        binding = self.notifier.lookup(connection_id)
        if binding is None or binding.venue_id != session.venue_id:
            raise NotFoundError('Join the game first')
        player = session.players.get(binding.player_id)
        if player is None:
            raise NotFoundError('Player not found')
        return player

    def _require_admin(self, session: Session, connection_id: str, what: str) -> Player:
        actor = self._actor(session, connection_id)
        if not actor.is_admin or session.admin_id != actor.id:
            raise AuthorizationError(f'Only admin can {what}')
        return actor

    def dispatch(self, connection_id: str, action):
        handler = self._handlers.get(type(action))
        if handler is None:
            raise ValidationError(f'Unsupported action: {type(action).__name__}')
        return handler(connection_id, action)

    # ---- connection lifecycle ----

    def join(self, connection_id: str, action: JoinGame) -> Player:
        venue_id = action.venue_id or self.default_venue_id
        if venue_id not in self.venues:
            raise NotFoundError(f'Unknown venue: {venue_id}')

        def mutate(session: Session) -> Player:
            if self.notifier.lookup(connection_id) is not None:
                raise ValidationError('This connection has already joined')
            if action.resume_token:
                player = self._resume(session, connection_id, action.resume_token)
            elif action.is_admin:
                player = self._admit_admin(session, connection_id, action)
            else:
                player = self._admit_participant(session, connection_id, action)

            self.notifier.send(venue_id, player.id, 'playerJoined', {
                'playerId': player.id,
                'isAdmin': player.is_admin,
                'role': player.role.value,
                'venueId': venue_id,
                'resumeToken': player.resume_token,
            })
            self._broadcast(session)
            return player

        return self.store.apply_mutation(venue_id, mutate)

    def _admit_admin(self, session: Session, connection_id: str, action: JoinGame) -> Player:
        credential = action.admin_credential or ''
        if not credential or not check_password_hash(session.settings.admin_password_hash, credential):
            raise AuthorizationError('Invalid admin password')
        current = session.admin
        if current is not None and current.connected:
            raise AuthorizationError('Admin already exists')
        if current is not None:
            self.logger.info(f"[admin-replace] venue={session.venue_id} previous={current.id}")
            self._drop_player(session, current.id)

        player = Player(
            id=connection_id,
            name=action.name,
            role=Role.ADMIN,
            team_name=action.team_name,
            venue_id=session.venue_id,
        )
        session.players[player.id] = player
        session.admin_id = player.id
        if session.phase == Phase.LOBBY:
            session.phase = Phase.WAITING
        self.notifier.attach(connection_id, session.venue_id, player.id)
        self.logger.info(f"[join] venue={session.venue_id} admin={player.id} name={player.name!r}")
        return player

    def _admit_participant(self, session: Session, connection_id: str, action: JoinGame) -> Player:
        # Raises CapacityError before the roster is touched
        self.venues.occupy(session.venue_id, connection_id)
        player = Player(
            id=connection_id,
            name=action.name,
            role=Role.PARTICIPANT,
            team_name=action.team_name,
            venue_id=session.venue_id,
        )
        session.players[player.id] = player
        self.notifier.attach(connection_id, session.venue_id, player.id)
        self.logger.info(
            f"[join] venue={session.venue_id} player={player.id} name={player.name!r} team={player.team_name!r}"
        )
        return player

    def _resume(self, session: Session, connection_id: str, token: str) -> Player:
        player = None
        for candidate in session.players.values():
            if secrets.compare_digest(candidate.resume_token.encode(), token.encode()):
                player = candidate
                break
        if player is None:
            raise NotFoundError('Unknown or expired resume token')

        self.timers.cancel(session.venue_id, eviction_kind(player.id))
        displaced = self.notifier.attach(connection_id, session.venue_id, player.id)
        player.connected = True
        self.logger.info(
            f"[resume] venue={session.venue_id} player={player.id} connection={connection_id} displaced={displaced}"
        )
        return player

    def disconnect(self, connection_id: str) -> None:
        binding = self.notifier.lookup(connection_id)
        if binding is None:
            return

        def mutate(session: Session) -> None:
            # The player may have re-bound to a newer connection meanwhile
            if self.notifier.lookup(connection_id) != binding:
                return
            self.notifier.detach(binding.venue_id, binding.player_id)
            player = session.players.get(binding.player_id)
            if player is None:
                return
            player.connected = False
            grace = self._seconds('DISCONNECT_GRACE_SEC', 30)
            self.timers.schedule(
                session.venue_id,
                eviction_kind(player.id),
                grace,
                partial(self._on_eviction_due, session.venue_id, player.id),
            )
            self.logger.info(f"[disconnect] venue={session.venue_id} player={player.id} grace={grace}s")
            self._broadcast(session)

        self.store.apply_mutation(binding.venue_id, mutate)

    def _drop_player(self, session: Session, player_id: str) -> Optional[Player]:
        player = session.players.pop(player_id, None)
        if player is None:
            return None
        if not player.is_admin:
            self.venues.release(session.venue_id, player_id)
        if session.admin_id == player_id:
            session.admin_id = None
        self.timers.cancel(session.venue_id, eviction_kind(player_id))
        self.notifier.detach(session.venue_id, player_id)
        return player

    def _on_eviction_due(self, venue_id: str, player_id: str, token: int) -> None:
        def mutate(session: Session) -> None:
            if not self.timers.consume(venue_id, eviction_kind(player_id), token):
                return
            player = session.players.get(player_id)
            if player is None or player.connected:
                return
            self._drop_player(session, player_id)
            self.logger.info(f"[evict] venue={venue_id} player={player_id}")
            self._broadcast(session)

        self.store.apply_mutation(venue_id, mutate)

    # ---- admin actions ----

    def roll_dice(self, connection_id: str, action: RollDice) -> None:
        def mutate(session: Session) -> None:
            self._require_admin(session, connection_id, 'roll dice')
            if session.phase != Phase.WAITING:
                raise PhaseError('Cannot roll dice now')
            target = action.target_scenario_id
            if get_scenario(target) is None:
                raise ValidationError('Invalid dice number')
            if target in session.used_scenarios:
                raise ValidationError('Scenario already used')

            delay = self._seconds('ROLL_DURATION_SEC', 3)
            session.phase = Phase.ROLLING
            session.is_rolling = True
            session.pending_scenario = target
            session.stage_deadline = self._deadline(delay)
            self.timers.schedule(session.venue_id, ROLL, delay, partial(self._on_roll_elapsed, session.venue_id))
            self.logger.info(f"[roll] venue={session.venue_id} target={target}")
            self._broadcast(session)

        self.store.apply_mutation(self._venue_for(connection_id), mutate)

    def _on_roll_elapsed(self, venue_id: str, token: int) -> None:
        def mutate(session: Session) -> None:
            if not self.timers.consume(venue_id, ROLL, token):
                return
            if session.phase != Phase.ROLLING or session.pending_scenario is None:
                self.logger.info(f"[timer-stale] venue={venue_id} kind={ROLL} phase={session.phase.value}")
                return
            scenario_id = session.pending_scenario
            delay = self._seconds('QUESTION_DURATION_SEC', 60)
            faces = int(self.config.get('DICE_FACES', 6))

            session.dice_result = self._rng.randint(1, faces)
            session.current_scenario = scenario_id
            session.used_scenarios.append(scenario_id)
            session.pending_scenario = None
            session.is_rolling = False
            session.phase = Phase.QUESTION
            session.question_start_time = self._now_ms()
            session.stage_deadline = self._deadline(delay)
            self.timers.schedule(venue_id, QUESTION, delay, partial(self._on_question_elapsed, venue_id))
            self.logger.info(f"[question] venue={venue_id} scenario={scenario_id} face={session.dice_result}")
            self._broadcast(session)

        self.store.apply_mutation(venue_id, mutate)

    def end_question(self, connection_id: str, action: Optional[EndQuestion] = None) -> None:
        def mutate(session: Session) -> None:
            self._require_admin(session, connection_id, 'end questions')
            if session.phase != Phase.QUESTION:
                raise PhaseError('No active question to end')
            self._finish_question(session)

        self.store.apply_mutation(self._venue_for(connection_id), mutate)

    def _on_question_elapsed(self, venue_id: str, token: int) -> None:
        def mutate(session: Session) -> None:
            if not self.timers.consume(venue_id, QUESTION, token):
                return
            if session.phase != Phase.QUESTION:
                self.logger.info(f"[timer-stale] venue={venue_id} kind={QUESTION} phase={session.phase.value}")
                return
            self._finish_question(session)

        self.store.apply_mutation(venue_id, mutate)

    def _finish_question(self, session: Session) -> None:
        self.timers.cancel(session.venue_id, QUESTION)
        expired = expire_unanswered(session, self._now_ms())
        delay = self._seconds('RESULTS_DURATION_SEC', 5)
        session.phase = Phase.RESULTS
        session.stage_deadline = self._deadline(delay)
        self.timers.schedule(session.venue_id, RESULTS, delay, partial(self._on_results_elapsed, session.venue_id))
        self.logger.info(
            f"[results] venue={session.venue_id} scenario={session.current_scenario} expired={len(expired)}"
        )
        self._broadcast(session)

    def _on_results_elapsed(self, venue_id: str, token: int) -> None:
        def mutate(session: Session) -> None:
            if not self.timers.consume(venue_id, RESULTS, token):
                return
            if session.phase != Phase.RESULTS:
                self.logger.info(f"[timer-stale] venue={venue_id} kind={RESULTS} phase={session.phase.value}")
                return
            session.phase = Phase.WAITING if self.available_scenarios(session) else Phase.FINISHED
            session.stage_deadline = None
            self.logger.info(f"[phase] venue={venue_id} phase={session.phase.value}")
            self._broadcast(session)

        self.store.apply_mutation(venue_id, mutate)

    def eliminate_player(self, connection_id: str, action: EliminatePlayer) -> None:
        def mutate(session: Session) -> None:
            self._require_admin(session, connection_id, 'eliminate players')
            target = session.players.get(action.player_id)
            if target is None:
                raise NotFoundError('Player not found')
            if target.is_admin:
                raise ValidationError('The admin cannot be eliminated')
            if target.eliminated:
                return
            target.eliminated = True
            self.notifier.send(session.venue_id, target.id, 'eliminated')
            self.logger.info(f"[eliminate] venue={session.venue_id} player={target.id}")
            self._broadcast(session)

        self.store.apply_mutation(self._venue_for(connection_id), mutate)

    def reset_game(self, connection_id: str, action: Optional[ResetGame] = None) -> None:
        def mutate(session: Session) -> None:
            self._require_admin(session, connection_id, 'reset game')
            venue_id = session.venue_id
            cancelled = self.timers.cancel_all(venue_id)
            removed = self.store.reset_to(venue_id, preserve_admin=True)
            snapshot = self.snapshot_of(session)
            for player in removed:
                if not player.is_admin:
                    self.venues.release(venue_id, player.id)
                # Dropped connections see the cleared roster once, then stop receiving
                dropped = self.notifier.detach(venue_id, player.id)
                if dropped is not None:
                    self.notifier.emit_to(dropped, 'gameState', snapshot)
            self.logger.info(f"[reset] venue={venue_id} removed={len(removed)} timers_cancelled={cancelled}")
            self.notifier.broadcast(venue_id, 'gameState', snapshot)

        self.store.apply_mutation(self._venue_for(connection_id), mutate)

    def get_available_scenarios(self, connection_id: str, action: Optional[GetAvailableScenarios] = None):
        def mutate(session: Session):
            actor = self._require_admin(session, connection_id, 'list scenarios')
            available = self.available_scenarios(session)
            self.notifier.send(session.venue_id, actor.id, 'availableScenarios', available)
            return available

        return self.store.apply_mutation(self._venue_for(connection_id), mutate)

    # ---- participant actions ----

    def submit_answer(self, connection_id: str, action: SubmitAnswer) -> Answer:
        def mutate(session: Session) -> Answer:
            player = self._actor(session, connection_id)
            if player.is_admin:
                raise AuthorizationError('Admins cannot submit answers')
            if session.phase != Phase.QUESTION or session.current_scenario is None:
                raise PhaseError('No active question')
            if player.eliminated:
                raise AuthorizationError('Eliminated players cannot submit answers')
            if action.scenario_id != session.current_scenario:
                raise ValidationError('Invalid scenario ID')
            if player.has_answered(action.scenario_id):
                raise DuplicateSubmissionError('Answer already submitted')
            if not 1 <= len(action.justification) <= JUSTIFICATION_MAX:
                raise ValidationError(f'Justification must be 1-{JUSTIFICATION_MAX} characters')
            scenario = get_scenario(session.current_scenario)
            selected = None
            if scenario.is_multiple_choice:
                if not action.selected_option:
                    raise ValidationError('An option must be selected for this scenario')
                selected = scenario.resolve_option(action.selected_option)
                if selected is None:
                    raise ValidationError('Selected option is not one of the choices')

            answer = Answer(
                scenario_id=action.scenario_id,
                selected_option=selected,
                justification=action.justification,
                submitted_at=self._now_ms(),
            )
            player.answers.append(answer)
            award_submission(player, int(self.config.get('SCORE_INCREMENT', 10)))

            self.notifier.send(session.venue_id, player.id, 'answerSubmitted')
            if session.admin_id is not None:
                self.notifier.send(session.venue_id, session.admin_id, 'playerAnswered', {
                    'playerId': player.id,
                    'playerName': player.name,
                    'teamName': player.team_name,
                    'answer': answer.to_dict(),
                })
            self.logger.info(
                f"[answer] venue={session.venue_id} player={player.id} scenario={answer.scenario_id} score={player.score}"
            )
            self._broadcast(session)
            return answer

        return self.store.apply_mutation(self._venue_for(connection_id), mutate)
