"""Errors raised by the game engine and reported back to the caller.

Every error is delivered privately to the connection that caused it and
never alters session state: handlers raise before they mutate.
"""


class GameError(Exception):
    code = 'game_error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class AuthorizationError(GameError):
    """Caller has the wrong role for the action."""
    code = 'unauthorized'


class PhaseError(GameError):
    """Action is not allowed in the session's current phase."""
    code = 'invalid_phase'


class ValidationError(GameError):
    """Malformed or out-of-range payload."""
    code = 'invalid_payload'


class CapacityError(GameError):
    code = 'capacity'


class DuplicateSubmissionError(GameError):
    code = 'duplicate_submission'


class NotFoundError(GameError):
    code = 'not_found'
