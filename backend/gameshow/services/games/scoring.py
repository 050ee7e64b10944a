from typing import List

from gameshow.models import EXPIRED_JUSTIFICATION, Answer, Player, Session


def award_submission(player: Player, increment: int) -> int:
    """Apply the flat per-answer increment and return the new score.

    Correctness and timing do not affect the award.
    """
    player.score += increment
    return player.score


def expire_unanswered(session: Session, now_ms: int) -> List[Player]:
    """Append a sentinel answer for every connected, non-eliminated
    participant who has not answered the active scenario.
    """
    scenario_id = session.current_scenario
    if scenario_id is None:
        return []
    expired = []
    for player in session.participants():
        if not player.connected or player.eliminated:
            continue
        if player.has_answered(scenario_id):
            continue
        player.answers.append(Answer(
            scenario_id=scenario_id,
            justification=EXPIRED_JUSTIFICATION,
            submitted_at=now_ms,
            expired=True,
        ))
        expired.append(player)
    return expired
