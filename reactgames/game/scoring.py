from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from reactgames.data.models import FeedbackCategory, SessionConfig, Side, TrialConfig, TrialResult

ACTION_SPACE = "SPACE"
ACTION_LEFT = "LEFT"
ACTION_RIGHT = "RIGHT"

ACTION_TO_SIDE: dict[str, Side] = {
    ACTION_LEFT: Side.LEFT,
    ACTION_RIGHT: Side.RIGHT,
}

FEEDBACK_TEXT: dict[FeedbackCategory, str] = {
    FeedbackCategory.TIMEOUT: "Missed it!",
    FeedbackCategory.GUESS: "No Guessing!",
    FeedbackCategory.CORRECT: "Good!",
    FeedbackCategory.WRONG_KEY: "Wrong Key!",
    FeedbackCategory.TOO_SLOW: "Too Slow!",
}

COLOR_GOOD = (60, 200, 120)
COLOR_BAD = (220, 60, 60)


def feedback_text(category: FeedbackCategory) -> str:
    return FEEDBACK_TEXT[category]


def feedback_color(category: FeedbackCategory) -> tuple[int, int, int]:
    return COLOR_GOOD if category == FeedbackCategory.CORRECT else COLOR_BAD


def is_guess_response(session: SessionConfig, response_time: float) -> bool:
    return session.guess_time_limit > 0 and response_time < session.guess_time_limit


def is_valid_response(session: SessionConfig, response_time: float) -> bool:
    return session.response_time_limit <= 0 or response_time < session.response_time_limit


def compute_accuracy(trial: TrialConfig, session: SessionConfig, response_time: float) -> float:
    """
    1.0 for a response right at the guess limit, falling linearly to 0.0 at
    the end of the response window.

    When the window ends exactly at the guess limit there is nothing to
    interpolate: a response at the limit scores 1.0, anything later 0.0.
    """
    window = session.response_window(trial)
    span = window - session.guess_time_limit
    if span == 0:
        return 1.0 if response_time <= session.guess_time_limit else 0.0
    return 1.0 - (response_time - session.guess_time_limit) / span


def score(
    trial: TrialConfig,
    session: SessionConfig,
    response_time: float,
    responding_side: Side | None = None,
    response_action: str | None = None,
) -> tuple[TrialResult, FeedbackCategory]:
    """
    Classifies one response. response_time is in seconds, 0 meaning no response.
    Trials without a side never check the responding side.

    Order matters: timeout, then guess, then valid (correct / wrong key), then too slow.
    """
    sided = trial.side is not None
    side_matches = (not sided) or responding_side == trial.side

    key_correct = False
    accuracy = 0.0
    success = False

    if response_time == 0:
        category = FeedbackCategory.TIMEOUT
    elif is_guess_response(session, response_time):
        category = FeedbackCategory.GUESS
        key_correct = sided and side_matches
    elif is_valid_response(session, response_time):
        if side_matches:
            category = FeedbackCategory.CORRECT
            success = True
            key_correct = True
            accuracy = compute_accuracy(trial, session, response_time)
        else:
            category = FeedbackCategory.WRONG_KEY
    else:
        category = FeedbackCategory.TOO_SLOW
        key_correct = sided and side_matches

    result = TrialResult(
        trial_index=trial.index,
        response_time=response_time,
        success=success,
        key_correct=key_correct,
        accuracy=accuracy,
        category=category,
        response_action=response_action,
    )
    return result, category


class Scorer(Protocol):
    accepted_actions: frozenset

    def score(
        self,
        trial: TrialConfig,
        session: SessionConfig,
        response_time: float,
        action: str | None,
    ) -> tuple[TrialResult, FeedbackCategory]:
        ...


@dataclass(frozen=True)
class ReactScorer:
    """Single-key game: any accepted press inside the window counts."""
    accepted_actions: frozenset = frozenset({ACTION_SPACE})

    def score(self, trial, session, response_time, action):
        return score(trial, session, response_time, response_action=action)


@dataclass(frozen=True)
class SidedScorer:
    """The pressed key has to name the side the stimulus is on."""
    accepted_actions: frozenset = frozenset({ACTION_LEFT, ACTION_RIGHT})

    def score(self, trial, session, response_time, action):
        side = ACTION_TO_SIDE.get(action) if action is not None else None
        return score(
            trial,
            session,
            response_time,
            responding_side=side,
            response_action=action,
        )
