import pytest

from reactgames.data.models import FeedbackCategory, SessionConfig, Side, TrialConfig
from reactgames.game.scoring import (
    ACTION_LEFT,
    ACTION_RIGHT,
    ACTION_SPACE,
    COLOR_BAD,
    COLOR_GOOD,
    ReactScorer,
    SidedScorer,
    compute_accuracy,
    feedback_color,
    feedback_text,
    score,
)

RIGHT_TRIAL = TrialConfig(index=3, delay=1.0, display_duration=10.0, side=Side.RIGHT)
PLAIN_TRIAL = TrialConfig(index=0, delay=1.0, display_duration=2.0)


# ----------------------------------------------------------------------------
# decision order
# ----------------------------------------------------------------------------


@pytest.mark.parametrize(
    "session",
    [
        SessionConfig(),
        SessionConfig(guess_time_limit=5.0),
        SessionConfig(guess_time_limit=1.0, response_time_limit=8.0),
        SessionConfig(response_time_limit=-1.0),
    ],
)
def test_zero_response_time_is_timeout(session):
    result, category = score(RIGHT_TRIAL, session, 0.0, responding_side=Side.RIGHT)
    assert category == FeedbackCategory.TIMEOUT
    assert result.category == FeedbackCategory.TIMEOUT
    assert result.success is False
    assert result.key_correct is False
    assert result.trial_index == 3


def test_guess_before_guess_limit():
    session = SessionConfig(guess_time_limit=5.0)
    result, category = score(PLAIN_TRIAL, session, 3.0)
    assert category == FeedbackCategory.GUESS
    assert result.success is False


def test_guess_on_correct_side_keeps_key_correct():
    session = SessionConfig(guess_time_limit=5.0)
    result, category = score(RIGHT_TRIAL, session, 3.0, responding_side=Side.RIGHT)
    assert category == FeedbackCategory.GUESS
    assert result.success is False
    assert result.key_correct is True

    result, _ = score(RIGHT_TRIAL, session, 3.0, responding_side=Side.LEFT)
    assert result.key_correct is False


def test_disabled_guess_limit_falls_through_to_validity():
    session = SessionConfig(guess_time_limit=0.0)
    result, category = score(PLAIN_TRIAL, session, 0.001)
    assert category == FeedbackCategory.CORRECT
    assert result.success is True


def test_slower_than_response_limit_is_too_slow():
    session = SessionConfig(response_time_limit=10.0)
    trial = TrialConfig(index=0, delay=0.0, display_duration=20.0)
    result, category = score(trial, session, 12.0)
    assert category == FeedbackCategory.TOO_SLOW
    assert result.success is False


def test_wrong_side_is_wrong_key():
    session = SessionConfig(guess_time_limit=1.0, response_time_limit=8.0)
    result, category = score(RIGHT_TRIAL, session, 4.0, responding_side=Side.LEFT)
    assert category == FeedbackCategory.WRONG_KEY
    assert result.success is False
    assert result.key_correct is False


def test_correct_side_scores_accuracy():
    session = SessionConfig(guess_time_limit=1.0, response_time_limit=8.0)
    result, category = score(RIGHT_TRIAL, session, 4.0, responding_side=Side.RIGHT)
    assert category == FeedbackCategory.CORRECT
    assert result.success is True
    assert result.key_correct is True
    assert result.accuracy == pytest.approx(1 - (4 - 1) / (8 - 1))
    assert result.accuracy == pytest.approx(0.571, abs=1e-3)


def test_sided_trial_without_responding_side_is_wrong_key():
    session = SessionConfig()
    _, category = score(RIGHT_TRIAL, session, 2.0)
    assert category == FeedbackCategory.WRONG_KEY


# ----------------------------------------------------------------------------
# boundaries: ties go to the slow / invalid branch
# ----------------------------------------------------------------------------


def test_response_exactly_at_guess_limit_is_not_a_guess():
    session = SessionConfig(guess_time_limit=1.0, response_time_limit=8.0)
    result, category = score(PLAIN_TRIAL, session, 1.0)
    assert category == FeedbackCategory.CORRECT
    assert result.accuracy == pytest.approx(1.0)


def test_response_exactly_at_response_limit_is_too_slow():
    session = SessionConfig(guess_time_limit=1.0, response_time_limit=8.0)
    _, category = score(PLAIN_TRIAL, session, 8.0)
    assert category == FeedbackCategory.TOO_SLOW


# ----------------------------------------------------------------------------
# accuracy
# ----------------------------------------------------------------------------


def test_accuracy_uses_display_duration_without_response_limit():
    session = SessionConfig(guess_time_limit=0.5, response_time_limit=0.0)
    trial = TrialConfig(index=0, delay=0.0, display_duration=2.5)
    assert compute_accuracy(trial, session, 1.5) == pytest.approx(1 - 1.0 / 2.0)


def test_accuracy_without_guess_limit():
    session = SessionConfig(response_time_limit=4.0)
    assert compute_accuracy(PLAIN_TRIAL, session, 1.0) == pytest.approx(0.75)


def test_accuracy_window_equal_to_guess_limit_does_not_divide_by_zero():
    session = SessionConfig(guess_time_limit=2.0, response_time_limit=0.0)
    trial = TrialConfig(index=0, delay=0.0, display_duration=2.0)
    assert compute_accuracy(trial, session, 2.0) == 1.0
    result, category = score(trial, session, 2.0)
    assert category == FeedbackCategory.CORRECT
    assert result.accuracy == 1.0


def test_accuracy_past_a_collapsed_window_is_zero():
    session = SessionConfig(guess_time_limit=2.0, response_time_limit=0.0)
    trial = TrialConfig(index=0, delay=0.0, display_duration=2.0)
    assert compute_accuracy(trial, session, 2.5) == 0.0
    assert compute_accuracy(trial, session, 1.5) == 1.0


def test_scoring_is_pure():
    session = SessionConfig(guess_time_limit=1.0, response_time_limit=8.0)
    first = score(RIGHT_TRIAL, session, 4.0, responding_side=Side.RIGHT, response_action=ACTION_RIGHT)
    second = score(RIGHT_TRIAL, session, 4.0, responding_side=Side.RIGHT, response_action=ACTION_RIGHT)
    assert first == second


# ----------------------------------------------------------------------------
# strategies
# ----------------------------------------------------------------------------


def test_react_scorer_ignores_sides():
    scorer = ReactScorer()
    assert scorer.accepted_actions == frozenset({ACTION_SPACE})
    result, category = scorer.score(PLAIN_TRIAL, SessionConfig(), 0.4, ACTION_SPACE)
    assert category == FeedbackCategory.CORRECT
    assert result.response_action == ACTION_SPACE


def test_sided_scorer_maps_actions_to_sides():
    scorer = SidedScorer()
    session = SessionConfig(guess_time_limit=1.0, response_time_limit=8.0)
    _, category = scorer.score(RIGHT_TRIAL, session, 4.0, ACTION_RIGHT)
    assert category == FeedbackCategory.CORRECT
    result, category = scorer.score(RIGHT_TRIAL, session, 4.0, ACTION_LEFT)
    assert category == FeedbackCategory.WRONG_KEY
    assert result.response_action == ACTION_LEFT


def test_sided_scorer_timeout_has_no_action():
    result, category = SidedScorer().score(RIGHT_TRIAL, SessionConfig(), 0.0, None)
    assert category == FeedbackCategory.TIMEOUT
    assert result.response_action is None


def test_feedback_text_and_color():
    assert feedback_text(FeedbackCategory.CORRECT) == "Good!"
    assert feedback_text(FeedbackCategory.GUESS) == "No Guessing!"
    assert feedback_text(FeedbackCategory.TIMEOUT) == "Missed it!"
    assert feedback_text(FeedbackCategory.TOO_SLOW) == "Too Slow!"
    assert feedback_color(FeedbackCategory.CORRECT) == COLOR_GOOD
    assert feedback_color(FeedbackCategory.WRONG_KEY) == COLOR_BAD
