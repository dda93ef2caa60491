from __future__ import annotations

import logging
from collections import deque
from typing import Callable

from reactgames.data.models import FeedbackCategory, SessionConfig, TrialConfig, TrialResult
from reactgames.game.scheduler import Scheduler, Timer
from reactgames.game.scoring import Scorer

logger = logging.getLogger(__name__)

STATE_IDLE = "IDLE"
STATE_DELAYING = "DELAYING"                    # stimulus hidden, waiting for trial.delay
STATE_AWAITING_RESPONSE = "AWAITING_RESPONSE"  # stimulus shown, input accepted
STATE_RESOLVED = "RESOLVED"                    # result produced, about to move on
STATE_SESSION_FINISHED = "SESSION_FINISHED"


def seconds_to_ms(value: float) -> int:
    return int(round(value * 1000))


class TrialRunner:
    """
    Runs the trials of one session one after another.

    Per trial: IDLE -> DELAYING -> AWAITING_RESPONSE -> RESOLVED, then the
    next trial or SESSION_FINISHED. The waits are timers on the scheduler;
    player presses go through post_response() and are only looked at while
    the runner is AWAITING_RESPONSE. Every trial ends with exactly one
    result, either from the first accepted press or from the display timer
    running out (response time 0).
    """

    def __init__(
        self,
        trials: list[TrialConfig],
        session_config: SessionConfig,
        scorer: Scorer,
        scheduler: Scheduler | None = None,
        on_result: Callable[[TrialResult, FeedbackCategory], None] | None = None,
        on_stimulus: Callable[[TrialConfig, bool], None] | None = None,
    ) -> None:
        self.trials = list(trials)
        self.session_config = session_config
        self.scorer = scorer
        self.scheduler = scheduler or Scheduler()
        self.on_result = on_result
        self.on_stimulus = on_stimulus

        self.state: str = STATE_IDLE
        self.current_index: int = 0
        self.stimulus_visible: bool = False
        self.listening: bool = False
        self.shown_at_ms: int | None = None
        self.results: list[TrialResult] = []
        self.last_category: FeedbackCategory | None = None

        self._responses: deque[tuple[str, int]] = deque()
        self._timer: Timer | None = None
        self._started = False

    @property
    def current_trial(self) -> TrialConfig | None:
        if self.current_index < len(self.trials):
            return self.trials[self.current_index]
        return None

    def start(self, now_ms: int = 0) -> None:
        if self._started:
            raise RuntimeError("TrialRunner.start() called twice")
        self._started = True
        self.scheduler.advance_to(now_ms)
        logger.info(f"Session started with {len(self.trials)} trials")
        self._begin_trial()
        self.scheduler.advance_to(now_ms)

    def post_response(self, action: str, now_ms: int) -> None:
        """Queues a press; it is looked at on the next update() that reaches now_ms."""
        self._responses.append((action, now_ms))

    def respond(self, action: str, now_ms: int) -> None:
        self.post_response(action, now_ms)
        self.update(now_ms)

    def update(self, now_ms: int) -> None:
        if not self._started:
            return
        while self._responses and self._responses[0][1] <= now_ms:
            action, at_ms = self._responses.popleft()
            at_ms = max(at_ms, self.scheduler.now_ms)
            # timers due at the same moment go first: a press exactly at the
            # end of the window is a timeout
            self.scheduler.advance_to(at_ms)
            self._handle_response(action, at_ms)
        self.scheduler.advance_to(now_ms)

    def is_finished(self) -> bool:
        return self.state == STATE_SESSION_FINISHED

    # --------------------------

    def _begin_trial(self) -> None:
        trial = self.current_trial
        if trial is None:
            self.state = STATE_SESSION_FINISHED
            self.listening = False
            logger.info(f"Session finished, {len(self.results)} results")
            return
        self.state = STATE_IDLE
        self.shown_at_ms = None
        self._set_stimulus(trial, False)
        self.state = STATE_DELAYING
        self._timer = self.scheduler.call_later(seconds_to_ms(trial.delay), self._on_delay_elapsed)

    def _on_delay_elapsed(self) -> None:
        trial = self.current_trial
        if self.state != STATE_DELAYING or trial is None:
            return
        self.state = STATE_AWAITING_RESPONSE
        self.shown_at_ms = self.scheduler.now_ms
        self.listening = True
        self._set_stimulus(trial, True)
        self._timer = self.scheduler.call_later(
            seconds_to_ms(trial.display_duration), self._on_display_elapsed
        )

    def _on_display_elapsed(self) -> None:
        if self.state != STATE_AWAITING_RESPONSE:
            return
        self._resolve(response_time=0.0, action=None)

    def _handle_response(self, action: str, at_ms: int) -> None:
        if not self.listening or self.state != STATE_AWAITING_RESPONSE:
            logger.debug(f"Ignored {action} at {at_ms} ms in state {self.state}")
            return
        if action not in self.scorer.accepted_actions:
            logger.debug(f"Ignored unmapped action {action}")
            return
        if self._timer is not None:
            self._timer.cancel()
        start = self.shown_at_ms if self.shown_at_ms is not None else at_ms
        elapsed_ms = max(1, at_ms - start)
        self._resolve(response_time=elapsed_ms / 1000.0, action=action)

    def _resolve(self, response_time: float, action: str | None) -> None:
        trial = self.current_trial
        self.listening = False
        self._timer = None
        self._set_stimulus(trial, False)
        result, category = self.scorer.score(trial, self.session_config, response_time, action)
        self.state = STATE_RESOLVED
        self.results.append(result)
        self.last_category = category
        if self.on_result is not None:
            self.on_result(result, category)
        self.current_index += 1
        self._begin_trial()

    def _set_stimulus(self, trial: TrialConfig, visible: bool) -> None:
        if self.stimulus_visible == visible:
            return
        self.stimulus_visible = visible
        if self.on_stimulus is not None:
            self.on_stimulus(trial, visible)
