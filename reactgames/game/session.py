from __future__ import annotations

import logging
import time
from dataclasses import asdict
from pathlib import Path

from reactgames.data.logger import JsonlLogger
from reactgames.data.models import (
    RESULT_ATTRIBUTES,
    TRIAL_ATTRIBUTES,
    FeedbackCategory,
    SessionData,
    TrialConfig,
    TrialResult,
    to_attributes,
)
from reactgames.data.session_io import write_session_log
from reactgames.game.session_metrics import SessionSummary, summarize

logger = logging.getLogger(__name__)
trace = logging.getLogger("reactgames.trace")


def trace_message(result: TrialResult) -> str:
    rt = result.response_time
    if result.category == FeedbackCategory.TIMEOUT:
        return "Fail! No response!"
    if result.category == FeedbackCategory.GUESS:
        return f"Fail! Guess response! responseTime = {rt}"
    if result.category == FeedbackCategory.CORRECT:
        return f"Success! responseTime = {rt}"
    if result.category == FeedbackCategory.WRONG_KEY:
        return f"Fail! Wrong key! responseTime = {rt}"
    return f"Fail! Slow response! responseTime = {rt}"


class SessionAggregator:
    """
    Owns the SessionData of a running session: hands the trials to the
    runner, collects one result per trial in order and exports everything
    when the session is over.
    """

    def __init__(
        self,
        data: SessionData,
        session_id: str | None = None,
        events_logger: JsonlLogger | None = None,
        sessions_logger: JsonlLogger | None = None,
    ) -> None:
        self.data = data
        self.session_id = session_id or f"s{int(time.time())}"
        self.events_logger = events_logger
        self.sessions_logger = sessions_logger

    @property
    def trials(self) -> list[TrialConfig]:
        return self.data.trials

    @property
    def results(self) -> list[TrialResult]:
        return self.data.results

    def is_complete(self) -> bool:
        return len(self.data.results) == len(self.data.trials)

    def add_result(self, result: TrialResult) -> None:
        """
        Stores the result of the next trial in line.

        The feedback category travels inside the result, so the trace line and
        the JSONL event are both built from it. A result for any other trial
        index is a bug in the caller and raises ValueError.
        """
        position = len(self.data.results)
        if position >= len(self.data.trials):
            raise ValueError(f"Session already has all {position} results")
        expected = self.data.trials[position].index
        if result.trial_index != expected:
            raise ValueError(f"Result for trial {result.trial_index} arrived, expected trial {expected}")

        self.data.results.append(result)
        trace.info(trace_message(result))

        if self.events_logger is not None:
            record = {
                "timestamp": int(time.time()),
                "session_id": self.session_id,
                "game_type": self.data.config.game_type,
            }
            record.update(to_attributes(self.data.trials[position], TRIAL_ATTRIBUTES))
            record.update(to_attributes(result, RESULT_ATTRIBUTES))
            self.events_logger.write(record)

    def finish(self, log_path: str | Path | None = None) -> SessionSummary:
        if not self.is_complete():
            logger.warning(
                f"Session {self.session_id} ended after {len(self.results)} of {len(self.trials)} trials"
            )
        if log_path is not None:
            write_session_log(log_path, self.data)
        summary = summarize(self.results)
        if self.sessions_logger is not None:
            record = {"session_id": self.session_id, "game_type": self.data.config.game_type}
            record.update(asdict(summary))
            self.sessions_logger.write(record)
        logger.info(
            f"Session {self.session_id}: {summary.successes}/{summary.total_trials} successful, "
            f"mean RT {summary.mean_response_time:.3f}s, mean accuracy {summary.mean_accuracy:.3f}"
        )
        return summary
