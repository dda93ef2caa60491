from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: str | None) -> Side | None:
        if value is None:
            return None
        text = str(value).strip().lower()
        for side in cls:
            if side.value == text:
                return side
        raise ValueError(f"Unknown side: {value!r}")


def _require_finite(record: Any, *names: str) -> None:
    # nan passes every comparison below
    for name in names:
        value = getattr(record, name)
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value}")


class FeedbackCategory(Enum):
    TIMEOUT = "timeout"
    GUESS = "guess"
    CORRECT = "correct"
    WRONG_KEY = "wrong_key"
    TOO_SLOW = "too_slow"


@dataclass(frozen=True)
class TrialConfig:
    """
    One trial of a session.

    delay            - seconds before the stimulus appears
    display_duration - seconds the stimulus stays visible (the response window)
    side             - where the stimulus is drawn, None for games without sides
    """
    index: int
    delay: float
    display_duration: float
    side: Side | None = None

    def __post_init__(self) -> None:
        _require_finite(self, "delay", "display_duration")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")
        if self.display_duration <= 0:
            raise ValueError(f"display_duration must be > 0, got {self.display_duration}")


@dataclass(frozen=True)
class SessionConfig:
    """
    Timing limits shared by every trial of a session.

    guess_time_limit == 0 turns the guess check off.
    response_time_limit <= 0 means the trial's display_duration is the limit.
    The min/max fields are the ranges used to generate missing trial values.
    """
    game_type: str = "react"
    guess_time_limit: float = 0.0
    response_time_limit: float = 0.0
    delay_min: float = 1.0
    delay_max: float = 3.0
    duration_min: float = 1.0
    duration_max: float = 2.0
    trial_count: int = 10

    def __post_init__(self) -> None:
        _require_finite(
            self,
            "guess_time_limit",
            "response_time_limit",
            "delay_min",
            "delay_max",
            "duration_min",
            "duration_max",
        )
        if self.guess_time_limit < 0:
            raise ValueError(f"guess_time_limit must be >= 0, got {self.guess_time_limit}")
        if (
            self.guess_time_limit > 0
            and self.response_time_limit > 0
            and not self.guess_time_limit < self.response_time_limit
        ):
            raise ValueError(
                f"guess_time_limit ({self.guess_time_limit}) must be below "
                f"response_time_limit ({self.response_time_limit})"
            )
        if self.delay_min < 0 or self.delay_max < self.delay_min:
            raise ValueError(f"bad delay range: {self.delay_min}..{self.delay_max}")
        if self.duration_min <= 0 or self.duration_max < self.duration_min:
            raise ValueError(f"bad duration range: {self.duration_min}..{self.duration_max}")
        if self.trial_count < 0:
            raise ValueError(f"trial_count must be >= 0, got {self.trial_count}")

    def response_window(self, trial: TrialConfig) -> float:
        if self.response_time_limit > 0:
            return self.response_time_limit
        return trial.display_duration


@dataclass(frozen=True)
class TrialResult:
    """
    Outcome of one trial. response_time == 0 means there was no response.
    accuracy only means something when success is True.
    """
    trial_index: int
    response_time: float
    success: bool
    key_correct: bool
    accuracy: float
    category: FeedbackCategory
    response_action: str | None = None


@dataclass
class SessionData:
    config: SessionConfig
    trials: list[TrialConfig]
    results: list[TrialResult] = field(default_factory=list)


# field name -> attribute name in the session log
TRIAL_ATTRIBUTES: dict[str, str] = {
    "index": "index",
    "delay": "delay",
    "display_duration": "duration",
    "side": "side",
}

RESULT_ATTRIBUTES: dict[str, str] = {
    "response_time": "responseTime",
    "success": "success",
    "accuracy": "accuracy",
    "key_correct": "keycorrect",
    "category": "category",
    "response_action": "response",
}

SESSION_ATTRIBUTES: dict[str, str] = {
    "game_type": "gameType",
    "guess_time_limit": "guessTimeLimit",
    "response_time_limit": "responseTimeLimit",
    "delay_min": "delayMin",
    "delay_max": "delayMax",
    "duration_min": "durationMin",
    "duration_max": "durationMax",
    "trial_count": "trialCount",
}


def format_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(round(value, 6))
    return str(value)


def to_attributes(record: Any, mapping: dict[str, str]) -> dict[str, str]:
    """Flattens a record into attribute pairs following mapping; None values are skipped."""
    names = {f.name for f in fields(record)}
    attrs: dict[str, str] = {}
    for field_name, attr_name in mapping.items():
        if field_name not in names:
            raise KeyError(f"{type(record).__name__} has no field {field_name!r}")
        value = getattr(record, field_name)
        if value is None:
            continue
        attrs[attr_name] = format_value(value)
    return attrs
