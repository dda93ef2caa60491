import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest

from reactgames.data.models import SessionConfig, SessionData, Side, TrialConfig
from reactgames.game.scheduler import Scheduler


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler(now_ms=0)


@pytest.fixture
def react_session() -> SessionData:
    config = SessionConfig(game_type="react", guess_time_limit=0.1, response_time_limit=0.0)
    trials = [
        TrialConfig(index=0, delay=1.0, display_duration=2.0),
        TrialConfig(index=1, delay=0.5, display_duration=1.0),
    ]
    return SessionData(config=config, trials=trials)


@pytest.fixture
def sided_session() -> SessionData:
    config = SessionConfig(game_type="tipping_point", guess_time_limit=1.0, response_time_limit=8.0)
    trials = [
        TrialConfig(index=0, delay=1.0, display_duration=10.0, side=Side.RIGHT),
        TrialConfig(index=1, delay=1.0, display_duration=10.0, side=Side.LEFT),
    ]
    return SessionData(config=config, trials=trials)
