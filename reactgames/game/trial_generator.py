from __future__ import annotations

import random

from reactgames.data.models import SessionConfig, Side, TrialConfig


def _uniform(rng: random.Random, low: float, high: float) -> float:
    value = round(rng.uniform(low, high), 3)
    return min(max(value, low), high)


def random_delay(rng: random.Random, config: SessionConfig) -> float:
    return _uniform(rng, config.delay_min, config.delay_max)


def random_duration(rng: random.Random, config: SessionConfig) -> float:
    return _uniform(rng, config.duration_min, config.duration_max)


def random_side(rng: random.Random) -> Side:
    return rng.choice([Side.LEFT, Side.RIGHT])


def generate_trial(rng: random.Random, index: int, config: SessionConfig, sided: bool) -> TrialConfig:
    return TrialConfig(
        index=index,
        delay=random_delay(rng, config),
        display_duration=random_duration(rng, config),
        side=random_side(rng) if sided else None,
    )


def generate_block(config: SessionConfig, seed: int, sided: bool) -> list[TrialConfig]:
    """
    Builds config.trial_count trials with delay and duration drawn from the
    session ranges. The same seed always gives the same block.
    """
    rng = random.Random(seed)
    return [generate_trial(rng, i, config, sided) for i in range(config.trial_count)]
