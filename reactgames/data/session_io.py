from __future__ import annotations

import logging
import math
import random
import xml.etree.ElementTree as ET
from dataclasses import replace
from pathlib import Path
from typing import Callable

from reactgames import SessionFileError
from reactgames.data.models import (
    RESULT_ATTRIBUTES,
    SESSION_ATTRIBUTES,
    TRIAL_ATTRIBUTES,
    SessionConfig,
    SessionData,
    Side,
    TrialConfig,
    to_attributes,
)
from reactgames.game.trial_generator import generate_block, random_delay, random_duration, random_side
from reactgames.game.variants import get_variant

logger = logging.getLogger(__name__)

TAG_SESSION = "session"
TAG_GAME_DATA = "gameData"
TAG_TRIALS = "trials"
TAG_TRIAL = "trial"


def _parse_number(node: ET.Element, attr: str, cast: Callable, default, context: str):
    raw = node.get(attr)
    if raw is None:
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        value = None
    if value is None or not math.isfinite(value):
        logger.warning(f"{context}: bad value {attr}={raw!r}, using {default}")
        return default
    return value


def parse_session_config(node: ET.Element | None) -> SessionConfig:
    defaults = SessionConfig()
    if node is None:
        logger.info("No <gameData> element, using default session settings")
        return defaults

    values = {}
    for field_name, attr in SESSION_ATTRIBUTES.items():
        default = getattr(defaults, field_name)
        if field_name == "game_type":
            values[field_name] = (node.get(attr) or default).strip().lower()
            continue
        cast = int if isinstance(default, int) else float
        values[field_name] = _parse_number(node, attr, cast, default, TAG_GAME_DATA)

    try:
        return SessionConfig(**values)
    except ValueError as exc:
        raise SessionFileError(f"Invalid <gameData>: {exc}") from exc


def _parse_positive(
    node: ET.Element,
    attr: str,
    index: int,
    allow_zero: bool,
    fallback: Callable[[], float],
) -> float:
    raw = node.get(attr)
    if raw is None:
        value = fallback()
        logger.debug(f"trial {index}: no {attr}, generated {value}")
        return value
    try:
        value = float(raw.strip())
    except ValueError:
        value = None
    if value is None or not math.isfinite(value) or value < 0 or (value == 0 and not allow_zero):
        generated = fallback()
        logger.warning(f"trial {index}: bad {attr}={raw!r}, generated {generated}")
        return generated
    return value


def parse_trial(
    node: ET.Element,
    index: int,
    config: SessionConfig,
    rng: random.Random,
    sided: bool,
) -> TrialConfig:
    delay = _parse_positive(node, "delay", index, True, lambda: random_delay(rng, config))
    duration = _parse_positive(node, "duration", index, False, lambda: random_duration(rng, config))

    side = None
    if sided:
        raw_side = node.get("side")
        try:
            side = Side.parse(raw_side)
        except ValueError:
            side = None
            logger.warning(f"trial {index}: bad side={raw_side!r}")
        if side is None:
            side = random_side(rng)

    return TrialConfig(index=index, delay=delay, display_duration=duration, side=side)


def parse_trials(
    node: ET.Element | None,
    config: SessionConfig,
    rng: random.Random,
    sided: bool,
) -> list[TrialConfig]:
    if node is None:
        logger.info(f"No <trials> element, generating {config.trial_count} trials")
        return generate_block(config, seed=rng.randrange(2**31), sided=sided)
    return [
        parse_trial(child, i, config, rng, sided)
        for i, child in enumerate(node.findall(TAG_TRIAL))
    ]


def _warn_degenerate_windows(config: SessionConfig, trials: list[TrialConfig]) -> None:
    if config.guess_time_limit <= 0:
        return
    for trial in trials:
        if config.response_window(trial) <= config.guess_time_limit:
            logger.warning(
                f"trial {trial.index}: response window {config.response_window(trial)}s "
                f"does not exceed the guess limit {config.guess_time_limit}s"
            )


def parse_session(root: ET.Element, seed: int = 0, game_type: str | None = None) -> SessionData:
    if root.tag != TAG_SESSION:
        raise SessionFileError(f"Expected <{TAG_SESSION}> root, got <{root.tag}>")
    config = parse_session_config(root.find(TAG_GAME_DATA))
    variant = get_variant(game_type or config.game_type)
    if variant.name != config.game_type:
        config = replace(config, game_type=variant.name)
    trials = parse_trials(root.find(TAG_TRIALS), config, random.Random(seed), variant.sided)
    _warn_degenerate_windows(config, trials)
    return SessionData(config=config, trials=trials)


def load_session_text(text: str, seed: int = 0, game_type: str | None = None) -> SessionData:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise SessionFileError(f"Session description is not valid XML: {exc}") from exc
    return parse_session(root, seed=seed, game_type=game_type)


def load_session(path: str | Path, seed: int = 0, game_type: str | None = None) -> SessionData:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise SessionFileError(f"Cannot read session file {p}: {exc}") from exc
    data = load_session_text(text, seed=seed, game_type=game_type)
    logger.info(f"Loaded {len(data.trials)} trials from {p} ({data.config.game_type})")
    return data


def build_session_log(data: SessionData) -> ET.Element:
    root = ET.Element(TAG_SESSION)
    ET.SubElement(root, TAG_GAME_DATA, to_attributes(data.config, SESSION_ATTRIBUTES))
    trials_node = ET.SubElement(root, TAG_TRIALS)
    results = {r.trial_index: r for r in data.results}
    for trial in data.trials:
        attrs = to_attributes(trial, TRIAL_ATTRIBUTES)
        result = results.get(trial.index)
        if result is not None:
            attrs.update(to_attributes(result, RESULT_ATTRIBUTES))
        ET.SubElement(trials_node, TAG_TRIAL, attrs)
    return root


def write_session_log(path: str | Path, data: SessionData) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tree = ET.ElementTree(build_session_log(data))
    ET.indent(tree)
    tree.write(p, encoding="utf-8", xml_declaration=True)
    logger.info(f"Session log written to {p}")
    return p
