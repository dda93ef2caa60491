from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowConfig:
    width: int = 1024
    height: int = 640


@dataclass(frozen=True)
class RunConfig:
    game_type: str = "react"
    output_dir: str = "output"
    seed: int = 1
    fps: int = 60
    feedback_ms: int = 800
    events_file: str = "events.jsonl"
    sessions_file: str = "sessions.jsonl"
    trace_file: str = "trace.log"

    def output_path(self, name: str) -> Path:
        return Path(self.output_dir).expanduser() / name


ENV_OVERRIDES = {
    "REACTGAMES_GAME": "game_type",
    "REACTGAMES_OUTPUT_DIR": "output_dir",
    "REACTGAMES_SEED": "seed",
    "REACTGAMES_FPS": "fps",
}


def _coerce(config: RunConfig, values: Mapping[str, Any], source: str) -> RunConfig:
    types = {f.name: type(f.default) for f in fields(config)}
    updates: dict[str, Any] = {}
    for name, raw in values.items():
        if name not in types:
            logger.warning(f"{source}: unknown setting {name!r} ignored")
            continue
        try:
            updates[name] = types[name](raw)
        except (TypeError, ValueError):
            logger.warning(f"{source}: bad value {name}={raw!r} ignored")
    return replace(config, **updates)


def load_run_config(
    settings_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> RunConfig:
    """
    Defaults, then the JSON settings file (if any), then REACTGAMES_* env vars.
    A missing or broken settings file just means defaults.
    """
    config = RunConfig()
    if settings_path is not None and settings_path.exists():
        try:
            payload = json.loads(settings_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Cannot read settings {settings_path}: {exc}")
            payload = {}
        if isinstance(payload, dict):
            config = _coerce(config, payload, str(settings_path))

    env = os.environ if env is None else env
    from_env = {field: env[var].strip() for var, field in ENV_OVERRIDES.items() if env.get(var, "").strip()}
    if from_env:
        config = _coerce(config, from_env, "environment")
    return config
