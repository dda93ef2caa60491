from __future__ import annotations

from dataclasses import dataclass

from reactgames import UnknownGameError
from reactgames.game.scoring import ReactScorer, Scorer, SidedScorer


@dataclass(frozen=True)
class GameVariant:
    name: str
    title: str
    instructions: str
    scorer: Scorer
    sided: bool


REACT = GameVariant(
    name="react",
    title="React",
    instructions="Press Spacebar as soon as the square appears.",
    scorer=ReactScorer(),
    sided=False,
)

TIPPING_POINT = GameVariant(
    name="tipping_point",
    title="Tipping Point",
    instructions="Press F / Left if the square is left of the line, J / Right if it is right of it.",
    scorer=SidedScorer(),
    sided=True,
)

_VARIANTS: dict[str, GameVariant] = {v.name: v for v in (REACT, TIPPING_POINT)}
_ALIASES = {"tippingpoint": "tipping_point", "tipping-point": "tipping_point"}


def get_variant(name: str) -> GameVariant:
    """Case-insensitive lookup; "TippingPoint" and "tipping-point" both work."""
    key = (name or "").strip().lower()
    key = _ALIASES.get(key, key)
    try:
        return _VARIANTS[key]
    except KeyError:
        raise UnknownGameError(f"Unknown game type: {name!r}. Known: {', '.join(variant_names())}") from None


def variant_names() -> list[str]:
    return sorted(_VARIANTS)
