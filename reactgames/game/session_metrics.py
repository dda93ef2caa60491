from __future__ import annotations

from dataclasses import dataclass, field

from reactgames.data.models import FeedbackCategory, TrialResult


@dataclass(frozen=True)
class SessionSummary:
    total_trials: int
    successes: int
    success_rate: float
    mean_response_time: float
    mean_accuracy: float
    category_counts: dict[str, int] = field(default_factory=dict)


def compute_success_rate(results: list[TrialResult]) -> float:
    if not results:
        return 0.0
    return sum(1 for r in results if r.success) / len(results)


def compute_mean_response_time(results: list[TrialResult]) -> float:
    rts = [r.response_time for r in results if r.category != FeedbackCategory.TIMEOUT]
    if not rts:
        return 0.0
    return sum(rts) / len(rts)


def compute_mean_accuracy(results: list[TrialResult]) -> float:
    accs = [r.accuracy for r in results if r.success]
    if not accs:
        return 0.0
    return sum(accs) / len(accs)


def count_categories(results: list[TrialResult]) -> dict[str, int]:
    counts = {c.value: 0 for c in FeedbackCategory}
    for r in results:
        counts[r.category.value] += 1
    return counts


def summarize(results: list[TrialResult]) -> SessionSummary:
    """
    Same numbers the finish screen and sessions.jsonl show.

    - mean_response_time skips timeouts (their response time is 0)
    - mean_accuracy only counts successful trials, accuracy means nothing otherwise
    """
    return SessionSummary(
        total_trials=len(results),
        successes=sum(1 for r in results if r.success),
        success_rate=compute_success_rate(results),
        mean_response_time=compute_mean_response_time(results),
        mean_accuracy=compute_mean_accuracy(results),
        category_counts=count_categories(results),
    )
