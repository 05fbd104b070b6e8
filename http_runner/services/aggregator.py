"""
Result aggregation service.

Collects request outcomes in dispatch order and reduces them to a RunSummary.
"""

from typing import Iterable

from ..schemas.result import RequestOutcome, RunSummary


def summarize(outcomes: Iterable[RequestOutcome]) -> RunSummary:
    """
    Compute the run summary for a sequence of outcomes.

    Args:
        outcomes: Outcomes in the order the requests were dispatched

    Returns:
        RunSummary with counts, success rate (0.0 for an empty run) and the
        outcomes in their original order
    """
    outcomes = list(outcomes)
    total = len(outcomes)
    succeeded = sum(1 for outcome in outcomes if outcome.success)
    success_rate = (succeeded / total) * 100 if total else 0.0

    return RunSummary(
        total=total,
        succeeded=succeeded,
        failed=total - succeeded,
        success_rate=success_rate,
        outcomes=outcomes,
    )


class ResultAggregator:
    """Append-only collection of outcomes for one run."""

    def __init__(self) -> None:
        self._outcomes: list[RequestOutcome] = []

    def record(self, outcome: RequestOutcome) -> None:
        self._outcomes.append(outcome)

    @property
    def outcomes(self) -> tuple[RequestOutcome, ...]:
        return tuple(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def summary(self) -> RunSummary:
        return summarize(self._outcomes)
